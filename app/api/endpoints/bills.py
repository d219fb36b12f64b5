"""Billing endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query, status

from app.dependencies import CurrentUser, DatabaseSession
from app.schemas.bills import BillResponse, CreateBillRequest
from app.services.billing_service import BillingService

router = APIRouter(prefix="/api/bills", tags=["Billing"])


@router.post(
    "",
    response_model=BillResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create bill",
)
async def create_bill(
    data: CreateBillRequest,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> BillResponse:
    """
    Create a bill and decrement the sold stock.

    Either every line is sold and recorded or nothing changes. Returns 409
    when a line asks for more than is in stock.

    Args:
        data: Pharmacy, customer, payment details and lines
        current_user: Authenticated pharmacy staff or admin
        db: Database session

    Returns:
        Created bill with computed totals
    """
    return await BillingService(db).create_bill(data, current_user)


@router.get(
    "",
    response_model=list[BillResponse],
    status_code=status.HTTP_200_OK,
    summary="List bills of a pharmacy",
)
async def list_bills(
    current_user: CurrentUser,
    db: DatabaseSession,
    pharmacy_id: UUID = Query(...),
) -> list[BillResponse]:
    """List a pharmacy's bills, newest first."""
    return await BillingService(db).list_bills(pharmacy_id, current_user)


@router.get(
    "/{bill_id}",
    response_model=BillResponse,
    status_code=status.HTTP_200_OK,
    summary="Get bill",
)
async def get_bill(
    bill_id: UUID,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> BillResponse:
    return await BillingService(db).get_bill_by_id(bill_id, current_user)
