"""Donation endpoints."""

from uuid import UUID

from fastapi import APIRouter, status

from app.dependencies import CurrentUser, DatabaseSession
from app.schemas.donations import DonationCreate, DonationResponse, DonationUpdate
from app.services.donation_service import DonationService

router = APIRouter(prefix="/donations", tags=["Donations"])


@router.get("", response_model=list[DonationResponse])
async def list_donations(
    current_user: CurrentUser,
    db: DatabaseSession,
) -> list[DonationResponse]:
    return await DonationService(db).list_donations(current_user.id)


@router.get("/pending", response_model=list[DonationResponse])
async def list_pending_donations(
    current_user: CurrentUser,
    db: DatabaseSession,
) -> list[DonationResponse]:
    """List the caller's donations still awaiting a decision."""
    return await DonationService(db).list_pending(current_user.id)


@router.post("", response_model=DonationResponse, status_code=status.HTTP_201_CREATED)
async def create_donation(
    data: DonationCreate,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> DonationResponse:
    return await DonationService(db).create_donation(current_user.id, data)


@router.get("/{donation_id}", response_model=DonationResponse)
async def get_donation(
    donation_id: UUID,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> DonationResponse:
    return await DonationService(db).get_donation(donation_id, current_user.id)


@router.put("/{donation_id}", response_model=DonationResponse)
async def update_donation(
    donation_id: UUID,
    data: DonationUpdate,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> DonationResponse:
    """
    Update a donation.

    Status may only move from PENDING to ACCEPTED, COMPLETED or REJECTED;
    any other change is rejected with 400.
    """
    return await DonationService(db).update_donation(donation_id, current_user.id, data)


@router.delete("/{donation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_donation(
    donation_id: UUID,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> None:
    """Delete a donation; only allowed while it is PENDING."""
    await DonationService(db).delete_donation(donation_id, current_user.id)
