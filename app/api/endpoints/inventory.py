"""Inventory endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query, status

from app.dependencies import CurrentUser, DatabaseSession
from app.schemas.inventory import (
    InventoryCreate,
    InventoryResponse,
    InventoryStats,
    InventoryUpdate,
    MedicationType,
    OverviewDataPoint,
)
from app.services.inventory_service import InventoryService

router = APIRouter(prefix="/api/inventories", tags=["Inventory"])


@router.get(
    "/stats",
    response_model=InventoryStats,
    status_code=status.HTTP_200_OK,
    summary="Inventory counters",
)
async def get_inventory_stats(
    current_user: CurrentUser,
    db: DatabaseSession,
    pharmacy_id: UUID = Query(...),
) -> InventoryStats:
    """Total active items, low stock count and items expiring soon."""
    return await InventoryService(db).get_stats(pharmacy_id, current_user)


@router.get(
    "/overview",
    response_model=list[OverviewDataPoint],
    status_code=status.HTTP_200_OK,
    summary="Inventory distribution",
)
async def get_inventory_overview(
    current_user: CurrentUser,
    db: DatabaseSession,
    pharmacy_id: UUID = Query(...),
) -> list[OverviewDataPoint]:
    """In stock, low stock, out of stock and expired counts for charts."""
    return await InventoryService(db).get_overview(pharmacy_id, current_user)


@router.get(
    "/{pharmacy_id}/items",
    response_model=list[InventoryResponse],
    status_code=status.HTTP_200_OK,
    summary="List inventory items",
)
async def list_inventory(
    pharmacy_id: UUID,
    current_user: CurrentUser,
    db: DatabaseSession,
    search: str | None = Query(None, description="Case-insensitive name match"),
    medication_type: MedicationType | None = Query(None, alias="type"),
    low_stock: bool = Query(False),
    expiring: bool = Query(False),
) -> list[InventoryResponse]:
    """
    List a pharmacy's inventory.

    Only the first supplied filter applies: ``search``, ``type``,
    ``low_stock``, ``expiring``. Without filters, active items are listed.
    """
    return await InventoryService(db).list_items(
        pharmacy_id,
        current_user,
        search=search,
        medication_type=medication_type,
        low_stock=low_stock,
        expiring=expiring,
    )


@router.get(
    "/{pharmacy_id}/items/{item_id}",
    response_model=InventoryResponse,
    status_code=status.HTTP_200_OK,
    summary="Get inventory item",
)
async def get_inventory_item(
    pharmacy_id: UUID,
    item_id: UUID,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> InventoryResponse:
    """Get one item; deactivated items are returned with ``is_active`` false."""
    return await InventoryService(db).get_item(pharmacy_id, item_id, current_user)


@router.post(
    "/{pharmacy_id}/items",
    response_model=InventoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add inventory item",
)
async def create_inventory_item(
    pharmacy_id: UUID,
    data: InventoryCreate,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> InventoryResponse:
    """Add stock; pharmacy administrators only."""
    return await InventoryService(db).create_item(pharmacy_id, data, current_user)


@router.put(
    "/{pharmacy_id}/items/{item_id}",
    response_model=InventoryResponse,
    status_code=status.HTTP_200_OK,
    summary="Update inventory item",
)
async def update_inventory_item(
    pharmacy_id: UUID,
    item_id: UUID,
    data: InventoryUpdate,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> InventoryResponse:
    """Replace an item's editable fields; pharmacy administrators only."""
    return await InventoryService(db).update_item(pharmacy_id, item_id, data, current_user)


@router.delete(
    "/{pharmacy_id}/items/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Deactivate inventory item",
)
async def delete_inventory_item(
    pharmacy_id: UUID,
    item_id: UUID,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> None:
    """Soft delete an item; pharmacy administrators only."""
    await InventoryService(db).delete_item(pharmacy_id, item_id, current_user)
