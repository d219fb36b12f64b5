"""Inventory service for pharmacy stock."""

from datetime import UTC, date, datetime, timedelta
from uuid import UUID

import structlog
from sqlalchemy import and_, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import ForbiddenException, NotFoundException
from app.models.inventory import inventory
from app.models.pharmacies import pharmacies
from app.schemas.auth import RoleName, UserPrincipal
from app.schemas.inventory import (
    InventoryCreate,
    InventoryResponse,
    InventoryStats,
    InventoryUpdate,
    MedicationType,
    OverviewDataPoint,
)
from app.services.pharmacy_service import PharmacyService

logger = structlog.get_logger()

# Window used for the per-item "expiring soon" flag
EXPIRING_FLAG_DAYS = 30


def is_low_stock(row: dict) -> bool:
    return row["quantity"] <= row["minimum_stock_level"]


def is_expired(row: dict, today: date | None = None) -> bool:
    today = today or date.today()
    return row["expiry_date"] < today


def is_expiring_within(row: dict, days: int, today: date | None = None) -> bool:
    today = today or date.today()
    return row["expiry_date"] < today + timedelta(days=days)


def to_response(row: dict, pharmacy_name: str | None = None) -> InventoryResponse:
    """Build the API view of an inventory row with derived flags."""
    today = date.today()
    return InventoryResponse.model_validate(
        {
            **row,
            "pharmacy_name": pharmacy_name,
            "low_stock": is_low_stock(row),
            "expired": is_expired(row, today),
            "expiring_within_30_days": is_expiring_within(row, EXPIRING_FLAG_DAYS, today),
        }
    )


class InventoryService:
    """Service for per-pharmacy inventory operations."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def _get_pharmacy(self, pharmacy_id: UUID) -> dict:
        result = await self.db.execute(select(pharmacies).where(pharmacies.c.id == pharmacy_id))
        pharmacy = result.mappings().first()
        if not pharmacy:
            raise NotFoundException(f"Pharmacy not found with id: {pharmacy_id}")
        return dict(pharmacy)

    async def _get_item(self, pharmacy_id: UUID, item_id: UUID) -> dict:
        result = await self.db.execute(select(inventory).where(inventory.c.id == item_id))
        item = result.mappings().first()

        if not item:
            raise NotFoundException(f"Inventory item not found with id: {item_id}")

        if item["pharmacy_id"] != pharmacy_id:
            raise ForbiddenException("Inventory item does not belong to this pharmacy")

        return dict(item)

    async def list_items(
        self,
        pharmacy_id: UUID,
        principal: UserPrincipal,
        search: str | None = None,
        medication_type: MedicationType | None = None,
        low_stock: bool = False,
        expiring: bool = False,
    ) -> list[InventoryResponse]:
        """
        List a pharmacy's stock.

        Only the first given filter applies, in this order: name search,
        medication type, low stock, expiring. Without a filter only active
        items are returned.
        """
        pharmacy = await self._get_pharmacy(pharmacy_id)
        await PharmacyService.require_member(self.db, pharmacy_id, principal)

        conditions = [inventory.c.pharmacy_id == pharmacy_id]

        if search:
            conditions.append(inventory.c.medication_name.icontains(search, autoescape=True))
        elif medication_type is not None:
            conditions.append(inventory.c.medication_type == medication_type.value)
        elif low_stock:
            conditions.append(inventory.c.quantity <= inventory.c.minimum_stock_level)
        elif expiring:
            today = date.today()
            threshold = today + timedelta(days=settings.expiry_threshold_days)
            conditions.append(inventory.c.expiry_date.between(today, threshold))
        else:
            conditions.append(inventory.c.is_active.is_(True))

        query = select(inventory).where(and_(*conditions)).order_by(inventory.c.medication_name)
        result = await self.db.execute(query)

        return [to_response(dict(row), pharmacy["name"]) for row in result.mappings().all()]

    async def get_item(
        self, pharmacy_id: UUID, item_id: UUID, principal: UserPrincipal
    ) -> InventoryResponse:
        """Get one item; soft-deleted items stay readable."""
        pharmacy = await self._get_pharmacy(pharmacy_id)
        await PharmacyService.require_member(self.db, pharmacy_id, principal)

        item = await self._get_item(pharmacy_id, item_id)
        return to_response(item, pharmacy["name"])

    async def create_item(
        self, pharmacy_id: UUID, data: InventoryCreate, principal: UserPrincipal
    ) -> InventoryResponse:
        """Add an active item to a pharmacy's stock."""
        pharmacy = await self._get_pharmacy(pharmacy_id)
        await PharmacyService.require_admin(self.db, pharmacy_id, principal)

        values = data.model_dump()
        values["medication_type"] = data.medication_type.value

        query = (
            inventory.insert()
            .values(pharmacy_id=pharmacy_id, is_active=True, **values)
            .returning(inventory)
        )
        result = await self.db.execute(query)
        await self.db.commit()
        item = dict(result.mappings().one())

        logger.info(
            "inventory_item_created",
            pharmacy_id=str(pharmacy_id),
            item_id=str(item["id"]),
            quantity=item["quantity"],
        )
        return to_response(item, pharmacy["name"])

    async def update_item(
        self,
        pharmacy_id: UUID,
        item_id: UUID,
        data: InventoryUpdate,
        principal: UserPrincipal,
    ) -> InventoryResponse:
        """Replace the editable fields of an item, including its active flag."""
        pharmacy = await self._get_pharmacy(pharmacy_id)
        await PharmacyService.require_admin(self.db, pharmacy_id, principal)
        await self._get_item(pharmacy_id, item_id)

        values = data.model_dump()
        values["medication_type"] = data.medication_type.value
        values["updated_at"] = datetime.now(UTC)

        query = update(inventory).where(inventory.c.id == item_id).values(**values).returning(inventory)
        result = await self.db.execute(query)
        await self.db.commit()
        item = dict(result.mappings().one())

        logger.info("inventory_item_updated", pharmacy_id=str(pharmacy_id), item_id=str(item_id))
        return to_response(item, pharmacy["name"])

    async def delete_item(self, pharmacy_id: UUID, item_id: UUID, principal: UserPrincipal) -> None:
        """Soft delete: the row stays with ``is_active`` false."""
        await self._get_pharmacy(pharmacy_id)
        await PharmacyService.require_admin(self.db, pharmacy_id, principal)
        await self._get_item(pharmacy_id, item_id)

        await self.db.execute(
            update(inventory)
            .where(inventory.c.id == item_id)
            .values(is_active=False, updated_at=datetime.now(UTC))
        )
        await self.db.commit()

        logger.info("inventory_item_deactivated", pharmacy_id=str(pharmacy_id), item_id=str(item_id))

    async def _count(self, *conditions) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(inventory).where(and_(*conditions))
        )
        return result.scalar_one()

    async def get_stats(self, pharmacy_id: UUID, principal: UserPrincipal) -> InventoryStats:
        """Counters for a pharmacy; only the total is restricted to active items."""
        await self._get_pharmacy(pharmacy_id)
        await PharmacyService.require_member(self.db, pharmacy_id, principal)

        today = date.today()
        threshold = today + timedelta(days=settings.expiry_threshold_days)
        owned = inventory.c.pharmacy_id == pharmacy_id

        return InventoryStats(
            total_items=await self._count(owned, inventory.c.is_active.is_(True)),
            low_stock_count=await self._count(
                owned, inventory.c.quantity <= inventory.c.minimum_stock_level
            ),
            expiring_soon_count=await self._count(
                owned, inventory.c.expiry_date.between(today, threshold)
            ),
        )

    async def get_overview(
        self, pharmacy_id: UUID, principal: UserPrincipal
    ) -> list[OverviewDataPoint]:
        """
        Stock distribution for the dashboard chart.

        In-stock is ``total - low - out_of_stock - expired`` floored at zero.
        Low stock already includes out-of-stock rows, so those are subtracted
        twice.
        """
        if not (principal.has_role(RoleName.PHARMACY) or principal.is_admin):
            raise ForbiddenException("Only pharmacy accounts can view the inventory overview")

        await self._get_pharmacy(pharmacy_id)
        await PharmacyService.require_member(self.db, pharmacy_id, principal)

        owned = inventory.c.pharmacy_id == pharmacy_id
        active = and_(owned, inventory.c.is_active.is_(True))

        total = await self._count(active)
        low = await self._count(owned, inventory.c.quantity <= inventory.c.minimum_stock_level)
        out_of_stock = await self._count(active, inventory.c.quantity == 0)
        expired = await self._count(active, inventory.c.expiry_date < date.today())
        in_stock = max(0, total - low - out_of_stock - expired)

        return [
            OverviewDataPoint(name="In Stock", value=in_stock),
            OverviewDataPoint(name="Low Stock", value=low),
            OverviewDataPoint(name="Out of Stock", value=out_of_stock),
            OverviewDataPoint(name="Expired", value=expired),
        ]
