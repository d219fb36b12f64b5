"""Billing service: bill creation with atomic stock decrement."""

from datetime import UTC, datetime
from decimal import Decimal
from uuid import UUID, uuid4

import structlog
from sqlalchemy import and_, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    BadRequestException,
    ConflictException,
    ForbiddenException,
    InsufficientStockException,
    NotFoundException,
)
from app.models.bills import bill_items, bills
from app.models.inventory import inventory
from app.models.pharmacies import pharmacies
from app.models.users import users
from app.schemas.auth import RoleName, UserPrincipal
from app.schemas.bills import BillResponse, CreateBillRequest
from app.services.pharmacy_service import PharmacyService

logger = structlog.get_logger()

ZERO = Decimal("0.00")
BILL_NUMBER_ATTEMPTS = 5


def generate_bill_number() -> str:
    """Return a ``BILL-XXXXXXXX`` number from a random UUID."""
    return "BILL-" + uuid4().hex[:8].upper()


def compute_totals(subtotal: Decimal, discount: Decimal, tax: Decimal) -> Decimal:
    """Bill total is the subtotal less discount plus tax."""
    return subtotal - discount + tax


class BillingService:
    """Service for creating and reading bills."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def create_bill(self, data: CreateBillRequest, principal: UserPrincipal) -> BillResponse:
        """
        Create a bill and decrement stock in one transaction.

        Checks run in order: caller role, pharmacy exists, caller works at the
        pharmacy, customer exists or a walk-in name is given, then each item's
        inventory row exists, belongs to the pharmacy and has enough stock.

        Raises:
            ForbiddenException: Caller is not pharmacy staff or admin
            NotFoundException: Pharmacy, customer or inventory row is missing
            BadRequestException: No customer, or an item from another pharmacy
            InsufficientStockException: Requested quantity exceeds stock
        """
        if not (principal.has_role(RoleName.PHARMACY) or principal.is_admin):
            raise ForbiddenException("Only pharmacy staff can create bills")

        try:
            bill = await self._create_bill(data, principal)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(
            "bill_created",
            bill_id=str(bill["id"]),
            bill_number=bill["bill_number"],
            pharmacy_id=str(data.pharmacy_id),
            total=str(bill["total_amount"]),
            items=len(data.items),
        )
        return await self.get_bill_by_id(bill["id"], principal)

    async def _next_bill_number(self) -> str:
        """Draw bill numbers until one is not already taken."""
        for _ in range(BILL_NUMBER_ATTEMPTS):
            number = generate_bill_number()
            result = await self.db.execute(select(bills.c.id).where(bills.c.bill_number == number))
            if result.first() is None:
                return number
            logger.warning("bill_number_collision", bill_number=number)
        raise ConflictException("Could not allocate a unique bill number")

    async def _create_bill(self, data: CreateBillRequest, principal: UserPrincipal) -> dict:
        result = await self.db.execute(
            select(pharmacies).where(pharmacies.c.id == data.pharmacy_id)
        )
        pharmacy = result.mappings().first()
        if not pharmacy:
            raise NotFoundException(f"Pharmacy not found with id: {data.pharmacy_id}")

        if not principal.is_admin:
            assignment = await PharmacyService.get_active_assignment(
                self.db, data.pharmacy_id, principal.id
            )
            if not assignment:
                raise ForbiddenException("You are not authorized to create bills for this pharmacy")

        customer_name = data.customer_name
        if data.customer_id is not None:
            result = await self.db.execute(select(users).where(users.c.id == data.customer_id))
            customer = result.mappings().first()
            if not customer:
                raise NotFoundException(f"Customer not found with id: {data.customer_id}")
            if not customer_name:
                customer_name = f"{customer['first_name']} {customer['last_name']}"
        elif not customer_name or not customer_name.strip():
            raise BadRequestException("Customer name is required when customer ID is not provided")

        # Validate and decrement each line; any failure aborts the transaction
        lines = []
        subtotal = ZERO
        for line_number, item in enumerate(data.items, start=1):
            result = await self.db.execute(select(inventory).where(inventory.c.id == item.inventory_id))
            stock = result.mappings().first()

            if not stock:
                raise NotFoundException(f"Inventory item not found with id: {item.inventory_id}")

            if stock["pharmacy_id"] != data.pharmacy_id:
                raise BadRequestException(
                    f"Inventory item {stock['medication_name']} does not belong to this pharmacy"
                )

            if item.quantity > stock["quantity"]:
                raise InsufficientStockException(
                    stock["medication_name"], item.quantity, stock["quantity"]
                )

            # Conditional decrement guards against a concurrent sale of the same row
            decrement = await self.db.execute(
                update(inventory)
                .where(
                    and_(
                        inventory.c.id == item.inventory_id,
                        inventory.c.quantity >= item.quantity,
                    )
                )
                .values(
                    quantity=inventory.c.quantity - item.quantity,
                    updated_at=datetime.now(UTC),
                )
            )
            if decrement.rowcount == 0:  # type: ignore[attr-defined]
                raise InsufficientStockException(
                    stock["medication_name"], item.quantity, stock["quantity"]
                )

            unit_price = Decimal(stock["selling_price"])
            line_subtotal = unit_price * item.quantity
            subtotal += line_subtotal
            lines.append(
                {
                    "line_number": line_number,
                    "inventory_id": stock["id"],
                    "item_name": stock["medication_name"],
                    "quantity": item.quantity,
                    "unit_price": unit_price,
                    "subtotal": line_subtotal,
                    "discount_amount": ZERO,
                    "tax_amount": ZERO,
                    "total_amount": line_subtotal,
                }
            )

        result = await self.db.execute(
            insert(bills)
            .values(
                bill_number=await self._next_bill_number(),
                pharmacy_id=data.pharmacy_id,
                customer_id=data.customer_id,
                customer_name=customer_name,
                customer_phone=data.customer_phone,
                customer_email=data.customer_email,
                bill_date=datetime.now(UTC),
                subtotal=subtotal,
                discount_amount=data.discount_amount,
                tax_amount=data.tax_amount,
                total_amount=compute_totals(subtotal, data.discount_amount, data.tax_amount),
                payment_status=data.payment_status.value,
                payment_method=data.payment_method.value,
                created_by=principal.id,
                prescription_reference=data.prescription_reference,
                notes=data.notes,
            )
            .returning(bills)
        )
        bill = dict(result.mappings().one())

        await self.db.execute(
            insert(bill_items), [{"bill_id": bill["id"], **line} for line in lines]
        )
        return bill

    async def _load_bill(self, bill: dict) -> BillResponse:
        result = await self.db.execute(
            select(bill_items)
            .where(bill_items.c.bill_id == bill["id"])
            .order_by(bill_items.c.line_number)
        )
        items = [dict(row) for row in result.mappings().all()]
        return BillResponse.model_validate({**bill, "items": items})

    def _bill_query(self):
        creator = users.alias("creator")
        return select(
            bills,
            pharmacies.c.name.label("pharmacy_name"),
            (creator.c.first_name + " " + creator.c.last_name).label("created_by_name"),
        ).select_from(
            bills.join(pharmacies, bills.c.pharmacy_id == pharmacies.c.id).outerjoin(
                creator, bills.c.created_by == creator.c.id
            )
        )

    async def get_bill_by_id(self, bill_id: UUID, principal: UserPrincipal) -> BillResponse:
        """Get a bill with its items; members of the issuing pharmacy only."""
        result = await self.db.execute(self._bill_query().where(bills.c.id == bill_id))
        bill = result.mappings().first()

        if not bill:
            raise NotFoundException(f"Bill not found with id: {bill_id}")

        await PharmacyService.require_member(self.db, bill["pharmacy_id"], principal)
        return await self._load_bill(dict(bill))

    async def list_bills(self, pharmacy_id: UUID, principal: UserPrincipal) -> list[BillResponse]:
        """List a pharmacy's bills, newest first."""
        await PharmacyService.get_pharmacy_or_404(self.db, pharmacy_id)
        await PharmacyService.require_member(self.db, pharmacy_id, principal)

        result = await self.db.execute(
            self._bill_query()
            .where(bills.c.pharmacy_id == pharmacy_id)
            .order_by(bills.c.bill_date.desc())
        )
        return [await self._load_bill(dict(row)) for row in result.mappings().all()]
