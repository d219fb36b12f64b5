"""Tests for billing endpoints."""

import re
from decimal import Decimal
from uuid import UUID, uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy import Update, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.inventory import inventory
from app.services import billing_service
from app.services.billing_service import compute_totals, generate_bill_number


def _auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def _bill(pharmacy_id: str, *lines: tuple[str, int], **overrides) -> dict:
    body = {
        "pharmacy_id": pharmacy_id,
        "customer_name": "Walk-in Customer",
        "payment_method": "CASH",
        "items": [{"inventory_id": item_id, "quantity": qty} for item_id, qty in lines],
    }
    body.update(overrides)
    return body


async def _quantity(client: AsyncClient, pharmacy_id: str, item_id: str, headers: dict) -> int:
    response = await client.get(
        f"/api/inventories/{pharmacy_id}/items/{item_id}", headers=headers
    )
    return response.json()["quantity"]


def test_generate_bill_number():
    number = generate_bill_number()
    assert re.fullmatch(r"BILL-[0-9A-F]{8}", number)
    assert generate_bill_number() != number


def test_compute_totals():
    assert compute_totals(Decimal("37.50"), Decimal("2.00"), Decimal("1.50")) == Decimal("37.00")


@pytest.mark.asyncio
async def test_create_bill_decrements_stock(
    client: AsyncClient, inventory_item: dict, pharmacy_id: str, pharmacy_headers: dict
) -> None:
    """Test selling 3 of 10 units leaves 7 and prices the line from stock."""
    response = await client.post(
        "/api/bills",
        json=_bill(
            pharmacy_id,
            (inventory_item["id"], 3),
            discount_amount=2.0,
            tax_amount=1.5,
        ),
        headers=pharmacy_headers,
    )
    assert response.status_code == 201
    bill = response.json()
    assert re.fullmatch(r"BILL-[0-9A-F]{8}", bill["bill_number"])
    assert bill["pharmacy_name"] == "City Pharmacy"
    assert bill["customer_name"] == "Walk-in Customer"
    assert bill["payment_status"] == "PAID"
    assert bill["created_by_name"] == "Olivia Owner"
    assert bill["subtotal"] == 37.5
    assert bill["discount_amount"] == 2.0
    assert bill["tax_amount"] == 1.5
    assert bill["total_amount"] == 37.0

    [line] = bill["items"]
    assert line["line_number"] == 1
    assert line["inventory_id"] == inventory_item["id"]
    assert line["item_name"] == "Amoxicillin 500mg"
    assert line["quantity"] == 3
    assert line["unit_price"] == 12.5
    assert line["subtotal"] == 37.5

    assert await _quantity(client, pharmacy_id, inventory_item["id"], pharmacy_headers) == 7


@pytest.mark.asyncio
async def test_create_bill_insufficient_stock(
    client: AsyncClient, inventory_item: dict, pharmacy_id: str, pharmacy_headers: dict
) -> None:
    """Test asking for more than is stocked is a conflict and changes nothing."""
    response = await client.post(
        "/api/bills",
        json=_bill(pharmacy_id, (inventory_item["id"], 11)),
        headers=pharmacy_headers,
    )
    assert response.status_code == 409
    message = response.json()["message"]
    assert "Amoxicillin 500mg" in message
    assert "Requested: 11" in message
    assert "Available: 10" in message

    assert await _quantity(client, pharmacy_id, inventory_item["id"], pharmacy_headers) == 10

    response = await client.get(
        "/api/bills", params={"pharmacy_id": pharmacy_id}, headers=pharmacy_headers
    )
    assert response.json() == []


@pytest.mark.asyncio
async def test_create_bill_is_all_or_nothing(
    client: AsyncClient,
    item_factory,
    inventory_item: dict,
    pharmacy_id: str,
    pharmacy_headers: dict,
) -> None:
    """Test a failing second line rolls back the decrement of the first."""
    scarce = await item_factory(
        pharmacy_id, pharmacy_headers, medication_name="Insulin", quantity=1
    )

    response = await client.post(
        "/api/bills",
        json=_bill(pharmacy_id, (inventory_item["id"], 3), (scarce["id"], 2)),
        headers=pharmacy_headers,
    )
    assert response.status_code == 409

    assert await _quantity(client, pharmacy_id, inventory_item["id"], pharmacy_headers) == 10
    assert await _quantity(client, pharmacy_id, scarce["id"], pharmacy_headers) == 1


@pytest.mark.asyncio
async def test_create_bill_loses_race_for_last_units(
    client: AsyncClient,
    item_factory,
    inventory_item: dict,
    pharmacy_id: str,
    pharmacy_headers: dict,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Test a sale that empties a row between read and decrement is a conflict."""
    scarce = await item_factory(
        pharmacy_id, pharmacy_headers, medication_name="Insulin", quantity=5
    )
    execute = AsyncSession.execute
    decrements = []

    async def execute_with_competing_sale(self, statement, *args, **kwargs):
        if isinstance(statement, Update) and statement.table is inventory:
            decrements.append(statement)
            if len(decrements) == 2:
                # Another till sells the remaining insulin first
                await execute(
                    self,
                    update(inventory)
                    .where(inventory.c.id == UUID(scarce["id"]))
                    .values(quantity=0),
                )
        return await execute(self, statement, *args, **kwargs)

    monkeypatch.setattr(AsyncSession, "execute", execute_with_competing_sale)
    response = await client.post(
        "/api/bills",
        json=_bill(pharmacy_id, (inventory_item["id"], 3), (scarce["id"], 2)),
        headers=pharmacy_headers,
    )
    monkeypatch.undo()

    assert response.status_code == 409
    assert "Insulin" in response.json()["message"]
    assert len(decrements) == 2

    assert await _quantity(client, pharmacy_id, inventory_item["id"], pharmacy_headers) == 10
    assert await _quantity(client, pharmacy_id, scarce["id"], pharmacy_headers) == 5
    response = await client.get(
        "/api/bills", params={"pharmacy_id": pharmacy_id}, headers=pharmacy_headers
    )
    assert response.json() == []


@pytest.mark.asyncio
async def test_create_bill_repeated_item_cannot_oversell(
    client: AsyncClient, inventory_item: dict, pharmacy_id: str, pharmacy_headers: dict
) -> None:
    """Test two lines for the same row are checked against the running stock."""
    response = await client.post(
        "/api/bills",
        json=_bill(pharmacy_id, (inventory_item["id"], 6), (inventory_item["id"], 6)),
        headers=pharmacy_headers,
    )
    assert response.status_code == 409
    assert await _quantity(client, pharmacy_id, inventory_item["id"], pharmacy_headers) == 10


@pytest.mark.asyncio
async def test_create_bill_redraws_taken_bill_number(
    client: AsyncClient,
    inventory_item: dict,
    pharmacy_id: str,
    pharmacy_headers: dict,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    response = await client.post(
        "/api/bills", json=_bill(pharmacy_id, (inventory_item["id"], 1)), headers=pharmacy_headers
    )
    taken = response.json()["bill_number"]

    numbers = iter([taken, "BILL-0000BEEF"])
    monkeypatch.setattr(billing_service, "generate_bill_number", lambda: next(numbers))
    response = await client.post(
        "/api/bills", json=_bill(pharmacy_id, (inventory_item["id"], 1)), headers=pharmacy_headers
    )
    assert response.status_code == 201
    assert response.json()["bill_number"] == "BILL-0000BEEF"


@pytest.mark.asyncio
async def test_create_bill_multiple_lines(
    client: AsyncClient,
    item_factory,
    inventory_item: dict,
    pharmacy_id: str,
    pharmacy_headers: dict,
) -> None:
    other = await item_factory(
        pharmacy_id, pharmacy_headers, medication_name="Vitamin C", selling_price=4.25
    )

    response = await client.post(
        "/api/bills",
        json=_bill(pharmacy_id, (inventory_item["id"], 2), (other["id"], 4)),
        headers=pharmacy_headers,
    )
    assert response.status_code == 201
    bill = response.json()
    assert [line["line_number"] for line in bill["items"]] == [1, 2]
    assert [line["item_name"] for line in bill["items"]] == ["Amoxicillin 500mg", "Vitamin C"]
    assert bill["subtotal"] == 42.0
    assert bill["total_amount"] == 42.0


@pytest.mark.asyncio
async def test_create_bill_for_registered_customer(
    client: AsyncClient,
    inventory_item: dict,
    pharmacy_id: str,
    pharmacy_headers: dict,
    customer: dict,
) -> None:
    """Test the customer name defaults to the registered user's name."""
    response = await client.post(
        "/api/bills",
        json=_bill(
            pharmacy_id,
            (inventory_item["id"], 1),
            customer_name=None,
            customer_id=customer["user"]["id"],
        ),
        headers=pharmacy_headers,
    )
    assert response.status_code == 201
    bill = response.json()
    assert bill["customer_id"] == customer["user"]["id"]
    assert bill["customer_name"] == "Jane Doe"


@pytest.mark.asyncio
async def test_create_bill_unknown_customer(
    client: AsyncClient, inventory_item: dict, pharmacy_id: str, pharmacy_headers: dict
) -> None:
    response = await client.post(
        "/api/bills",
        json=_bill(pharmacy_id, (inventory_item["id"], 1), customer_id=str(uuid4())),
        headers=pharmacy_headers,
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_create_bill_requires_customer(
    client: AsyncClient, inventory_item: dict, pharmacy_id: str, pharmacy_headers: dict
) -> None:
    response = await client.post(
        "/api/bills",
        json=_bill(pharmacy_id, (inventory_item["id"], 1), customer_name="   "),
        headers=pharmacy_headers,
    )
    assert response.status_code == 400
    assert await _quantity(client, pharmacy_id, inventory_item["id"], pharmacy_headers) == 10


@pytest.mark.asyncio
async def test_create_bill_requires_items(
    client: AsyncClient, pharmacy_id: str, pharmacy_headers: dict
) -> None:
    response = await client.post(
        "/api/bills", json=_bill(pharmacy_id), headers=pharmacy_headers
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_create_bill_unknown_item(
    client: AsyncClient, pharmacy_id: str, pharmacy_headers: dict
) -> None:
    response = await client.post(
        "/api/bills",
        json=_bill(pharmacy_id, (str(uuid4()), 1)),
        headers=pharmacy_headers,
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_create_bill_item_from_other_pharmacy(
    client: AsyncClient,
    item_factory,
    pharmacy_id: str,
    pharmacy_headers: dict,
    other_pharmacy: dict,
) -> None:
    other_id = other_pharmacy["pharmacy_staff"]["pharmacy_id"]
    foreign = await item_factory(other_id, _auth(other_pharmacy["access_token"]))

    response = await client.post(
        "/api/bills",
        json=_bill(pharmacy_id, (foreign["id"], 1)),
        headers=pharmacy_headers,
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_customer_cannot_create_bill(
    client: AsyncClient, inventory_item: dict, pharmacy_id: str, customer_headers: dict
) -> None:
    response = await client.post(
        "/api/bills",
        json=_bill(pharmacy_id, (inventory_item["id"], 1)),
        headers=customer_headers,
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_other_pharmacy_cannot_bill(
    client: AsyncClient, inventory_item: dict, pharmacy_id: str, other_pharmacy: dict
) -> None:
    response = await client.post(
        "/api/bills",
        json=_bill(pharmacy_id, (inventory_item["id"], 1)),
        headers=_auth(other_pharmacy["access_token"]),
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_list_and_get_bills(
    client: AsyncClient,
    inventory_item: dict,
    pharmacy_id: str,
    pharmacy_headers: dict,
    other_pharmacy: dict,
) -> None:
    created = []
    for qty in (1, 2):
        response = await client.post(
            "/api/bills",
            json=_bill(pharmacy_id, (inventory_item["id"], qty)),
            headers=pharmacy_headers,
        )
        created.append(response.json())

    response = await client.get(
        "/api/bills", params={"pharmacy_id": pharmacy_id}, headers=pharmacy_headers
    )
    assert response.status_code == 200
    assert {bill["id"] for bill in response.json()} == {bill["id"] for bill in created}

    bill_id = created[1]["id"]
    response = await client.get(f"/api/bills/{bill_id}", headers=pharmacy_headers)
    assert response.status_code == 200
    assert response.json()["items"][0]["quantity"] == 2

    response = await client.get(
        f"/api/bills/{bill_id}", headers=_auth(other_pharmacy["access_token"])
    )
    assert response.status_code == 403

    response = await client.get(f"/api/bills/{uuid4()}", headers=pharmacy_headers)
    assert response.status_code == 404
