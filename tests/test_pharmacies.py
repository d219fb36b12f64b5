"""Tests for pharmacy and staff endpoints."""

from uuid import uuid4

import pytest
from httpx import AsyncClient


@pytest.fixture
def sample_staff_data() -> dict:
    """Sample staff member data for testing."""
    return {
        "first_name": "Sam",
        "last_name": "Staff",
        "email": "sam@citypharmacy.com",
        "password": "secret123",
        "role": "STAFF",
    }


def _auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.mark.asyncio
async def test_get_pharmacy(
    client: AsyncClient, pharmacy_id: str, pharmacy_headers: dict
) -> None:
    """Test pharmacy details include the owner's name."""
    response = await client.get(f"/api/pharmacies/{pharmacy_id}", headers=pharmacy_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "City Pharmacy"
    assert data["registration_number"] == "PH-1001"
    assert data["is_active"] is True
    assert data["owner_name"] == "Olivia Owner"


@pytest.mark.asyncio
async def test_get_pharmacy_not_found(client: AsyncClient, pharmacy_headers: dict) -> None:
    response = await client.get(f"/api/pharmacies/{uuid4()}", headers=pharmacy_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_get_pharmacy_forbidden_for_outsiders(
    client: AsyncClient, pharmacy_id: str, customer_headers: dict, other_pharmacy: dict
) -> None:
    """Test customers and staff of other pharmacies cannot read the pharmacy."""
    response = await client.get(f"/api/pharmacies/{pharmacy_id}", headers=customer_headers)
    assert response.status_code == 403

    response = await client.get(
        f"/api/pharmacies/{pharmacy_id}", headers=_auth(other_pharmacy["access_token"])
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_platform_admin_can_read_any_pharmacy(
    client: AsyncClient, pharmacy_id: str, admin_headers: dict
) -> None:
    response = await client.get(f"/api/pharmacies/{pharmacy_id}", headers=admin_headers)
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_add_and_list_staff(
    client: AsyncClient,
    pharmacy_id: str,
    pharmacy_headers: dict,
    sample_staff_data: dict,
) -> None:
    """Test adding a staff member creates a pharmacy account that can log in."""
    response = await client.post(
        f"/api/pharmacies/{pharmacy_id}/staff",
        json=sample_staff_data,
        headers=pharmacy_headers,
    )
    assert response.status_code == 201
    staff = response.json()
    assert staff["role"] == "STAFF"
    assert staff["is_active"] is True
    assert staff["pharmacy_id"] == pharmacy_id
    assert staff["email"] == "sam@citypharmacy.com"

    response = await client.get(f"/api/pharmacies/{pharmacy_id}/staff", headers=pharmacy_headers)
    assert response.status_code == 200
    emails = {row["email"] for row in response.json()}
    assert emails == {"owner@citypharmacy.com", "sam@citypharmacy.com"}

    response = await client.post(
        "/auth/pharmacy/login",
        json={"email": "sam@citypharmacy.com", "password": "secret123"},
    )
    assert response.status_code == 200
    assert response.json()["pharmacy_staff"]["id"] == staff["id"]


@pytest.mark.asyncio
async def test_add_staff_duplicate_email(
    client: AsyncClient,
    pharmacy_id: str,
    pharmacy_headers: dict,
    sample_staff_data: dict,
) -> None:
    sample_staff_data["email"] = "owner@citypharmacy.com"
    response = await client.post(
        f"/api/pharmacies/{pharmacy_id}/staff",
        json=sample_staff_data,
        headers=pharmacy_headers,
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_staff_cannot_add_staff(
    client: AsyncClient,
    pharmacy_id: str,
    pharmacy_headers: dict,
    sample_staff_data: dict,
) -> None:
    """Test only pharmacy admins manage staff."""
    await client.post(
        f"/api/pharmacies/{pharmacy_id}/staff",
        json=sample_staff_data,
        headers=pharmacy_headers,
    )
    login = await client.post(
        "/auth/pharmacy/login",
        json={"email": "sam@citypharmacy.com", "password": "secret123"},
    )
    staff_headers = _auth(login.json()["access_token"])

    response = await client.post(
        f"/api/pharmacies/{pharmacy_id}/staff",
        json={**sample_staff_data, "email": "another@citypharmacy.com"},
        headers=staff_headers,
    )
    assert response.status_code == 403

    # Plain staff can still read the roster
    response = await client.get(f"/api/pharmacies/{pharmacy_id}/staff", headers=staff_headers)
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_promote_staff(
    client: AsyncClient,
    pharmacy_id: str,
    pharmacy_headers: dict,
    sample_staff_data: dict,
) -> None:
    created = await client.post(
        f"/api/pharmacies/{pharmacy_id}/staff",
        json=sample_staff_data,
        headers=pharmacy_headers,
    )
    staff_id = created.json()["id"]

    response = await client.patch(
        f"/api/pharmacies/{pharmacy_id}/staff/{staff_id}",
        json={"role": "ADMIN"},
        headers=pharmacy_headers,
    )
    assert response.status_code == 200
    assert response.json()["role"] == "ADMIN"


@pytest.mark.asyncio
async def test_deactivated_staff_cannot_log_in(
    client: AsyncClient,
    pharmacy_id: str,
    pharmacy_headers: dict,
    sample_staff_data: dict,
) -> None:
    """Test deactivation blocks pharmacy login and pharmacy access."""
    created = await client.post(
        f"/api/pharmacies/{pharmacy_id}/staff",
        json=sample_staff_data,
        headers=pharmacy_headers,
    )
    staff_id = created.json()["id"]
    login = await client.post(
        "/auth/pharmacy/login",
        json={"email": "sam@citypharmacy.com", "password": "secret123"},
    )
    staff_headers = _auth(login.json()["access_token"])

    response = await client.patch(
        f"/api/pharmacies/{pharmacy_id}/staff/{staff_id}",
        json={"is_active": False},
        headers=pharmacy_headers,
    )
    assert response.status_code == 200
    assert response.json()["is_active"] is False

    response = await client.post(
        "/auth/pharmacy/login",
        json={"email": "sam@citypharmacy.com", "password": "secret123"},
    )
    assert response.status_code == 401

    # Tokens issued before deactivation lose pharmacy access
    response = await client.get(f"/api/pharmacies/{pharmacy_id}", headers=staff_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_update_staff_of_other_pharmacy_not_found(
    client: AsyncClient,
    pharmacy_id: str,
    pharmacy: dict,
    other_pharmacy: dict,
) -> None:
    """Test a staff id is only addressable through its own pharmacy."""
    other_id = other_pharmacy["pharmacy_staff"]["pharmacy_id"]
    staff_id = pharmacy["pharmacy_staff"]["id"]

    response = await client.patch(
        f"/api/pharmacies/{other_id}/staff/{staff_id}",
        json={"role": "STAFF"},
        headers=_auth(other_pharmacy["access_token"]),
    )
    assert response.status_code == 404
