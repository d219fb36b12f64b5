"""Tests for medication reminder endpoints."""

import pytest
import pytest_asyncio
from httpx import AsyncClient


@pytest_asyncio.fixture
async def medication(client: AsyncClient, customer_headers: dict) -> dict:
    response = await client.post(
        "/medications",
        json={"name": "Lisinopril", "dosage": "10mg", "start_date": "2026-01-01"},
        headers=customer_headers,
    )
    assert response.status_code == 201
    return response.json()


async def _reminder(client: AsyncClient, headers: dict, medication_id: str, when: str) -> dict:
    response = await client.post(
        "/reminders",
        json={"medication_id": medication_id, "reminder_time": when, "notes": "With water"},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_create_reminder(
    client: AsyncClient, customer_headers: dict, medication: dict
) -> None:
    reminder = await _reminder(client, customer_headers, medication["id"], "2026-02-01T08:00:00")
    assert reminder["medication_id"] == medication["id"]
    assert reminder["medication_name"] == "Lisinopril"
    assert reminder["medication_dosage"] == "10mg"
    assert reminder["completed"] is False
    assert reminder["completed_at"] is None


@pytest.mark.asyncio
async def test_create_reminder_for_foreign_medication(
    client: AsyncClient, medication: dict, customer_factory
) -> None:
    bob = await customer_factory("bob@example.com")
    response = await client.post(
        "/reminders",
        json={"medication_id": medication["id"], "reminder_time": "2026-02-01T08:00:00"},
        headers={"Authorization": f"Bearer {bob['access_token']}"},
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_pending_window(
    client: AsyncClient, customer_headers: dict, medication: dict
) -> None:
    """Test pending reminders are filtered by completion and time window."""
    early = await _reminder(client, customer_headers, medication["id"], "2026-02-01T08:00:00")
    middle = await _reminder(client, customer_headers, medication["id"], "2026-02-02T08:00:00")
    late = await _reminder(client, customer_headers, medication["id"], "2026-02-03T08:00:00")

    await client.post(f"/reminders/{early['id']}/complete", headers=customer_headers)

    response = await client.get("/reminders/pending", headers=customer_headers)
    assert [r["id"] for r in response.json()] == [middle["id"], late["id"]]

    response = await client.get(
        "/reminders/pending",
        params={"start": "2026-02-01T00:00:00", "end": "2026-02-02T23:59:59"},
        headers=customer_headers,
    )
    assert [r["id"] for r in response.json()] == [middle["id"]]

    response = await client.get("/reminders", headers=customer_headers)
    assert [r["id"] for r in response.json()] == [early["id"], middle["id"], late["id"]]


@pytest.mark.asyncio
async def test_complete_reminder(
    client: AsyncClient, customer_headers: dict, medication: dict
) -> None:
    reminder = await _reminder(client, customer_headers, medication["id"], "2026-02-01T08:00:00")

    response = await client.post(f"/reminders/{reminder['id']}/complete", headers=customer_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["completed"] is True
    assert data["completed_at"] is not None


@pytest.mark.asyncio
async def test_update_completed_flag(
    client: AsyncClient, customer_headers: dict, medication: dict
) -> None:
    """Test completing through update stamps the time and reopening clears it."""
    reminder = await _reminder(client, customer_headers, medication["id"], "2026-02-01T08:00:00")

    response = await client.put(
        f"/reminders/{reminder['id']}", json={"completed": True}, headers=customer_headers
    )
    assert response.json()["completed_at"] is not None

    response = await client.put(
        f"/reminders/{reminder['id']}",
        json={"completed": False, "notes": "Snoozed"},
        headers=customer_headers,
    )
    data = response.json()
    assert data["completed"] is False
    assert data["completed_at"] is None
    assert data["notes"] == "Snoozed"


@pytest.mark.asyncio
async def test_reminders_are_private(
    client: AsyncClient, customer_headers: dict, medication: dict, customer_factory
) -> None:
    reminder = await _reminder(client, customer_headers, medication["id"], "2026-02-01T08:00:00")
    bob = await customer_factory("bob@example.com")
    bob_headers = {"Authorization": f"Bearer {bob['access_token']}"}

    response = await client.get(f"/reminders/{reminder['id']}", headers=bob_headers)
    assert response.status_code == 404

    response = await client.post(f"/reminders/{reminder['id']}/complete", headers=bob_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_reminder(
    client: AsyncClient, customer_headers: dict, medication: dict
) -> None:
    reminder = await _reminder(client, customer_headers, medication["id"], "2026-02-01T08:00:00")

    response = await client.delete(f"/reminders/{reminder['id']}", headers=customer_headers)
    assert response.status_code == 204

    response = await client.get(f"/reminders/{reminder['id']}", headers=customer_headers)
    assert response.status_code == 404
