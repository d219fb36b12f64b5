import os
import sys
from collections.abc import AsyncGenerator
from datetime import date, timedelta
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
from dotenv import load_dotenv
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

# Load environment variables from .env file
load_dotenv()

# Test database URL - MUST be different from production
# Defaults to a throwaway SQLite file so the suite runs without PostgreSQL
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///./test_pharmacare.db")

# Additional safety: ensure we're not using production database
if os.getenv("DATABASE_URL") and os.getenv("DATABASE_URL") == TEST_DATABASE_URL:
    print("\n❌ CRITICAL ERROR: Test database URL is same as production database!")
    print("This would DROP all production data during tests.")
    print("Please set TEST_DATABASE_URL to a separate test database in .env")
    sys.exit(1)

# Ensure we're using asyncpg driver for async operations
if TEST_DATABASE_URL.startswith("postgresql://"):
    TEST_DATABASE_URL = TEST_DATABASE_URL.replace("postgresql://", "postgresql+asyncpg://")

# The application engine is built at import time; point it at the test database
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ.setdefault("LOG_FORMAT", "console")

from app.core.redis_client import CacheManager, get_redis_client  # noqa: E402
from app.core.security import create_access_token  # noqa: E402
from app.database import get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models import metadata  # noqa: E402
from app.schemas.auth import RoleName  # noqa: E402
from app.schemas.users import UserCreate  # noqa: E402
from app.services.user_service import UserService, seed_roles  # noqa: E402

# Create test engine with appropriate settings for testing
# Use NullPool to avoid event loop issues
test_engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,  # Set to True for SQL debugging
    poolclass=NullPool,  # Disable connection pooling for tests
)

# Create test session factory
TestSessionLocal = async_sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session with fresh tables and seeded roles."""
    async with test_engine.begin() as conn:
        await conn.run_sync(metadata.drop_all)
        await conn.run_sync(metadata.create_all)

    async with TestSessionLocal() as session:
        await seed_roles(session)
        yield session

    # Drop tables after test
    async with test_engine.begin() as conn:
        await conn.run_sync(metadata.drop_all)


@pytest.fixture
def redis_store() -> dict:
    """Backing store of the mocked Redis client."""
    return {}


@pytest.fixture
def mock_redis(redis_store: dict) -> MagicMock:
    """Redis client mock that keeps values in ``redis_store``."""
    mock = MagicMock()
    mock.get.side_effect = redis_store.get
    mock.set.side_effect = lambda key, value: redis_store.__setitem__(key, value)
    mock.setex.side_effect = lambda key, ttl, value: redis_store.__setitem__(key, value)
    mock.delete.side_effect = lambda *keys: sum(
        1 for key in keys if redis_store.pop(key, None) is not None
    )
    mock.exists.side_effect = lambda key: int(key in redis_store)
    return mock


@pytest.fixture
def cache_manager(mock_redis: MagicMock) -> CacheManager:
    return CacheManager(mock_redis)


@pytest_asyncio.fixture
async def client(
    db_session: AsyncSession, mock_redis: MagicMock
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis_client] = lambda: mock_redis

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


async def signup_customer(
    client: AsyncClient, email: str = "jane@example.com", password: str = "secret123"
) -> dict:
    """Register a customer and return the auth response body."""
    response = await client.post(
        "/auth/signup",
        json={
            "first_name": "Jane",
            "last_name": "Doe",
            "email": email,
            "password": password,
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


async def signup_pharmacy(
    client: AsyncClient,
    registration_number: str = "PH-1001",
    admin_email: str = "owner@citypharmacy.com",
    pharmacy_name: str = "City Pharmacy",
) -> dict:
    """Register a pharmacy with its admin and return the auth response body."""
    response = await client.post(
        "/auth/pharmacy/signup",
        json={
            "pharmacy_name": pharmacy_name,
            "registration_number": registration_number,
            "address": "12 Market Street, Springfield",
            "phone": "+1 555 0100",
            "admin_first_name": "Olivia",
            "admin_last_name": "Owner",
            "admin_email": admin_email,
            "admin_password": "secret123",
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


def inventory_payload(**overrides) -> dict:
    """A valid inventory item body; expiry one year out, 10 units at 12.50."""
    payload = {
        "medication_name": "Amoxicillin 500mg",
        "manufacturer": "Acme Pharma",
        "batch_number": "B-0001",
        "expiry_date": (date.today() + timedelta(days=365)).isoformat(),
        "quantity": 10,
        "minimum_stock_level": 2,
        "cost_price": 8.00,
        "selling_price": 12.50,
        "medication_type": "PRESCRIPTION",
        "dosage_form": "Capsule",
        "strength": "500mg",
    }
    payload.update(overrides)
    return payload


@pytest_asyncio.fixture
async def customer(client: AsyncClient) -> dict:
    """Registered customer with tokens."""
    return await signup_customer(client)


@pytest.fixture
def customer_headers(customer: dict) -> dict:
    return bearer(customer["access_token"])


@pytest_asyncio.fixture
async def pharmacy(client: AsyncClient) -> dict:
    """Registered pharmacy; ``pharmacy_staff`` holds the admin assignment."""
    return await signup_pharmacy(client)


@pytest.fixture
def pharmacy_id(pharmacy: dict) -> str:
    return pharmacy["pharmacy_staff"]["pharmacy_id"]


@pytest.fixture
def pharmacy_headers(pharmacy: dict) -> dict:
    return bearer(pharmacy["access_token"])


@pytest_asyncio.fixture
async def other_pharmacy(client: AsyncClient) -> dict:
    """A second, unrelated pharmacy."""
    return await signup_pharmacy(
        client,
        registration_number="PH-2002",
        admin_email="owner@townpharmacy.com",
        pharmacy_name="Town Pharmacy",
    )


@pytest_asyncio.fixture
async def admin_headers(db_session: AsyncSession) -> dict:
    """Headers for a platform administrator."""
    user = await UserService().create_user(
        db_session,
        UserCreate(
            email="admin@pharmacare.com",
            password="secret123",
            first_name="Site",
            last_name="Admin",
        ),
        [RoleName.USER, RoleName.ADMIN],
    )
    token = create_access_token(
        data={"sub": str(user["id"]), "email": user["email"], "roles": user["roles"]},
        expires_delta=timedelta(minutes=30),
    )
    return bearer(token)


@pytest_asyncio.fixture
async def inventory_item(client: AsyncClient, pharmacy_id: str, pharmacy_headers: dict) -> dict:
    """An active item with 10 units at 12.50."""
    response = await client.post(
        f"/api/inventories/{pharmacy_id}/items",
        json=inventory_payload(),
        headers=pharmacy_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def customer_factory(client: AsyncClient):
    """Register extra customers: ``await customer_factory("bob@example.com")``."""

    async def _create(email: str, password: str = "secret123") -> dict:
        return await signup_customer(client, email=email, password=password)

    return _create


@pytest.fixture
def item_factory(client: AsyncClient):
    """Add items: ``await item_factory(pharmacy_id, headers, quantity=0)``."""

    async def _create(pharmacy_id: str, headers: dict, **overrides) -> dict:
        response = await client.post(
            f"/api/inventories/{pharmacy_id}/items",
            json=inventory_payload(**overrides),
            headers=headers,
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def item_payload():
    """Builder for inventory request bodies: ``item_payload(quantity=0)``."""
    return inventory_payload
