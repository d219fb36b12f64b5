"""Tests for Redis caching implementation."""

from unittest.mock import MagicMock

import pytest
from httpx import AsyncClient

from app.core.redis_client import CacheManager


def test_cache_manager_get_json():
    """Test CacheManager get_json method."""
    mock_redis = MagicMock()
    cache_manager = CacheManager(redis_client=mock_redis)

    # Test cache miss
    mock_redis.get.return_value = None
    result = cache_manager.get_json("test_key")
    assert result is None
    mock_redis.get.assert_called_once_with("pharmacare:test_key")

    # Test cache hit
    mock_redis.reset_mock()
    mock_redis.get.return_value = '{"name": "Test", "value": 123}'
    result = cache_manager.get_json("test_key")
    assert result == {"name": "Test", "value": 123}
    mock_redis.get.assert_called_once_with("pharmacare:test_key")


def test_cache_manager_get_json_ignores_garbage():
    mock_redis = MagicMock()
    mock_redis.get.return_value = "{not json"
    assert CacheManager(redis_client=mock_redis).get_json("test_key") is None


def test_cache_manager_set_json():
    """Test CacheManager set_json method."""
    mock_redis = MagicMock()
    cache_manager = CacheManager(redis_client=mock_redis)

    test_data = {"name": "Test", "value": 123}

    # Test without TTL
    result = cache_manager.set_json("test_key", test_data)
    assert result is True
    mock_redis.set.assert_called_once_with("pharmacare:test_key", '{"name": "Test", "value": 123}')

    # Test with TTL
    mock_redis.reset_mock()
    result = cache_manager.set_json("test_key", test_data, ttl=300)
    assert result is True
    mock_redis.setex.assert_called_once_with(
        "pharmacare:test_key", 300, '{"name": "Test", "value": 123}'
    )


def test_cache_manager_delete_and_exists():
    """Test CacheManager delete and exists methods."""
    mock_redis = MagicMock()
    cache_manager = CacheManager(redis_client=mock_redis)

    assert cache_manager.delete("test_key") is True
    mock_redis.delete.assert_called_once_with("pharmacare:test_key")

    mock_redis.exists.return_value = 1
    assert cache_manager.exists("test_key") is True
    mock_redis.exists.return_value = 0
    assert cache_manager.exists("test_key") is False


def test_cache_manager_survives_redis_errors():
    """Test Redis outages degrade to cache misses."""
    mock_redis = MagicMock()
    mock_redis.get.side_effect = ConnectionError("redis down")
    mock_redis.setex.side_effect = ConnectionError("redis down")
    mock_redis.exists.side_effect = ConnectionError("redis down")
    cache_manager = CacheManager(redis_client=mock_redis)

    assert cache_manager.get_json("test_key") is None
    assert cache_manager.set_json("test_key", {"a": 1}, ttl=60) is False
    assert cache_manager.exists("test_key") is False


@pytest.mark.asyncio
async def test_user_caching(
    client: AsyncClient,
    customer: dict,
    customer_headers: dict,
    redis_store: dict,
):
    """Test user profile caching."""
    # First request - should cache the user
    response1 = await client.get("/users/me", headers=customer_headers)
    assert response1.status_code == 200
    user_data_1 = response1.json()
    assert f"pharmacare:user:{customer['user']['id']}" in redis_store

    # Second request - should return cached data
    response2 = await client.get("/users/me", headers=customer_headers)
    assert response2.status_code == 200
    user_data_2 = response2.json()

    # Data should be identical
    assert user_data_1 == user_data_2
    assert user_data_1["id"] == customer["user"]["id"]
    assert user_data_1["roles"] == ["ROLE_USER"]


@pytest.mark.asyncio
async def test_user_cache_invalidation(
    client: AsyncClient,
    customer_headers: dict,
):
    """Test user cache is invalidated on update."""
    # Get user (caches the data)
    response1 = await client.get("/users/me", headers=customer_headers)
    assert response1.status_code == 200
    original_name = response1.json()["first_name"]

    # Update user (should invalidate cache)
    response2 = await client.patch(
        "/users/me",
        headers=customer_headers,
        json={"first_name": "Janet"},
    )
    assert response2.status_code == 200
    assert response2.json()["first_name"] == "Janet"

    # Get user again (should fetch fresh data, not cached)
    response3 = await client.get("/users/me", headers=customer_headers)
    assert response3.status_code == 200
    assert response3.json()["first_name"] == "Janet"
    assert response3.json()["first_name"] != original_name
