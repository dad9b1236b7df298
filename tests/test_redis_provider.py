import json
from unittest.mock import AsyncMock, call

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from sessionward.modules.errors import ProviderError
from sessionward.modules.provider import MISSING, Provider, RedisProvider


@pytest.fixture
def redis_provider(mock_redis, clock):
    """Create a RedisProvider instance with mock Redis."""
    return RedisProvider(mock_redis, clock=clock)


def stored_document(mock_redis, method: str = "set") -> dict:
    """Return the JSON document from the last write."""
    args = getattr(mock_redis, method).call_args[0]
    return json.loads(args[-1])


def test_redis_provider_satisfies_contract(redis_provider):
    assert isinstance(redis_provider, Provider)


@pytest.mark.asyncio
async def test_session_init_writes_document(redis_provider, mock_redis, clock):
    session = await redis_provider.session_init("sid-1")

    assert session.identifier() == "sid-1"
    mock_redis.set.assert_called_once()
    assert mock_redis.set.call_args[0][0] == "session:sid-1"

    data = stored_document(mock_redis)
    assert data["session_id"] == "sid-1"
    assert data["values"] == {}
    assert data["created_at"] == clock.now
    assert data["last_access"] == clock.now

    mock_redis.sadd.assert_called_once_with("sessions:active", "sid-1")
    mock_redis.setex.assert_not_called()


@pytest.mark.asyncio
async def test_ttl_uses_setex(mock_redis, clock):
    provider = RedisProvider(mock_redis, ttl=300, clock=clock)

    await provider.session_init("sid-1")

    mock_redis.setex.assert_called_once()
    key, ttl, _ = mock_redis.setex.call_args[0]
    assert key == "session:sid-1"
    assert ttl == 300
    mock_redis.set.assert_not_called()


@pytest.mark.asyncio
async def test_session_read_existing_refreshes_last_access(redis_provider, mock_redis, clock):
    mock_redis.get.return_value = json.dumps(
        {
            "session_id": "sid-1",
            "values": {"k": "v"},
            "created_at": clock.now - 100,
            "last_access": clock.now - 50,
        }
    )

    session = await redis_provider.session_read("sid-1")

    mock_redis.get.assert_called_once_with("session:sid-1")
    data = stored_document(mock_redis)
    assert data["values"] == {"k": "v"}
    assert data["created_at"] == clock.now - 100
    assert data["last_access"] == clock.now
    assert await session.get("k") == "v"


@pytest.mark.asyncio
async def test_session_read_missing_creates_document(redis_provider, mock_redis, clock):
    mock_redis.get.return_value = None

    session = await redis_provider.session_read("unknown")

    assert session.identifier() == "unknown"
    data = stored_document(mock_redis)
    assert data["session_id"] == "unknown"
    assert data["values"] == {}
    mock_redis.sadd.assert_called_once_with("sessions:active", "unknown")


@pytest.mark.asyncio
async def test_session_read_past_lifetime_writes_fresh_document(
    redis_provider, mock_redis, clock
):
    mock_redis.get.return_value = json.dumps(
        {
            "session_id": "sid-1",
            "values": {"k": "secret"},
            "created_at": clock.now - 100,
            "last_access": clock.now - 15,
        }
    )

    session = await redis_provider.session_read("sid-1", max_lifetime=10)

    assert session.identifier() == "sid-1"
    data = stored_document(mock_redis)
    assert data["values"] == {}
    assert data["created_at"] == clock.now
    assert data["last_access"] == clock.now


@pytest.mark.asyncio
async def test_session_read_within_lifetime_keeps_values(redis_provider, mock_redis, clock):
    mock_redis.get.return_value = json.dumps(
        {
            "session_id": "sid-1",
            "values": {"k": "v"},
            "created_at": clock.now - 100,
            "last_access": clock.now - 10,
        }
    )

    await redis_provider.session_read("sid-1", max_lifetime=10)

    assert stored_document(mock_redis)["values"] == {"k": "v"}


@pytest.mark.asyncio
async def test_corrupt_document_becomes_provider_error(redis_provider, mock_redis):
    mock_redis.get.return_value = "{not json"
    session = await redis_provider.session_init("sid-1")

    with pytest.raises(ProviderError) as exc_info:
        await session.get("k")
    assert exc_info.value.operation == "get"
    assert exc_info.value.session_id == "sid-1"

    with pytest.raises(ProviderError) as exc_info:
        await redis_provider.session_read("sid-1")
    assert exc_info.value.operation == "read"

    mock_redis.smembers.return_value = ["sid-1"]
    with pytest.raises(ProviderError) as exc_info:
        await redis_provider.session_gc(100)
    assert exc_info.value.operation == "gc"
    assert isinstance(exc_info.value.__cause__, ValueError)


@pytest.mark.asyncio
async def test_session_set_overwrites_value(redis_provider, mock_redis):
    session = await redis_provider.session_init("sid-1")
    mock_redis.get.return_value = json.dumps(
        {"session_id": "sid-1", "values": {"k": "old"}, "created_at": 1, "last_access": 1}
    )

    await session.set("k", "new")

    data = stored_document(mock_redis)
    assert data["values"] == {"k": "new"}


@pytest.mark.asyncio
async def test_session_get_missing_key(redis_provider, mock_redis):
    session = await redis_provider.session_init("sid-1")
    mock_redis.get.return_value = json.dumps(
        {"session_id": "sid-1", "values": {}, "created_at": 1, "last_access": 1}
    )

    assert await session.get("nope") is MISSING


@pytest.mark.asyncio
async def test_session_get_after_expiry(redis_provider, mock_redis):
    session = await redis_provider.session_init("sid-1")
    mock_redis.get.return_value = None

    assert await session.get("k") is MISSING


@pytest.mark.asyncio
async def test_session_delete(redis_provider, mock_redis):
    session = await redis_provider.session_init("sid-1")
    mock_redis.set.reset_mock()
    mock_redis.get.return_value = json.dumps(
        {"session_id": "sid-1", "values": {"a": 1, "b": 2}, "created_at": 1, "last_access": 1}
    )

    await session.delete("a")
    assert stored_document(mock_redis)["values"] == {"b": 2}

    # Unknown key: nothing written
    mock_redis.set.reset_mock()
    await session.delete("zzz")
    mock_redis.set.assert_not_called()


@pytest.mark.asyncio
async def test_session_destroy(redis_provider, mock_redis):
    await redis_provider.session_destroy("sid-1")

    mock_redis.delete.assert_called_once_with("session:sid-1")
    mock_redis.srem.assert_called_once_with("sessions:active", "sid-1")


@pytest.mark.asyncio
async def test_session_gc(redis_provider, mock_redis, clock):
    """Expired and vanished sessions are removed; live ones stay."""
    mock_redis.smembers.return_value = ["old", "fresh", "vanished"]
    documents = {
        "session:old": json.dumps(
            {"session_id": "old", "values": {}, "created_at": 0, "last_access": clock.now - 200}
        ),
        "session:fresh": json.dumps(
            {"session_id": "fresh", "values": {}, "created_at": 0, "last_access": clock.now - 10}
        ),
        "session:vanished": None,
    }
    mock_redis.get.side_effect = lambda key: documents[key]

    removed = await redis_provider.session_gc(100)

    assert removed == 2
    mock_redis.delete.assert_called_once_with("session:old")
    assert mock_redis.srem.call_args_list == [
        call("sessions:active", "old"),
        call("sessions:active", "vanished"),
    ]


@pytest.mark.asyncio
async def test_redis_errors_become_provider_errors(redis_provider, mock_redis):
    mock_redis.set.side_effect = RedisConnectionError("connection refused")

    with pytest.raises(ProviderError) as exc_info:
        await redis_provider.session_init("sid-1")

    assert exc_info.value.operation == "init"
    assert exc_info.value.session_id == "sid-1"

    mock_redis.smembers.side_effect = RedisConnectionError("connection refused")
    with pytest.raises(ProviderError) as exc_info:
        await redis_provider.session_gc(100)
    assert exc_info.value.operation == "gc"


@pytest.mark.asyncio
async def test_custom_key_prefix(mock_redis):
    provider = RedisProvider(mock_redis, key_prefix="app:sess:", active_key="app:sessions")

    await provider.session_destroy("sid-1")

    mock_redis.delete.assert_called_once_with("app:sess:sid-1")
    mock_redis.srem.assert_called_once_with("app:sessions", "sid-1")
