from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import ResponseError

from forum_api.domain.sessions import SessionRecord
from forum_api.infrastructure.sessions import InMemorySessionStore, RedisSessionStore
from forum_api.shared.errors.base import SessionStoreUnavailableError


class StubRedis:
    def __init__(self) -> None:
        self.values: dict[str, bytes] = {}
        self.ttls: dict[str, int] = {}

    def get(self, key: str) -> bytes | None:
        return self.values.get(key)

    def set(self, key: str, value: str, ex: int | None = None) -> bool:
        self.values[key] = value.encode("utf-8")
        if ex is not None:
            self.ttls[key] = ex
        return True

    def delete(self, key: str) -> int:
        self.ttls.pop(key, None)
        return 1 if self.values.pop(key, None) is not None else 0

    def ping(self) -> bool:
        return True


class DownRedis:
    def __init__(self, error: Exception) -> None:
        self.error = error
        self.calls = 0

    def _fail(self, *args, **kwargs):
        self.calls += 1
        raise self.error

    get = set = delete = ping = _fail


def test_memory_store_round_trip_returns_copies() -> None:
    store = InMemorySessionStore()
    record = SessionRecord(data={"user_id": 1})
    store.save("sid-1", record, ttl_seconds=60)

    loaded = store.load("sid-1")
    assert loaded is not None
    assert loaded.data == {"user_id": 1}
    assert loaded.created_at == record.created_at

    loaded.data["user_id"] = 2
    assert store.load("sid-1").data == {"user_id": 1}


def test_memory_store_expiry_and_destroy() -> None:
    store = InMemorySessionStore()
    store.save("expired", SessionRecord(data={"user_id": 1}), ttl_seconds=0)
    store.save("live", SessionRecord(data={"user_id": 2}), ttl_seconds=60)

    assert store.load("expired") is None
    assert len(store) == 1

    store.destroy("live")
    store.destroy("never-existed")
    assert store.load("live") is None
    assert store.ping() is True


def test_redis_store_uses_prefix_ttl_and_json() -> None:
    client = StubRedis()
    store = RedisSessionStore(client, key_prefix="sess:")
    created_at = datetime(2024, 1, 1, tzinfo=UTC)

    store.save("abc", SessionRecord(data={"user_id": 7}, created_at=created_at), ttl_seconds=100)

    assert client.ttls == {"sess:abc": 100}
    assert json.loads(client.values["sess:abc"])["data"] == {"user_id": 7}

    loaded = store.load("abc")
    assert loaded is not None
    assert loaded.data == {"user_id": 7}
    assert loaded.created_at == created_at


def test_redis_store_miss_and_garbage_read_as_none() -> None:
    client = StubRedis()
    store = RedisSessionStore(client)
    client.values["sess:garbage"] = b"{not json"

    assert store.load("missing") is None
    assert store.load("garbage") is None


def test_redis_store_destroy() -> None:
    client = StubRedis()
    store = RedisSessionStore(client)
    store.save("abc", SessionRecord(), ttl_seconds=10)

    store.destroy("abc")

    assert client.values == {}


@pytest.mark.parametrize("operation", ["load", "save", "destroy"])
def test_redis_store_outage_is_reported(operation: str) -> None:
    client = DownRedis(RedisConnectionError("connection refused"))
    store = RedisSessionStore(client)

    with pytest.raises(SessionStoreUnavailableError) as excinfo:
        if operation == "load":
            store.load("abc")
        elif operation == "save":
            store.save("abc", SessionRecord(), ttl_seconds=10)
        else:
            store.destroy("abc")

    assert excinfo.value.context == {"operation": operation}
    # RESILIENCE_RETRIES=1 in tests: first attempt plus one retry
    assert client.calls == 2
    assert store.ping() is False


def test_redis_store_does_not_retry_non_transient_errors() -> None:
    client = DownRedis(ResponseError("WRONGTYPE"))
    store = RedisSessionStore(client)

    with pytest.raises(SessionStoreUnavailableError):
        store.load("abc")
    assert client.calls == 1


def test_remaining_ttl_counts_from_creation() -> None:
    created_at = datetime(2024, 1, 1, tzinfo=UTC)
    record = SessionRecord(created_at=created_at)

    assert record.remaining_ttl(100, now=created_at + timedelta(seconds=40)) == 60
    assert record.remaining_ttl(100, now=created_at + timedelta(seconds=400)) == 0
