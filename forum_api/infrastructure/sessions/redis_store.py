# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from redis import Redis, RedisError

from forum_api.application.interfaces import SessionStore
from forum_api.domain.sessions import SessionRecord
from forum_api.infrastructure.resilience import call_with_retries
from forum_api.shared.errors.base import SessionStoreUnavailableError
from forum_api.shared.logging import logger


class _StoredSession(BaseModel):
    data: dict[str, Any]
    created_at: datetime


class RedisSessionStore(SessionStore):
    """Sessions as JSON blobs under ``{prefix}{sid}`` with a Redis-side TTL.

    Reads never extend the TTL.
    """

    def __init__(self, client: Redis, *, key_prefix: str = "sess:") -> None:
        self._client = client
        self._prefix = key_prefix

    @classmethod
    def from_url(
        cls,
        url: str,
        *,
        key_prefix: str = "sess:",
        socket_timeout: float = 5.0,
        connect_timeout: float = 5.0,
    ) -> RedisSessionStore:
        client = Redis.from_url(
            url,
            socket_timeout=socket_timeout,
            socket_connect_timeout=connect_timeout,
        )
        return cls(client, key_prefix=key_prefix)

    def _key(self, sid: str) -> str:
        return f"{self._prefix}{sid}"

    def load(self, sid: str) -> SessionRecord | None:
        try:
            raw = call_with_retries(self._client.get, self._key(sid))
        except RedisError as exc:
            logger.warning(f"sessions.redis: load failed {type(exc).__name__}")
            raise SessionStoreUnavailableError("load") from exc
        if raw is None:
            return None
        try:
            stored = _StoredSession.model_validate_json(raw)
        except PydanticValidationError:
            logger.warning("sessions.redis: undecodable session payload ignored")
            return None
        return SessionRecord(data=stored.data, created_at=stored.created_at)

    def save(self, sid: str, record: SessionRecord, ttl_seconds: int) -> None:
        payload = _StoredSession(data=record.data, created_at=record.created_at).model_dump_json()
        try:
            call_with_retries(self._client.set, self._key(sid), payload, ex=max(ttl_seconds, 1))
        except RedisError as exc:
            logger.error(f"sessions.redis: save failed {type(exc).__name__}")
            raise SessionStoreUnavailableError("save") from exc

    def destroy(self, sid: str) -> None:
        try:
            call_with_retries(self._client.delete, self._key(sid))
        except RedisError as exc:
            logger.error(f"sessions.redis: destroy failed {type(exc).__name__}")
            raise SessionStoreUnavailableError("destroy") from exc

    def ping(self) -> bool:
        try:
            return bool(self._client.ping())
        except RedisError:
            return False


__all__ = ["RedisSessionStore"]
