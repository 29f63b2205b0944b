# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import copy
import time
from dataclasses import dataclass
from threading import Lock

from forum_api.application.interfaces import SessionStore
from forum_api.domain.sessions import SessionRecord
from forum_api.shared.logging import logger


@dataclass(slots=True)
class _Entry:
    record: SessionRecord
    expires_at: float

    def is_expired(self) -> bool:
        return time.monotonic() >= self.expires_at


class InMemorySessionStore(SessionStore):
    """Process-local session store for development and tests."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._store: dict[str, _Entry] = {}

    def load(self, sid: str) -> SessionRecord | None:
        with self._lock:
            entry = self._store.get(sid)
            if entry is None:
                return None
            if entry.is_expired():
                logger.debug("sessions.memory: expired entry dropped")
                self._store.pop(sid, None)
                return None
            return copy.deepcopy(entry.record)

    def save(self, sid: str, record: SessionRecord, ttl_seconds: int) -> None:
        expires_at = time.monotonic() + ttl_seconds
        with self._lock:
            self._store[sid] = _Entry(record=copy.deepcopy(record), expires_at=expires_at)

    def destroy(self, sid: str) -> None:
        with self._lock:
            self._store.pop(sid, None)

    def ping(self) -> bool:
        return True

    def __len__(self) -> int:
        with self._lock:
            return sum(1 for entry in self._store.values() if not entry.is_expired())


__all__ = ["InMemorySessionStore"]
