# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Protocol

from forum_api.domain.sessions import SessionRecord


class SessionStore(Protocol):
    """Key-value store holding server-side sessions under opaque ids.

    Implementations raise ``SessionStoreUnavailableError`` when the backend
    cannot be reached; a missing or expired key is ``None``, not an error.
    """

    def load(self, sid: str) -> SessionRecord | None: ...

    def save(self, sid: str, record: SessionRecord, ttl_seconds: int) -> None: ...

    def destroy(self, sid: str) -> None: ...

    def ping(self) -> bool: ...
