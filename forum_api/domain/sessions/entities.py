# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Protocol


@dataclass(slots=True)
class SessionRecord:
    """Server-side session state as held by a session store."""

    data: dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def remaining_ttl(self, lifetime_seconds: int, now: datetime | None = None) -> int:
        now = now or datetime.now(UTC)
        elapsed = (now - self.created_at).total_seconds()
        return max(int(lifetime_seconds - elapsed), 0)


class UserSession(Protocol):
    """Per-request session handle given to the auth use cases."""

    @property
    def user_id(self) -> int | None: ...

    @user_id.setter
    def user_id(self, value: int | None) -> None: ...

    def clear(self) -> None: ...
