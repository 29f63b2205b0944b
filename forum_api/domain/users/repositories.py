# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Protocol

from .entities import User


class UserRepository(Protocol):
    """Durable user storage; failures other than duplicates raise ``PersistenceError``."""

    def find_by_username(self, username: str) -> User | None: ...

    def find_by_id(self, user_id: int) -> User | None: ...

    def add(self, user: User) -> User:
        """Insert ``user`` and return it with its assigned id and ``created_at``.

        Raises ``UserAlreadyExistsError`` when the username is taken.
        """
        ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...

    def verify(self, password: str, hashed: str) -> bool:
        """False on mismatch and on hashes that cannot be parsed."""
        ...
