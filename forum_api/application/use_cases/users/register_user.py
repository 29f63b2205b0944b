# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from forum_api.domain.sessions import UserSession
from forum_api.domain.users.entities import User
from forum_api.domain.users.repositories import PasswordHasher, UserRepository
from forum_api.domain.users.validation import validate_credentials
from forum_api.shared.logging import logger


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        password_hasher: PasswordHasher,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher

    def execute(self, username: str, password: str, session: UserSession) -> User:
        validate_credentials(username, password)

        hashed = self._password_hasher.hash(password)
        user = User(id=0, username=username, password_hash=hashed, created_at=datetime.now(UTC))
        # Uniqueness is enforced by the store; a duplicate raises UserAlreadyExistsError.
        persisted = self._users.add(user)

        session.user_id = persisted.id
        logger.info(f"auth.register: ok user_id={persisted.id}")
        return persisted
