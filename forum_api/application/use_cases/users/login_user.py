# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from forum_api.domain.sessions import UserSession
from forum_api.domain.users.entities import User
from forum_api.domain.users.exceptions import InvalidPasswordError, UnknownUsernameError
from forum_api.domain.users.repositories import PasswordHasher, UserRepository
from forum_api.shared.logging import logger


class LoginUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        password_hasher: PasswordHasher,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher

    def execute(self, username: str, password: str, session: UserSession) -> User:
        user = self._users.find_by_username(username)
        if user is None:
            logger.info("auth.login: unknown username")
            raise UnknownUsernameError()

        if not self._password_hasher.verify(password, user.password_hash):
            logger.info(f"auth.login: bad password user_id={user.id}")
            raise InvalidPasswordError()

        session.user_id = user.id
        logger.info(f"auth.login: ok user_id={user.id}")
        return user
