# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from forum_api.domain.users.entities import User as DomainUser
from forum_api.domain.users.exceptions import UserAlreadyExistsError
from forum_api.domain.users.repositories import UserRepository
from forum_api.infrastructure.db.models import User
from forum_api.infrastructure.unit_of_work import unit_of_work_scope
from forum_api.shared.errors.base import PersistenceError
from forum_api.shared.logging import logger

_UNIQUE_VIOLATION_SQLSTATE = "23505"


def is_unique_violation(exc: IntegrityError) -> bool:
    """Tell a duplicate-key insert apart from other integrity failures."""
    orig = exc.orig
    # psycopg2 exposes pgcode, psycopg 3 sqlstate
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code is not None:
        return code == _UNIQUE_VIOLATION_SQLSTATE
    message = str(orig)
    return "UNIQUE constraint failed" in message or "Duplicate entry" in message


def _to_domain(row: User) -> DomainUser:
    return DomainUser(
        id=row.id,
        username=row.username,
        password_hash=row.password_hash,
        created_at=row.created_at,
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def find_by_username(self, username: str) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory, "find_by_username") as session:
            row = session.scalars(select(User).where(User.username == username)).first()
            return _to_domain(row) if row else None

    def find_by_id(self, user_id: int) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory, "find_by_id") as session:
            row = session.get(User, user_id)
            return _to_domain(row) if row else None

    def add(self, user: DomainUser) -> DomainUser:
        try:
            with unit_of_work_scope(self._session_factory, "add") as session:
                row = User(username=user.username, password_hash=user.password_hash)
                session.add(row)
                # flush surfaces the unique violation and assigns the id
                session.flush()
                session.refresh(row)
                return _to_domain(row)
        except IntegrityError as exc:
            if is_unique_violation(exc):
                logger.info("users.add: duplicate username rejected")
                raise UserAlreadyExistsError() from exc
            logger.error(f"users.add: integrity error {type(exc.orig).__name__}")
            raise PersistenceError("add") from exc
