# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""One session, one transaction per repository call."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from forum_api.shared.errors.base import PersistenceError
from forum_api.shared.logging import logger


@contextmanager
def unit_of_work_scope(factory: Callable[[], Session], operation: str) -> Iterator[Session]:
    """Commit on success, roll back on any error.

    ``IntegrityError`` is re-raised as is so the caller can classify it; any
    other database failure becomes ``PersistenceError(operation)``.
    """

    session = factory()
    try:
        yield session
        session.commit()
    except IntegrityError:
        session.rollback()
        raise
    except SQLAlchemyError as exc:
        logger.error(f"uow: {operation} failed with {type(exc).__name__}, rolled back")
        session.rollback()
        raise PersistenceError(operation) from exc
    except BaseException:
        session.rollback()
        raise
    finally:
        session.close()


__all__ = ["unit_of_work_scope"]
