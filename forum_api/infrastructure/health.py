# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Dependency probes for ``/api/health``; each returns True when reachable."""

from __future__ import annotations

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from forum_api.application.interfaces import SessionStore
from forum_api.shared.logging import logger


def check_database(engine: Engine) -> bool:
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.error(f"health: database unreachable {type(exc).__name__}")
        return False
    return True


def check_session_store(store: SessionStore) -> bool:
    if store.ping():
        return True
    logger.error("health: session store unreachable")
    return False


__all__ = ["check_database", "check_session_store"]
