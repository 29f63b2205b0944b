# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, scoped_session, sessionmaker

from forum_api.shared.config import load_config
from forum_api.shared.config.settings import DatabaseConfig
from forum_api.shared.logging import logger


class Base(DeclarativeBase):
    pass


def _engine_options(config: DatabaseConfig) -> dict[str, Any]:
    if config.url.startswith("sqlite"):
        # one file, many request threads
        return {
            "connect_args": {
                "check_same_thread": False,
                "timeout": int(config.pool_timeout),
            }
        }
    return {
        "pool_size": config.pool_size,
        "max_overflow": config.max_overflow,
        "pool_timeout": config.pool_timeout,
    }


def build_engine(config: DatabaseConfig) -> Engine:
    return create_engine(config.url, pool_pre_ping=True, **_engine_options(config))


ENGINE: Engine = build_engine(load_config().database)

SessionLocal = scoped_session(sessionmaker(bind=ENGINE, autoflush=False, expire_on_commit=False))


def init_db(engine: Engine | None = None) -> None:
    """Create missing tables; there is no migration tooling."""
    from . import models  # noqa: F401  (registers the tables on Base.metadata)

    target = engine or ENGINE
    Base.metadata.create_all(bind=target)
    logger.info(f"db: schema ensured on {target.url.render_as_string(hide_password=True)}")
