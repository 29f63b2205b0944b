# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from forum_api.application.interfaces import SessionStore
from forum_api.shared.config.settings import SessionConfig
from forum_api.shared.logging import logger

from .memory_store import InMemorySessionStore
from .redis_store import RedisSessionStore


def build_session_store(config: SessionConfig) -> SessionStore:
    if config.backend == "memory":
        logger.warning("sessions: using in-memory store, sessions are lost on restart")
        return InMemorySessionStore()
    logger.info("sessions: using redis store")
    return RedisSessionStore.from_url(
        config.redis_url,
        key_prefix=config.key_prefix,
        socket_timeout=config.socket_timeout,
        connect_timeout=config.connect_timeout,
    )
