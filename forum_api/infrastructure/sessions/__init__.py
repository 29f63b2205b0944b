# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .factory import build_session_store
from .memory_store import InMemorySessionStore
from .redis_store import RedisSessionStore

__all__ = ["InMemorySessionStore", "RedisSessionStore", "build_session_store"]
