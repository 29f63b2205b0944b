# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .interfaces import SessionStore

__all__ = ["SessionStore"]
