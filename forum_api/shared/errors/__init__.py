# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .base import (
    AppError,
    DomainError,
    InfrastructureError,
    PersistenceError,
    SessionStoreUnavailableError,
)
from .http import register_error_handler

__all__ = [
    "AppError",
    "DomainError",
    "InfrastructureError",
    "PersistenceError",
    "SessionStoreUnavailableError",
    "register_error_handler",
]
