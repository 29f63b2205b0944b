# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Input constraints checked before any store access."""

from __future__ import annotations

from .exceptions import CredentialsValidationError

USERNAME_MIN_LENGTH = 3
PASSWORD_MIN_LENGTH = 4


def validate_credentials(username: str, password: str) -> None:
    """Raise on the first violated constraint, username before password."""
    if len(username) < USERNAME_MIN_LENGTH:
        raise CredentialsValidationError(
            field="username",
            message="Username too short",
        )
    if len(password) < PASSWORD_MIN_LENGTH:
        raise CredentialsValidationError(
            field="password",
            message="Password too short",
        )
