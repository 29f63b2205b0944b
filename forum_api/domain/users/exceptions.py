# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from forum_api.shared.errors.base import DomainError


class AuthFieldError(DomainError):
    """Business failure tied to one input field, reported back as ``{field, message}``."""

    field = "username"
    message = "invalid value"

    def __init__(self, *, field: str | None = None, message: str | None = None) -> None:
        self.field = field or type(self).field
        self.message = message or type(self).message
        super().__init__(context={"field": self.field, "message": self.message})


class CredentialsValidationError(AuthFieldError):
    default_code = "validation_error"
    default_status = HTTPStatus.UNPROCESSABLE_ENTITY


class UserAlreadyExistsError(AuthFieldError):
    default_code = "user_already_exists"
    default_status = HTTPStatus.CONFLICT
    field = "username"
    message = "username already taken"


class UnknownUsernameError(AuthFieldError):
    default_code = "unknown_username"
    field = "username"
    message = "username does not exist"


class InvalidPasswordError(AuthFieldError):
    default_code = "invalid_credentials"
    default_status = HTTPStatus.UNAUTHORIZED
    field = "password"
    message = "invalid login"
