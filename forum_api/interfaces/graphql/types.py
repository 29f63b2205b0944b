# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from datetime import datetime
from typing import Optional

import strawberry

from forum_api.domain.users.entities import User
from forum_api.domain.users.exceptions import AuthFieldError


@strawberry.type(name="User")
class UserType:
    id: int
    username: str
    created_at: datetime

    @classmethod
    def from_domain(cls, user: User) -> "UserType":
        return cls(id=user.id, username=user.username, created_at=user.created_at)


@strawberry.type
class FieldError:
    field: str
    message: str


@strawberry.type
class UserResponse:
    errors: Optional[list[FieldError]] = None
    user: Optional[UserType] = None

    @classmethod
    def from_error(cls, error: AuthFieldError) -> "UserResponse":
        return cls(errors=[FieldError(field=error.field, message=error.message)])

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(user=UserType.from_domain(user))


@strawberry.input
class UsernamePasswordInput:
    username: str
    password: str
