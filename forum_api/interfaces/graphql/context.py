# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""GraphQL context: carries the request session and the auth use cases into resolvers."""

from __future__ import annotations

from dataclasses import dataclass

from forum_api.application.use_cases.users import (
    CurrentUserUseCase,
    LoginUserUseCase,
    LogoutUserUseCase,
    RegisterUserUseCase,
)
from forum_api.domain.sessions import UserSession


@dataclass(slots=True, frozen=True)
class AuthUseCases:
    register: RegisterUserUseCase
    login: LoginUserUseCase
    logout: LogoutUserUseCase
    current_user: CurrentUserUseCase


@dataclass(slots=True)
class GraphQLContext:
    session: UserSession
    auth: AuthUseCases
