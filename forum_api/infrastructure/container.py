# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Application dependency container."""

from __future__ import annotations

from functools import cached_property

from forum_api.application.interfaces import SessionStore
from forum_api.application.services.password_hashing import Argon2PasswordHasher
from forum_api.application.use_cases.users import (
    CurrentUserUseCase,
    LoginUserUseCase,
    LogoutUserUseCase,
    RegisterUserUseCase,
)
from forum_api.infrastructure.db import ENGINE, SessionLocal
from forum_api.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyUserRepository,
)
from forum_api.infrastructure.sessions import build_session_store
from forum_api.interfaces.graphql import AuthUseCases, schema
from forum_api.interfaces.http.controllers.graphql_controller import GraphQLController
from forum_api.interfaces.http.controllers.misc_controller import MiscController
from forum_api.shared.config import AppConfig, load_config


class Container:
    def __init__(self, config: AppConfig | None = None) -> None:
        self._config = config or load_config()

    @property
    def config(self) -> AppConfig:
        return self._config

    @cached_property
    def password_hasher(self) -> Argon2PasswordHasher:
        params = self._config.password_hashing
        return Argon2PasswordHasher(
            time_cost=params.time_cost,
            memory_cost=params.memory_cost,
            parallelism=params.parallelism,
        )

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(SessionLocal)

    @cached_property
    def session_store(self) -> SessionStore:
        return build_session_store(self._config.session)

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            users=self.user_repository,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def logout_user_use_case(self) -> LogoutUserUseCase:
        return LogoutUserUseCase()

    @cached_property
    def current_user_use_case(self) -> CurrentUserUseCase:
        return CurrentUserUseCase(users=self.user_repository)

    @cached_property
    def auth_use_cases(self) -> AuthUseCases:
        return AuthUseCases(
            register=self.register_user_use_case,
            login=self.login_user_use_case,
            logout=self.logout_user_use_case,
            current_user=self.current_user_use_case,
        )

    @cached_property
    def graphql_controller(self) -> GraphQLController:
        return GraphQLController(
            schema=schema,
            auth=self.auth_use_cases,
            graphql_ide=self._config.graphql_ide and not self._config.is_production(),
        )

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController(engine=ENGINE, session_store=self.session_store)


container = Container()
