# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from typing import Optional

import strawberry
from graphql import GraphQLError
from strawberry.extensions import MaskErrors
from strawberry.types import Info

from forum_api.domain.users.exceptions import AuthFieldError

from .context import GraphQLContext
from .types import UserResponse, UsernamePasswordInput, UserType

AuthInfo = Info[GraphQLContext, None]


@strawberry.type
class Query:
    @strawberry.field
    def me(self, info: AuthInfo) -> Optional[UserType]:
        ctx = info.context
        user = ctx.auth.current_user.execute(ctx.session)
        return UserType.from_domain(user) if user else None


@strawberry.type
class Mutation:
    @strawberry.mutation
    def register(self, options: UsernamePasswordInput, info: AuthInfo) -> UserResponse:
        ctx = info.context
        try:
            user = ctx.auth.register.execute(options.username, options.password, ctx.session)
        except AuthFieldError as exc:
            return UserResponse.from_error(exc)
        return UserResponse.from_user(user)

    @strawberry.mutation
    def login(self, options: UsernamePasswordInput, info: AuthInfo) -> UserResponse:
        ctx = info.context
        try:
            user = ctx.auth.login.execute(options.username, options.password, ctx.session)
        except AuthFieldError as exc:
            return UserResponse.from_error(exc)
        return UserResponse.from_user(user)

    @strawberry.mutation
    def logout(self, info: AuthInfo) -> bool:
        return info.context.auth.logout.execute(info.context.session)


def _is_unexpected(error: GraphQLError) -> bool:
    # Query syntax and validation errors carry no original exception and stay visible.
    return error.original_error is not None


schema = strawberry.Schema(
    query=Query,
    mutation=Mutation,
    extensions=[lambda: MaskErrors(should_mask_error=_is_unexpected)],
)
