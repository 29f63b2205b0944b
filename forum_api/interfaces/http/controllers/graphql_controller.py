# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any

from flask import Blueprint, Request, Response, session
from strawberry import Schema
from strawberry.flask.views import GraphQLView

from forum_api.interfaces.graphql.context import AuthUseCases, GraphQLContext


class AuthGraphQLView(GraphQLView):
    def __init__(self, *, auth: AuthUseCases, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._auth = auth

    def get_context(self, request: Request, response: Response) -> GraphQLContext:
        # The session opened by StoreSessionInterface, handed over explicitly.
        return GraphQLContext(session=session._get_current_object(), auth=self._auth)


class GraphQLController:
    def __init__(self, *, schema: Schema, auth: AuthUseCases, graphql_ide: bool = False) -> None:
        self._schema = schema
        self._auth = auth
        self._graphql_ide = graphql_ide

    @property
    def graphql_ide(self) -> bool:
        return self._graphql_ide

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("graphql", __name__)
        bp.add_url_rule(
            "/graphql",
            view_func=AuthGraphQLView.as_view(
                "graphql_view",
                schema=self._schema,
                auth=self._auth,
                graphql_ide="graphiql" if self._graphql_ide else None,
            ),
        )
        return bp
