# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, jsonify
from sqlalchemy.engine import Engine

from forum_api.application.interfaces import SessionStore
from forum_api.infrastructure.health import check_database, check_session_store


class MiscController:
    def __init__(self, *, engine: Engine, session_store: SessionStore) -> None:
        self._engine = engine
        self._session_store = session_store

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("misc", __name__)
        bp.add_url_rule("/api/health", view_func=self.health, methods=["GET"])
        return bp

    def health(self):
        checks = {
            "database": check_database(self._engine),
            "sessions": check_session_store(self._session_store),
        }
        body: dict[str, object] = {name: "ok" if up else "error" for name, up in checks.items()}
        body["ok"] = all(checks.values())
        status = HTTPStatus.OK if body["ok"] else HTTPStatus.SERVICE_UNAVAILABLE
        return jsonify(body), status
