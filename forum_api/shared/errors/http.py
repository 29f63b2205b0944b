# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""JSON rendering of errors raised outside the GraphQL layer."""

from __future__ import annotations

from http import HTTPStatus

from flask import Flask, Response, jsonify, request
from werkzeug.exceptions import HTTPException, InternalServerError

from forum_api.shared.logging import logger

from .base import AppError, InfrastructureError

INTERNAL_ERROR = {"error": "internal_error"}


def _where() -> str:
    return f"{request.method} {request.path}"


def render_app_error(exc: AppError) -> tuple[Response, HTTPStatus]:
    if isinstance(exc, InfrastructureError):
        logger.error(f"Infrastructure error {exc.code} on {_where()}")
        return jsonify(INTERNAL_ERROR), HTTPStatus.INTERNAL_SERVER_ERROR
    logger.warning(f"Handled application error {exc.code} on {_where()}")
    return jsonify(exc.to_dict()), exc.status


def register_error_handler(app: Flask, *, debug_mode: bool = False) -> None:
    app.register_error_handler(AppError, render_app_error)

    @app.errorhandler(HTTPStatus.INTERNAL_SERVER_ERROR)
    def _handle_internal(exc: InternalServerError):
        # Also reached when saving the session fails after the view returned.
        original = exc.original_exception
        if original is not None:
            logger.error(f"Request failed: {type(original).__name__} on {_where()}")
        return jsonify(INTERNAL_ERROR), HTTPStatus.INTERNAL_SERVER_ERROR

    @app.errorhandler(HTTPException)
    def _handle_http(exc: HTTPException):
        if exc.code is None or exc.code < 400:
            return exc
        return jsonify({"error": (exc.name or "http_error").lower().replace(" ", "_")}), exc.code

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        if debug_mode:
            logger.exception(f"Unhandled exception on {_where()} body_size={len(request.data)}")
        else:
            logger.error(f"Unhandled {type(exc).__name__} on {_where()}")
        return jsonify(INTERNAL_ERROR), HTTPStatus.INTERNAL_SERVER_ERROR
