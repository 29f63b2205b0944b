# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import hashlib
import secrets
import time
from typing import Any

from flask import Flask, Response, g, request, session

from forum_api.shared.config import load_config
from forum_api.shared.logging import (
    clear_correlation_id,
    logger,
    set_correlation_id,
    set_user_id,
)

_SENSITIVE_HEADERS = frozenset({"authorization", "cookie", "set-cookie"})
# GET /graphql may carry credentials inside ``variables``.
_SENSITIVE_PARAMS = ("password", "token", "secret", "variables")


def _client_ip() -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.remote_addr or "unknown"


def _fingerprint(value: str) -> str:
    return f"<hashed:{hashlib.sha256(value.encode()).hexdigest()[:8]}>"


def _safe_headers() -> dict[str, str]:
    return {
        key: _fingerprint(value) if key.lower() in _SENSITIVE_HEADERS else value
        for key, value in request.headers.items()
    }


def _safe_args() -> dict[str, Any]:
    return {
        key: "<redacted>" if any(p in key.lower() for p in _SENSITIVE_PARAMS) else value
        for key, value in request.args.items()
    }


def _graphql_operation() -> str | None:
    if request.path != "/graphql":
        return None
    if request.method == "GET":
        return request.args.get("operationName")
    body = request.get_json(silent=True)
    if isinstance(body, dict):
        return body.get("operationName")
    return None


def configure_request_logging(app: Flask) -> None:
    debug_mode = load_config().debug_logging

    @app.before_request
    def _before_request() -> None:
        set_correlation_id(request.headers.get("X-Request-ID") or secrets.token_urlsafe(8))
        # Runs after the session interface, so the identity is already resolved.
        set_user_id(getattr(session, "user_id", None))
        g.request_start_time = time.perf_counter()

        operation = _graphql_operation()
        suffix = f" op={operation}" if operation else ""
        if debug_mode:
            logger.info(
                f"Request started: {request.method} {request.path}{suffix} from {_client_ip()} "
                f"query={_safe_args()} headers={_safe_headers()} body_size={len(request.data)}"
            )
        else:
            logger.info(f"Request: {request.method} {request.path}{suffix} from {_client_ip()}")

    @app.after_request
    def _after_request(response: Response) -> Response:
        elapsed = time.perf_counter() - getattr(g, "request_start_time", time.perf_counter())
        # login/register/logout may have changed the identity during the request
        set_user_id(getattr(session, "user_id", None))
        logger.info(
            f"Response: {request.method} {request.path} "
            f"status={response.status_code} duration={elapsed:.3f}s"
        )
        return response

    @app.teardown_request
    def _teardown_request(exc: BaseException | None) -> None:
        if exc is not None:
            logger.error(f"Request error: {type(exc).__name__} on {request.method} {request.path}")
        clear_correlation_id()


__all__ = ["configure_request_logging"]
