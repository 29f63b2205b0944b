# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from flask import Flask, Response
from flask_cors import CORS

from forum_api.infrastructure.container import Container, container
from forum_api.infrastructure.db import init_db
from forum_api.shared.config import AppConfig
from forum_api.shared.logging import logger, setup_logging
from forum_api.shared.middleware.error_handler import configure_error_handling
from forum_api.shared.middleware.request_logger import configure_request_logging
from forum_api.shared.middleware.sessions import configure_sessions

_SECURITY_HEADERS = {
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "X-Content-Type-Options": "nosniff",
    "Cross-Origin-Opener-Policy": "same-origin",
}
_HSTS = "max-age=31536000; includeSubDomains"


def _configure_cors(app: Flask, config: AppConfig) -> None:
    origins = config.security.allowed_origins
    # The qid cookie only travels cross-origin on credentialed requests,
    # which browsers refuse together with a wildcard origin.
    credentials = "*" not in origins
    CORS(
        app,
        resources={r"/graphql": {"origins": origins}},
        supports_credentials=credentials,
    )


def _configure_security_headers(app: Flask, config: AppConfig) -> None:
    headers = dict(_SECURITY_HEADERS)
    if config.security.enable_hsts:
        headers["Strict-Transport-Security"] = _HSTS

    @app.after_request
    def _add_security_headers(response: Response) -> Response:
        for name, value in headers.items():
            response.headers.setdefault(name, value)
        return response


def create_app(deps: Container | None = None) -> Flask:
    deps = deps or container
    config = deps.config

    setup_logging(debug_mode=config.debug_logging)
    init_db()

    app = Flask(__name__)
    configure_error_handling(app)
    configure_request_logging(app)
    configure_sessions(app, deps.session_store, config)
    _configure_cors(app, config)
    _configure_security_headers(app, config)

    app.register_blueprint(deps.misc_controller.as_blueprint())
    app.register_blueprint(deps.graphql_controller.as_blueprint())

    logger.info(
        f"forum-api ready env={config.app_env} sessions={config.session.backend} "
        f"ide={deps.graphql_controller.graphql_ide}"
    )
    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=4000)
