# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import sys

from flask import Flask
from flask_cors import CORS

from recordkeeper.container import Container
from recordkeeper.infrastructure.admin_setup import bootstrap_admin_user
from recordkeeper.infrastructure.auth.auth_gate import configure_auth_gate
from recordkeeper.infrastructure.db import init_db
from recordkeeper.infrastructure.observability import configure_metrics
from recordkeeper.shared.config import AppConfig, load_config
from recordkeeper.shared.errors import ConfigError
from recordkeeper.shared.logging import logger, setup_logging
from recordkeeper.shared.middleware.error_handler import configure_error_handling
from recordkeeper.shared.middleware.request_logger import configure_request_logging

EXTENSION_KEY = "recordkeeper"


def create_app(config: AppConfig | None = None, *, container: Container | None = None) -> Flask:
    config = config or load_config()
    setup_logging(debug_mode=config.debug_logging)

    container = container or Container(config)
    # Fail on a bad secret before anything touches the database.
    _ = container.secret
    gate = container.auth_gate

    init_db(container.engine, config.database)
    bootstrap_admin_user(container.user_directory, config)

    app = Flask(__name__)
    configure_error_handling(app, debug_mode=config.debug_logging)
    configure_request_logging(app, debug_mode=config.debug_logging)
    configure_metrics(app, config.observability)
    configure_auth_gate(app, gate)

    CORS(app, resources={r"/*": {"origins": config.security.allowed_origins}})
    app.register_blueprint(container.health_controller.as_blueprint())
    app.register_blueprint(container.users_controller.as_blueprint())
    if config.observability.metrics_enabled:
        app.register_blueprint(container.metrics_controller.as_blueprint())
    app.extensions[EXTENSION_KEY] = container

    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("Cache-Control", "no-store")

        if config.security.enable_hsts:
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )

        return resp

    logger.info(f"Flask app initialized (APP_ENV={config.app_env})")
    return app


def main() -> None:
    try:
        config = load_config()
        app = create_app(config)
    except ConfigError as exc:
        print(
            f"\n❌ CRITICAL: Invalid configuration, refusing to start.\n   {exc}\n",
            file=sys.stderr,
        )
        sys.exit(1)

    app.run(host=config.host, port=config.port)


if __name__ == "__main__":
    main()
