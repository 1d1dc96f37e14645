# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest


class MetricsController:
    """Prometheus exposition. Not a public path: scrapers send a bearer token."""

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("metrics", __name__)
        bp.add_url_rule("/metrics", view_func=self.metrics, methods=["GET"])
        return bp

    def metrics(self) -> Response:
        return Response(generate_latest(), content_type=CONTENT_TYPE_LATEST)
