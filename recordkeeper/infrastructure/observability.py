# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import time

from flask import Flask, g, request
from prometheus_client import Counter, Histogram

from recordkeeper.shared.config import ObservabilityConfig
from recordkeeper.shared.logging import logger

REQUEST_LATENCY = Histogram(
    "recordkeeper_request_latency_seconds",
    "Request latency",
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2, 5),
)
REQUEST_COUNTER = Counter(
    "recordkeeper_requests_total",
    "Number of processed requests",
    labelnames=("endpoint", "status"),
)
AUTH_OUTCOMES = Counter(
    "recordkeeper_auth_requests_total",
    "Authentication gate outcomes",
    labelnames=("outcome",),
)


def auth_outcome(status_code: int) -> str:
    if status_code == 401:
        return "rejected"
    identity = getattr(g, "identity", None)
    if identity is None:
        return "skipped"
    if identity.bypassed:
        return "bypassed"
    if identity.user is not None:
        return "authenticated"
    return "public"


def configure_metrics(app: Flask, config: ObservabilityConfig) -> None:
    if not config.metrics_enabled:
        logger.info("metrics: disabled")
        return

    @app.before_request
    def _start_timer() -> None:
        g.metrics_start = time.perf_counter()

    @app.after_request
    def _observe(response):
        start = getattr(g, "metrics_start", None)
        if start is not None:
            REQUEST_LATENCY.observe(time.perf_counter() - start)
        # Rule template, never the raw path: token paths carry credentials.
        endpoint = request.url_rule.rule if request.url_rule else "unmatched"
        REQUEST_COUNTER.labels(endpoint=endpoint, status=str(response.status_code)).inc()
        AUTH_OUTCOMES.labels(outcome=auth_outcome(response.status_code)).inc()
        return response


__all__ = [
    "AUTH_OUTCOMES",
    "REQUEST_COUNTER",
    "REQUEST_LATENCY",
    "auth_outcome",
    "configure_metrics",
]
