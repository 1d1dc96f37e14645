# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, jsonify

from recordkeeper.infrastructure.auth.auth_gate import HEALTH_PATH


class HealthController:
    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("health", __name__)
        bp.add_url_rule(HEALTH_PATH, view_func=self.health, methods=["GET"])
        return bp

    def health(self):
        return jsonify({})
