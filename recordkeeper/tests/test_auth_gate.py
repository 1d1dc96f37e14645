from __future__ import annotations

from datetime import UTC, datetime
from typing import cast

import pytest
from flask import Flask, g, jsonify

from recordkeeper.application.services.user_directory import UserDirectory
from recordkeeper.domain.users.entities import User
from recordkeeper.domain.users.exceptions import UnauthorizedError
from recordkeeper.infrastructure.auth.auth_gate import (
    ANONYMOUS_TOKEN,
    AuthGate,
    configure_auth_gate,
    extract_token,
)
from recordkeeper.interfaces.http.controllers.health_controller import HealthController
from recordkeeper.shared.config import build_config
from recordkeeper.shared.errors import ConfigError
from recordkeeper.shared.middleware.error_handler import configure_error_handling

SECRET = "0123456789abcdef" * 4
BYPASS = "test-harness-bypass"


class StubDirectory:
    def __init__(self) -> None:
        self.resolved: list[str] = []
        now = datetime.now(UTC)
        self._user = User(id=7, username="alice", credential="$s$1$x", created_at=now, updated_at=now)

    def resolve(self, token: str) -> User:
        self.resolved.append(token)
        if token != "good-token":
            raise UnauthorizedError()
        return self._user


def _app(gate: AuthGate) -> Flask:
    app = Flask(__name__)
    configure_error_handling(app)
    configure_auth_gate(app, gate)
    app.register_blueprint(HealthController().as_blueprint())

    @app.route("/whoami", methods=["GET", "POST"])
    def whoami():
        return jsonify({"user_id": g.user_id, "bypassed": g.identity.bypassed})

    return app


@pytest.fixture()
def directory() -> StubDirectory:
    return StubDirectory()


@pytest.fixture()
def client(directory: StubDirectory):
    gate = AuthGate(cast(UserDirectory, directory))
    with _app(gate).test_client() as client:
        yield client


def test_health_without_header(client, directory: StubDirectory) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.get_json() == {}
    assert directory.resolved == []


def test_health_ignores_bad_token(client, directory: StubDirectory) -> None:
    response = client.get("/health", headers={"Authorization": "Bearer garbage"})

    assert response.status_code == 200
    assert directory.resolved == []


def test_missing_header_rejected_elsewhere(client) -> None:
    response = client.get("/whoami")

    assert response.status_code == 401
    assert response.get_json() == {"error": "unauthorized"}
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_unknown_route_without_header_is_unauthorized(client) -> None:
    assert client.get("/nowhere").status_code == 401


def test_valid_token_attaches_identity(client, directory: StubDirectory) -> None:
    response = client.get("/whoami", headers={"Authorization": "Bearer good-token"})

    assert response.status_code == 200
    assert response.get_json() == {"user_id": 7, "bypassed": False}
    assert directory.resolved == ["good-token"]


def test_invalid_token_rejected(client) -> None:
    response = client.get("/whoami", headers={"Authorization": "Bearer bad-token"})

    assert response.status_code == 401


@pytest.mark.parametrize("header", ["Basic good-token", "Bearer", "Bearer   ", "good-token"])
def test_malformed_header_rejected(client, directory: StubDirectory, header: str) -> None:
    response = client.get("/whoami", headers={"Authorization": header})

    assert response.status_code == 401
    assert directory.resolved == []


def test_explicit_placeholder_token_rejected(client, directory: StubDirectory) -> None:
    response = client.get("/whoami", headers={"Authorization": f"Bearer {ANONYMOUS_TOKEN}"})

    assert response.status_code == 401
    assert directory.resolved == []


def test_preflight_skips_gate(client) -> None:
    assert client.options("/whoami").status_code == 200


def test_extract_token() -> None:
    assert extract_token(None) == ANONYMOUS_TOKEN
    assert extract_token("") == ANONYMOUS_TOKEN
    assert extract_token("bearer abc/def+==") == "abc/def+=="


def test_bypass_token_honoured_in_test_env(directory: StubDirectory) -> None:
    config = build_config(AUTH_SECRET=SECRET, APP_ENV="test", AUTH_TEST_BYPASS_TOKEN=BYPASS)
    gate = AuthGate.from_config(cast(UserDirectory, directory), config)

    assert gate.bypass_enabled
    with _app(gate).test_client() as client:
        response = client.get("/whoami", headers={"Authorization": f"Bearer {BYPASS}"})
        other = client.get("/whoami", headers={"Authorization": "Bearer good-token"})

    assert response.status_code == 200
    assert response.get_json() == {"user_id": None, "bypassed": True}
    assert other.get_json()["user_id"] == 7
    assert directory.resolved == ["good-token"]


@pytest.mark.parametrize("app_env", ["development", "staging"])
def test_bypass_token_ignored_outside_test_env(directory: StubDirectory, app_env: str) -> None:
    config = build_config(AUTH_SECRET=SECRET, APP_ENV=app_env, AUTH_TEST_BYPASS_TOKEN=BYPASS)
    gate = AuthGate.from_config(cast(UserDirectory, directory), config)

    assert not gate.bypass_enabled
    with _app(gate).test_client() as client:
        response = client.get("/whoami", headers={"Authorization": f"Bearer {BYPASS}"})

    assert response.status_code == 401
    assert directory.resolved == [BYPASS]


def test_bypass_token_in_production_is_config_error(directory: StubDirectory) -> None:
    config = build_config(AUTH_SECRET=SECRET, APP_ENV="test", AUTH_TEST_BYPASS_TOKEN=BYPASS)
    production = config.model_copy(update={"app_env": "production"})

    with pytest.raises(ConfigError):
        AuthGate.from_config(cast(UserDirectory, directory), production)
