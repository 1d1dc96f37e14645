from __future__ import annotations

from datetime import UTC, datetime
from typing import cast
from unittest.mock import MagicMock

import pytest
from flask import Flask, g

from recordkeeper.application.services.user_directory import UserDirectory
from recordkeeper.domain.users.entities import AuthIdentity, User
from recordkeeper.domain.users.exceptions import UserAlreadyExistsError, UserNotFoundError
from recordkeeper.interfaces.http.controllers.users_controller import UsersController
from recordkeeper.shared.middleware.error_handler import configure_error_handling


def _user(user_id: int = 1, username: str = "alice") -> User:
    now = datetime.now(UTC)
    return User(id=user_id, username=username, credential="$s$1$x", created_at=now, updated_at=now)


@pytest.fixture()
def directory() -> MagicMock:
    mock = MagicMock(spec=UserDirectory)
    mock.issue_token.return_value = "issued/token+=="
    return mock


@pytest.fixture()
def identity() -> dict[str, AuthIdentity]:
    return {"current": AuthIdentity(user=_user())}


@pytest.fixture()
def flask_app(directory: MagicMock, identity: dict[str, AuthIdentity]) -> Flask:
    app = Flask(__name__)
    configure_error_handling(app)

    @app.before_request
    def _attach_identity() -> None:
        g.identity = identity["current"]
        g.user_id = g.identity.user_id

    controller = UsersController(directory=cast(UserDirectory, directory))
    app.register_blueprint(controller.as_blueprint())
    return app


def test_create_returns_id_and_token(flask_app: Flask, directory: MagicMock) -> None:
    directory.create.return_value = _user(3, "bob")

    with flask_app.test_client() as client:
        response = client.post("/users", json={"username": "bob", "password": "secret123"})

    assert response.status_code == 200
    assert response.get_json() == {"id": 3, "token": "issued/token+=="}
    directory.create.assert_called_once_with("bob", "secret123")


@pytest.mark.parametrize(
    "payload",
    [{"username": "bob"}, {"password": "x"}, {"username": "", "password": "x"}, {}],
)
def test_create_invalid_payload_returns_400(
    flask_app: Flask, directory: MagicMock, payload: dict[str, str]
) -> None:
    with flask_app.test_client() as client:
        response = client.post("/users", json=payload)

    assert response.status_code == 400
    body = response.get_json()
    assert body["error"] == "validation_error"
    assert body["context"]["fields"]
    directory.create.assert_not_called()


def test_create_non_json_body_returns_400(flask_app: Flask) -> None:
    with flask_app.test_client() as client:
        response = client.post("/users", data="username=bob", content_type="text/plain")

    assert response.status_code == 400


def test_create_duplicate_returns_409(flask_app: Flask, directory: MagicMock) -> None:
    directory.create.side_effect = UserAlreadyExistsError()

    with flask_app.test_client() as client:
        response = client.post("/users", json={"username": "alice", "password": "x"})

    assert response.status_code == 409
    assert response.get_json()["error"] == "user_already_exists"


def test_rotate_self(flask_app: Flask, directory: MagicMock) -> None:
    directory.rotate.return_value = _user(1, "alice")

    with flask_app.test_client() as client:
        response = client.put("/users/1", json={"username": "alice", "password": "p2"})

    assert response.status_code == 200
    assert response.get_json() == {"id": 1, "token": "issued/token+=="}
    directory.rotate.assert_called_once_with(1, "alice", "p2")


def test_rotate_other_user_is_unauthorized(flask_app: Flask, directory: MagicMock) -> None:
    with flask_app.test_client() as client:
        response = client.put("/users/2", json={"username": "bob", "password": "p2"})

    assert response.status_code == 401
    directory.rotate.assert_not_called()


def test_bypassed_caller_may_rotate_anyone(
    flask_app: Flask, directory: MagicMock, identity: dict[str, AuthIdentity]
) -> None:
    identity["current"] = AuthIdentity(user=None, bypassed=True)
    directory.rotate.return_value = _user(2, "bob")

    with flask_app.test_client() as client:
        response = client.put("/users/2", json={"username": "bob", "password": "p2"})

    assert response.status_code == 200
    assert response.get_json()["id"] == 2


def test_rotate_unknown_user_returns_404(
    flask_app: Flask, directory: MagicMock, identity: dict[str, AuthIdentity]
) -> None:
    identity["current"] = AuthIdentity(user=None, bypassed=True)
    directory.rotate.side_effect = UserNotFoundError(99)

    with flask_app.test_client() as client:
        response = client.put("/users/99", json={"username": "x", "password": "p"})

    assert response.status_code == 404


def test_delete_self(flask_app: Flask, directory: MagicMock) -> None:
    directory.delete.return_value = 1

    with flask_app.test_client() as client:
        response = client.delete("/users/1")

    assert response.status_code == 200
    assert response.get_json() == {"deleted": 1}
    directory.delete.assert_called_once_with(1)


def test_delete_other_user_is_unauthorized(flask_app: Flask, directory: MagicMock) -> None:
    with flask_app.test_client() as client:
        response = client.delete("/users/5")

    assert response.status_code == 401
    directory.delete.assert_not_called()


def test_find_by_token_keeps_slashes(flask_app: Flask, directory: MagicMock) -> None:
    directory.resolve.return_value = _user()

    with flask_app.test_client() as client:
        response = client.get("/users/token/ab//cd/e+f==")

    assert response.status_code == 200
    assert response.get_json() == {"id": 1, "token": "issued/token+=="}
    directory.resolve.assert_called_once_with("ab//cd/e+f==")


def test_find_by_token_with_leading_slash(flask_app: Flask, directory: MagicMock) -> None:
    directory.resolve.return_value = _user()

    with flask_app.test_client() as client:
        response = client.get("/users/token//AbC+d/==")

    assert response.status_code == 200
    directory.resolve.assert_called_once_with("/AbC+d/==")
