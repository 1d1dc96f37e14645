# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request
from flask.blueprints import BlueprintSetupState
from pydantic import ValidationError
from werkzeug.routing import BaseConverter

from recordkeeper.application.services.user_directory import UserDirectory
from recordkeeper.domain.users.entities import User
from recordkeeper.domain.users.exceptions import UnauthorizedError
from recordkeeper.infrastructure.auth.auth_gate import current_identity
from recordkeeper.interfaces.http.dto.users import AuthTokenDTO, DeletedDTO, UserCredentialsDTO
from recordkeeper.shared.errors.validation import raise_validation_error
from recordkeeper.shared.logging import logger


class TokenConverter(BaseConverter):
    """Standard base64: may start with "/" and contain "//"."""

    regex = ".+"
    part_isolating = False


def _register_token_converter(state: BlueprintSetupState) -> None:
    state.app.url_map.converters.setdefault("token", TokenConverter)


def _parse_credentials() -> UserCredentialsDTO:
    try:
        return UserCredentialsDTO.model_validate(request.get_json(silent=True) or {})
    except ValidationError as exc:
        raise_validation_error(exc)


def _ensure_acting_on_self(user_id: int) -> None:
    identity = current_identity()
    if identity.bypassed:
        return
    if identity.user_id != user_id:
        logger.warning(
            f"users: user_id={identity.user_id} attempted to modify user_id={user_id}"
        )
        raise UnauthorizedError()


class UsersController:
    def __init__(self, *, directory: UserDirectory) -> None:
        self._directory = directory

    def _token_response(self, user: User) -> Response:
        payload = AuthTokenDTO(id=user.id, token=self._directory.issue_token(user))
        return jsonify(payload.model_dump())

    def create(self) -> tuple[Response, int]:
        dto = _parse_credentials()
        user = self._directory.create(dto.username, dto.password)
        return self._token_response(user), 200

    def rotate(self, user_id: int) -> tuple[Response, int]:
        _ensure_acting_on_self(user_id)
        dto = _parse_credentials()
        user = self._directory.rotate(user_id, dto.username, dto.password)
        return self._token_response(user), 200

    def delete(self, user_id: int) -> tuple[Response, int]:
        _ensure_acting_on_self(user_id)
        deleted = self._directory.delete(user_id)
        return jsonify(DeletedDTO(deleted=deleted).model_dump()), 200

    def find_by_token(self, token: str) -> tuple[Response, int]:
        user = self._directory.resolve(token)
        return self._token_response(user), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("users", __name__, url_prefix="/users")
        bp.record_once(_register_token_converter)
        bp.add_url_rule("", view_func=self.create, methods=["POST"])
        bp.add_url_rule("/<int:user_id>", view_func=self.rotate, methods=["PUT"])
        bp.add_url_rule("/<int:user_id>", view_func=self.delete, methods=["DELETE"])
        bp.add_url_rule(
            "/token/<token:token>",
            view_func=self.find_by_token,
            methods=["GET"],
            merge_slashes=False,
        )
        return bp
