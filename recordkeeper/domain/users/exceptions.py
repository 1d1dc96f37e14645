# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from recordkeeper.shared.errors.base import DomainError, ValidationError


class UserAlreadyExistsError(DomainError):
    error_code = "user_already_exists"
    error_status = HTTPStatus.CONFLICT


class UserNotFoundError(DomainError):
    error_code = "user_not_found"
    error_status = HTTPStatus.NOT_FOUND

    def __init__(self, user_id: int) -> None:
        super().__init__(context={"user_id": user_id})


class UnauthorizedError(DomainError):
    error_code = "unauthorized"
    error_status = HTTPStatus.UNAUTHORIZED

    def response_headers(self) -> dict[str, str]:
        return {"WWW-Authenticate": "Bearer"}


class PasswordTooLongError(ValidationError):
    def __init__(self, max_bytes: int) -> None:
        super().__init__("password_too_long", context={"max_bytes": max_bytes})


class InvalidUsernameError(ValidationError):
    def __init__(self, reason: str) -> None:
        super().__init__("username_invalid", context={"reason": reason})


class MalformedTokenError(ValidationError):
    def __init__(self, segments: int) -> None:
        super().__init__("token_malformed", context={"segments": segments})


__all__ = [
    "InvalidUsernameError",
    "MalformedTokenError",
    "PasswordTooLongError",
    "UnauthorizedError",
    "UserAlreadyExistsError",
    "UserNotFoundError",
]
