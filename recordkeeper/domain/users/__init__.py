# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import AuthIdentity, User
from .exceptions import (
    InvalidUsernameError,
    MalformedTokenError,
    PasswordTooLongError,
    UnauthorizedError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from .repositories import CredentialHasher, TokenSealer, UserRepository

__all__ = [
    "AuthIdentity",
    "CredentialHasher",
    "InvalidUsernameError",
    "MalformedTokenError",
    "PasswordTooLongError",
    "TokenSealer",
    "UnauthorizedError",
    "User",
    "UserAlreadyExistsError",
    "UserNotFoundError",
    "UserRepository",
]
