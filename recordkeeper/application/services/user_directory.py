# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from recordkeeper.domain.users.entities import User
from recordkeeper.domain.users.exceptions import (
    InvalidUsernameError,
    MalformedTokenError,
    UnauthorizedError,
    UserNotFoundError,
)
from recordkeeper.domain.users.repositories import CredentialHasher, TokenSealer, UserRepository
from recordkeeper.infrastructure.crypto import CryptoError, EncodingError
from recordkeeper.shared.logging import logger

DELIMITER = "$"
# "username" + "$" + "$scheme$cost$data"
TOKEN_SEGMENTS = 5
MAX_USERNAME_LENGTH = 64


def _validate_username(username: str) -> None:
    if not username:
        raise InvalidUsernameError("empty")
    if len(username) > MAX_USERNAME_LENGTH:
        raise InvalidUsernameError("too_long")
    if DELIMITER in username:
        raise InvalidUsernameError("reserved_character")


def split_token_payload(payload: str) -> tuple[str, str]:
    parts = payload.split(DELIMITER)
    if len(parts) != TOKEN_SEGMENTS:
        raise MalformedTokenError(len(parts))
    return parts[0], DELIMITER.join(parts[1:])


class UserDirectory:
    def __init__(
        self,
        *,
        users: UserRepository,
        hasher: CredentialHasher,
        codec: TokenSealer,
    ) -> None:
        self._users = users
        self._hasher = hasher
        self._codec = codec

    def count(self) -> int:
        return self._users.count()

    def find_by_username(self, username: str) -> User | None:
        return self._users.find_by_username(username)

    def create(self, username: str, password: str) -> User:
        _validate_username(username)
        credential = self._hasher.hash(password)
        user = self._users.add(username, credential)
        logger.info(f"users.create: ok user_id={user.id} username={user.username}")
        return user

    def rotate(self, user_id: int, username: str, password: str) -> User:
        """Replace the stored credential; every token issued before this call stops resolving."""
        _validate_username(username)
        credential = self._hasher.hash(password)
        user = self._users.update(user_id, username=username, credential=credential)
        if user is None:
            raise UserNotFoundError(user_id)
        logger.info(f"users.rotate: ok user_id={user.id} username={user.username}")
        return user

    def delete(self, user_id: int) -> int:
        deleted = self._users.delete(user_id)
        if not deleted:
            raise UserNotFoundError(user_id)
        logger.info(f"users.delete: ok user_id={user_id}")
        return deleted

    def resolve(self, token: str) -> User:
        try:
            payload = self._codec.decode_token(token)
            username, credential = split_token_payload(payload)
        except (EncodingError, CryptoError, MalformedTokenError) as exc:
            logger.debug(f"users.resolve: rejected token ({type(exc).__name__})")
            raise UnauthorizedError() from exc

        user = self._users.find_by_credentials(username, credential)
        if user is None:
            logger.debug("users.resolve: no matching user")
            raise UnauthorizedError()
        return user

    def issue_token(self, user: User) -> str:
        return self._codec.encode_token(f"{user.username}{DELIMITER}{user.credential}")


__all__ = [
    "DELIMITER",
    "MAX_USERNAME_LENGTH",
    "TOKEN_SEGMENTS",
    "UserDirectory",
    "split_token_payload",
]
