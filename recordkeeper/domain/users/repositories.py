# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Protocol

from .entities import User


class UserRepository(Protocol):
    def find_by_username(self, username: str) -> User | None: ...
    def find_by_credentials(self, username: str, credential: str) -> User | None: ...
    def add(self, username: str, credential: str) -> User: ...
    def update(self, user_id: int, *, username: str, credential: str) -> User | None: ...
    def delete(self, user_id: int) -> int: ...
    def count(self) -> int: ...


class CredentialHasher(Protocol):
    def hash(self, password: str | bytes) -> str: ...


class TokenSealer(Protocol):
    def encode_token(self, plaintext: str) -> str: ...
    def decode_token(self, token: str) -> str: ...
