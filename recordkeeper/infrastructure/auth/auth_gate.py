# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Per-request bearer authentication.

A request without an ``Authorization`` header carries the anonymous
placeholder token, which only the health check accepts. Any other token must
resolve to a stored user through the user directory; there is no session
cache, so every request costs one decryption and one lookup.

The test-harness bypass token is read once when the gate is built. Outside
``APP_ENV=test`` the gate is built without it and never compares against it.
"""

from __future__ import annotations

import hmac
from collections.abc import Callable, Iterable

from flask import Flask, g, request

from recordkeeper.application.services.user_directory import UserDirectory
from recordkeeper.domain.users.entities import AuthIdentity
from recordkeeper.domain.users.exceptions import UnauthorizedError
from recordkeeper.shared.config import AppConfig
from recordkeeper.shared.errors.base import ConfigError
from recordkeeper.shared.logging import logger

ANONYMOUS_TOKEN = "_"
HEALTH_PATH = "/health"
_SCHEME = "bearer"


def _bypass_token_from_config(config: AppConfig) -> str | None:
    if config.auth_test_bypass_token is None:
        return None
    if config.is_production():
        raise ConfigError("AUTH_TEST_BYPASS_TOKEN must not be set when APP_ENV=production")
    if not config.is_test():
        logger.warning(
            f"auth.gate: AUTH_TEST_BYPASS_TOKEN ignored outside APP_ENV=test (APP_ENV={config.app_env})"
        )
        return None
    logger.warning("auth.gate: test bypass token ENABLED, never use this outside automated tests")
    return config.auth_test_bypass_token.get_secret_value()


def extract_token(header: str | None) -> str:
    if not header:
        return ANONYMOUS_TOKEN
    scheme, _, value = header.strip().partition(" ")
    value = value.strip()
    if scheme.lower() != _SCHEME or not value:
        raise UnauthorizedError()
    return value


class AuthGate:
    def __init__(
        self,
        directory: UserDirectory,
        *,
        public_paths: Iterable[str] = (HEALTH_PATH,),
        bypass_token: str | None = None,
    ) -> None:
        self._directory = directory
        self._public_paths = frozenset(public_paths)
        self._resolve: Callable[[str], AuthIdentity] = self._resolve_user
        if bypass_token is not None:
            self._bypass_token = bypass_token
            self._resolve = self._resolve_with_bypass

    @classmethod
    def from_config(cls, directory: UserDirectory, config: AppConfig) -> AuthGate:
        return cls(directory, bypass_token=_bypass_token_from_config(config))

    @property
    def bypass_enabled(self) -> bool:
        return self._resolve == self._resolve_with_bypass

    def authenticate(self, path: str, authorization: str | None) -> AuthIdentity:
        if path in self._public_paths:
            return AuthIdentity(user=None)

        token = extract_token(authorization)
        if token == ANONYMOUS_TOKEN:
            raise UnauthorizedError()
        return self._resolve(token)

    def _resolve_user(self, token: str) -> AuthIdentity:
        return AuthIdentity(user=self._directory.resolve(token))

    def _resolve_with_bypass(self, token: str) -> AuthIdentity:
        if hmac.compare_digest(token.encode("utf-8"), self._bypass_token.encode("utf-8")):
            return AuthIdentity(user=None, bypassed=True)
        return self._resolve_user(token)


def configure_auth_gate(app: Flask, gate: AuthGate) -> None:
    @app.before_request
    def _authenticate() -> None:
        if request.method == "OPTIONS":
            return None

        identity = gate.authenticate(request.path, request.headers.get("Authorization"))
        g.identity = identity
        g.user_id = identity.user_id
        if identity.bypassed:
            logger.debug(f"auth.gate: bypass on {request.method} {request.path}")
        return None


def current_identity() -> AuthIdentity:
    return getattr(g, "identity", AuthIdentity(user=None))


__all__ = [
    "ANONYMOUS_TOKEN",
    "AuthGate",
    "HEALTH_PATH",
    "configure_auth_gate",
    "current_identity",
    "extract_token",
]
