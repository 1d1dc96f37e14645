# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Errors that know how they render as an HTTP response.

The body is always ``{"error": <code>}`` plus an optional ``context`` mapping.
Auth failures never carry context, so a 401 does not reveal which check failed.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, ClassVar


@dataclass(slots=True)
class AppError(Exception):
    code: str
    status: HTTPStatus
    context: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.code)

    @property
    def is_server_fault(self) -> bool:
        return self.status >= HTTPStatus.INTERNAL_SERVER_ERROR

    def response_headers(self) -> dict[str, str]:
        """Headers the error response carries next to the JSON body."""
        return {}

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.code}
        if self.context:
            body["context"] = dict(self.context)
        return body


class DomainError(AppError):
    """A users-domain rule was broken.

    Subclasses pin ``error_code`` and ``error_status``; callers only pass context.
    """

    error_code: ClassVar[str] = "domain_error"
    error_status: ClassVar[HTTPStatus] = HTTPStatus.BAD_REQUEST

    def __init__(self, *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(code=self.error_code, status=self.error_status, context=context)


class InfrastructureError(AppError):
    def __init__(
        self,
        code: str = "infrastructure_error",
        *,
        status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(code=code, status=status, context=context)


class ValidationError(AppError):
    """Malformed client input: bad usernames, oversized passwords, token shape."""

    def __init__(
        self, code: str = "validation_error", *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__(code=code, status=HTTPStatus.BAD_REQUEST, context=context)


class ConfigError(Exception):
    """Invalid or missing startup configuration. The process must not serve."""


__all__ = [
    "AppError",
    "ConfigError",
    "DomainError",
    "InfrastructureError",
    "ValidationError",
]
