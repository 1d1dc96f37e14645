# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass, field

from recordkeeper.shared.config import AppConfig
from recordkeeper.shared.errors.base import ConfigError

KEY_SIZE = 32
IV_SIZE = 16
MIN_SECRET_BYTES = KEY_SIZE + IV_SIZE


@dataclass(slots=True, frozen=True)
class SharedSecret:
    key: bytes = field(repr=False)
    iv: bytes = field(repr=False)

    @classmethod
    def from_bytes(cls, raw: bytes) -> SharedSecret:
        if len(raw) < MIN_SECRET_BYTES:
            raise ConfigError(
                f"AUTH_SECRET must be at least {MIN_SECRET_BYTES} bytes, got {len(raw)}"
            )
        return cls(key=bytes(raw[:KEY_SIZE]), iv=bytes(raw[KEY_SIZE:MIN_SECRET_BYTES]))

    @classmethod
    def from_config(cls, config: AppConfig) -> SharedSecret:
        return cls.from_bytes(config.auth_secret.get_secret_value().encode("utf-8"))


__all__ = ["IV_SIZE", "KEY_SIZE", "MIN_SECRET_BYTES", "SharedSecret"]
