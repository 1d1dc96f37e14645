# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .settings import (
    AUTH_SECRET_MIN_BYTES,
    AppConfig,
    DatabaseConfig,
    ObservabilityConfig,
    SecurityConfig,
    build_config,
    load_config,
)

__all__ = [
    "AUTH_SECRET_MIN_BYTES",
    "AppConfig",
    "DatabaseConfig",
    "ObservabilityConfig",
    "SecurityConfig",
    "build_config",
    "load_config",
]
