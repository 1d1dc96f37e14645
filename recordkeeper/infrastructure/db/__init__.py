# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .session import Base, build_engine, create_session_factory, init_db
from . import models  # noqa: E402,F401  registers tables on Base.metadata

__all__ = ["Base", "build_engine", "create_session_factory", "init_db"]
