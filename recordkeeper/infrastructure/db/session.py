# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from recordkeeper.shared.config import DatabaseConfig
from recordkeeper.shared.logging import logger

_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")


class Base(DeclarativeBase):
    pass


def build_engine(config: DatabaseConfig) -> Engine:
    kwargs: dict[str, Any] = {"echo": False, "future": True, "pool_pre_ping": True}

    if config.url.startswith("sqlite"):
        kwargs["connect_args"] = {
            "check_same_thread": False,
            "timeout": int(config.pool_timeout),
        }

    if config.url in _MEMORY_URLS:
        # In-memory SQLite lives on a single connection.
        kwargs["poolclass"] = StaticPool
    else:
        kwargs.update(
            pool_size=config.pool_size,
            max_overflow=config.max_overflow,
            pool_timeout=config.pool_timeout,
        )

    return create_engine(config.url, **kwargs)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


def init_db(engine: Engine, config: DatabaseConfig | None = None) -> None:
    """Create missing tables, retrying while the database is unreachable."""

    retries = config.connect_retries if config else 0
    retry = Retrying(
        stop=stop_after_attempt(retries + 1),
        wait=wait_exponential(
            multiplier=config.connect_backoff if config else 0,
            max=config.connect_backoff_cap if config else 0,
        ),
        retry=retry_if_exception_type(OperationalError),
        reraise=True,
    )

    for attempt in retry:
        with attempt:
            number = attempt.retry_state.attempt_number
            if number > 1:
                logger.warning(f"db: schema setup retry attempt={number}/{retries + 1}")
            Base.metadata.create_all(bind=engine)

    logger.info("Database schema ensured")


__all__ = ["Base", "build_engine", "create_session_factory", "init_db"]
