# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Transaction scope for record store calls.

One session per call: commit on clean exit, rollback on any exception. A rollback
caused by a unique constraint is expected traffic (duplicate username, concurrent
bootstrap) and is logged at info; anything else is logged as a warning.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from recordkeeper.shared.logging import logger


def is_constraint_violation(exc: BaseException | None) -> bool:
    while exc is not None:
        if isinstance(exc, IntegrityError):
            return True
        exc = exc.__cause__
    return False


@dataclass(slots=True)
class SqlAlchemyUnitOfWork(AbstractContextManager):
    session_factory: Callable[[], Session]
    table: str = "-"
    _session: Session | None = None

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        self._session = self.session_factory()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        session = self.session
        try:
            if exc is None:
                session.commit()
                return
            if is_constraint_violation(exc):
                logger.info(f"uow[{self.table}]: rollback on constraint violation")
            else:
                logger.warning(f"uow[{self.table}]: rollback after {exc_type.__name__}")
            session.rollback()
        except Exception:
            logger.exception(f"uow[{self.table}]: could not finish transaction")
            session.rollback()
            raise
        finally:
            session.close()
            self._session = None

    @property
    def session(self) -> Session:
        if self._session is None:
            raise RuntimeError("unit of work has no open session")
        return self._session


@contextmanager
def unit_of_work_scope(factory: Callable[[], Session], *, table: str = "-") -> Iterator[Session]:
    with SqlAlchemyUnitOfWork(factory, table) as uow:
        yield uow.session


__all__ = ["SqlAlchemyUnitOfWork", "is_constraint_violation", "unit_of_work_scope"]
