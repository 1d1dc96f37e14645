# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Keyed CRUD over any mapped model.

Each call runs in its own unit of work. Rows come back detached; the session factory is configured with
``expire_on_commit=False`` so their attributes stay readable.
"""

from __future__ import annotations

from collections.abc import Callable
from http import HTTPStatus
from typing import Any, Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from recordkeeper.infrastructure.db import Base
from recordkeeper.infrastructure.unit_of_work import unit_of_work_scope
from recordkeeper.shared.errors.base import InfrastructureError

ModelT = TypeVar("ModelT", bound=Base)


class RecordConflictError(InfrastructureError):
    def __init__(self, table: str) -> None:
        super().__init__(
            "record_conflict",
            status=HTTPStatus.CONFLICT,
            context={"table": table},
        )


class SqlAlchemyRecordStore(Generic[ModelT]):
    def __init__(self, model: type[ModelT], session_factory: Callable[[], Session]) -> None:
        self._model = model
        self._session_factory = session_factory

    @property
    def table(self) -> str:
        return self._model.__tablename__

    def find_one(self, **criteria: Any) -> ModelT | None:
        with unit_of_work_scope(self._session_factory, table=self.table) as session:
            stmt = select(self._model).filter_by(**criteria).limit(1)
            return session.scalars(stmt).first()

    def count(self, **criteria: Any) -> int:
        with unit_of_work_scope(self._session_factory, table=self.table) as session:
            stmt = select(func.count()).select_from(self._model).filter_by(**criteria)
            return int(session.scalar(stmt) or 0)

    def add(self, **values: Any) -> ModelT:
        with unit_of_work_scope(self._session_factory, table=self.table) as session:
            row = self._model(**values)
            session.add(row)
            self._flush(session)
            session.refresh(row)
            return row

    def update(self, key: Any, **values: Any) -> ModelT | None:
        with unit_of_work_scope(self._session_factory, table=self.table) as session:
            row = session.get(self._model, key)
            if row is None:
                return None
            for name, value in values.items():
                setattr(row, name, value)
            self._flush(session)
            session.refresh(row)
            return row

    def delete(self, key: Any) -> int:
        with unit_of_work_scope(self._session_factory, table=self.table) as session:
            row = session.get(self._model, key)
            if row is None:
                return 0
            session.delete(row)
            return 1

    def _flush(self, session: Session) -> None:
        try:
            session.flush()
        except IntegrityError as exc:
            raise RecordConflictError(self.table) from exc


__all__ = ["RecordConflictError", "SqlAlchemyRecordStore"]
