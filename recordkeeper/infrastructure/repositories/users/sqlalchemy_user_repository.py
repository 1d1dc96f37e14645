# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable

from sqlalchemy.orm import Session

from recordkeeper.domain.users.entities import User as DomainUser
from recordkeeper.domain.users.exceptions import UserAlreadyExistsError
from recordkeeper.domain.users.repositories import UserRepository
from recordkeeper.infrastructure.db.models import User
from recordkeeper.infrastructure.repositories.record_store import (
    RecordConflictError,
    SqlAlchemyRecordStore,
)


def _to_domain(row: User) -> DomainUser:
    return DomainUser(
        id=row.id,
        username=row.username,
        credential=row.token,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._records: SqlAlchemyRecordStore[User] = SqlAlchemyRecordStore(User, session_factory)

    def find_by_username(self, username: str) -> DomainUser | None:
        row = self._records.find_one(username=username)
        return _to_domain(row) if row else None

    def find_by_credentials(self, username: str, credential: str) -> DomainUser | None:
        row = self._records.find_one(username=username, token=credential)
        return _to_domain(row) if row else None

    def add(self, username: str, credential: str) -> DomainUser:
        try:
            row = self._records.add(username=username, token=credential)
        except RecordConflictError as exc:
            raise UserAlreadyExistsError(context={"username": username}) from exc
        return _to_domain(row)

    def update(self, user_id: int, *, username: str, credential: str) -> DomainUser | None:
        try:
            row = self._records.update(user_id, username=username, token=credential)
        except RecordConflictError as exc:
            raise UserAlreadyExistsError(context={"username": username}) from exc
        return _to_domain(row) if row else None

    def delete(self, user_id: int) -> int:
        return self._records.delete(user_id)

    def count(self) -> int:
        return self._records.count()
