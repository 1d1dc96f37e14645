# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(slots=True, frozen=True)
class User:

    id: int
    username: str
    # Opaque envelope produced by the credential hasher; persisted as users.token.
    credential: str = field(repr=False)
    created_at: datetime
    updated_at: datetime


@dataclass(slots=True, frozen=True)
class AuthIdentity:
    """Outcome of the per-request gate. ``user`` is None for anonymous and bypassed requests."""

    user: User | None
    bypassed: bool = False

    @property
    def user_id(self) -> int | None:
        return self.user.id if self.user else None
