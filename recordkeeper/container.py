"""Application dependency container."""

from __future__ import annotations

from functools import cached_property

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from recordkeeper.application.services.credential_hasher import ScryptCredentialHasher
from recordkeeper.application.services.user_directory import UserDirectory
from recordkeeper.infrastructure.auth.auth_gate import AuthGate
from recordkeeper.infrastructure.crypto import SharedSecret, TokenCodec
from recordkeeper.infrastructure.db import build_engine, create_session_factory
from recordkeeper.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyUserRepository,
)
from recordkeeper.interfaces.http.controllers.health_controller import HealthController
from recordkeeper.interfaces.http.controllers.metrics_controller import MetricsController
from recordkeeper.interfaces.http.controllers.users_controller import UsersController
from recordkeeper.shared.config import AppConfig


class Container:
    def __init__(self, config: AppConfig, *, engine: Engine | None = None) -> None:
        self.config = config
        self._engine = engine

    @cached_property
    def secret(self) -> SharedSecret:
        return SharedSecret.from_config(self.config)

    @cached_property
    def engine(self) -> Engine:
        return self._engine or build_engine(self.config.database)

    @cached_property
    def session_factory(self) -> sessionmaker[Session]:
        return create_session_factory(self.engine)

    @cached_property
    def token_codec(self) -> TokenCodec:
        return TokenCodec(self.secret)

    @cached_property
    def credential_hasher(self) -> ScryptCredentialHasher:
        return ScryptCredentialHasher(cost=self.config.auth_hash_cost)

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(self.session_factory)

    @cached_property
    def user_directory(self) -> UserDirectory:
        return UserDirectory(
            users=self.user_repository,
            hasher=self.credential_hasher,
            codec=self.token_codec,
        )

    @cached_property
    def auth_gate(self) -> AuthGate:
        return AuthGate.from_config(self.user_directory, self.config)

    @cached_property
    def users_controller(self) -> UsersController:
        return UsersController(directory=self.user_directory)

    @cached_property
    def health_controller(self) -> HealthController:
        return HealthController()

    @cached_property
    def metrics_controller(self) -> MetricsController:
        return MetricsController()
