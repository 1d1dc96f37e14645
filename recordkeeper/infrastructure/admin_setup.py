# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from recordkeeper.application.services.user_directory import UserDirectory
from recordkeeper.domain.users.entities import User
from recordkeeper.domain.users.exceptions import UserAlreadyExistsError
from recordkeeper.shared.config import AppConfig
from recordkeeper.shared.logging import logger

DEFAULT_ADMIN_USERNAME = "admin"
DEFAULT_ADMIN_PASSWORD = "admin"


class AdminSetup:
    @staticmethod
    def bootstrap_admin_user(directory: UserDirectory, config: AppConfig) -> User | None:
        if not config.bootstrap_admin:
            logger.info("admin_setup: BOOTSTRAP_ADMIN disabled, skipping admin bootstrap")
            return None

        if directory.count() > 0:
            logger.debug("admin_setup: users present, skipping admin bootstrap")
            return None

        try:
            user = directory.create(DEFAULT_ADMIN_USERNAME, DEFAULT_ADMIN_PASSWORD)
        except UserAlreadyExistsError:
            # Another instance bootstrapped the same database first.
            logger.info("admin_setup: admin created concurrently, skipping")
            return None

        logger.warning(
            f"admin_setup: Bootstrapping auth by creating "
            f"{DEFAULT_ADMIN_USERNAME}:{DEFAULT_ADMIN_PASSWORD} user (id={user.id})"
        )
        logger.warning(
            f"admin_setup: Remember to update the username and password of "
            f"{DEFAULT_ADMIN_USERNAME}:{DEFAULT_ADMIN_PASSWORD} user"
        )
        return user


def bootstrap_admin_user(directory: UserDirectory, config: AppConfig) -> User | None:
    return AdminSetup.bootstrap_admin_user(directory, config)


__all__ = [
    "AdminSetup",
    "DEFAULT_ADMIN_PASSWORD",
    "DEFAULT_ADMIN_USERNAME",
    "bootstrap_admin_user",
]
