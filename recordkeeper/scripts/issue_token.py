# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Print the current bearer token of a stored user."""

from __future__ import annotations

import argparse
import sys

from recordkeeper.container import Container
from recordkeeper.infrastructure.db import init_db
from recordkeeper.shared.config import load_config
from recordkeeper.shared.errors import ConfigError


def issue_token_for(container: Container, username: str) -> str | None:
    user = container.user_directory.find_by_username(username)
    if user is None:
        return None
    return container.user_directory.issue_token(user)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Print the bearer token of a stored user")
    parser.add_argument(
        "username",
        nargs="?",
        default="admin",
        help="Username to issue the token for",
    )
    args = parser.parse_args(argv)

    try:
        container = Container(load_config())
        _ = container.secret
    except ConfigError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 1

    init_db(container.engine, container.config.database)
    token = issue_token_for(container, args.username)
    if token is None:
        print(f"User {args.username!r} not found", file=sys.stderr)
        return 1

    print(token)
    return 0


if __name__ == "__main__":
    sys.exit(main())
