# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .credential_hasher import MAX_PASSWORD_BYTES, ScryptCredentialHasher
from .user_directory import DELIMITER, TOKEN_SEGMENTS, UserDirectory

__all__ = [
    "DELIMITER",
    "MAX_PASSWORD_BYTES",
    "ScryptCredentialHasher",
    "TOKEN_SEGMENTS",
    "UserDirectory",
]
