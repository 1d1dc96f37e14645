# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .shared_secret import IV_SIZE, KEY_SIZE, MIN_SECRET_BYTES, SharedSecret
from .token_codec import CryptoError, EncodingError, TokenCodec, decrypt, encrypt

__all__ = [
    "CryptoError",
    "EncodingError",
    "IV_SIZE",
    "KEY_SIZE",
    "MIN_SECRET_BYTES",
    "SharedSecret",
    "TokenCodec",
    "decrypt",
    "encrypt",
]
