# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""AES-256-CBC transform behind the external bearer tokens.

``encrypt`` / ``decrypt`` are pure functions over bytes; ``TokenCodec`` binds
them to the process secret and adds the base64 / UTF-8 layer that turns a
``username$credential`` string into the token handed to API callers.
"""

from __future__ import annotations

import base64
import binascii

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .shared_secret import IV_SIZE, KEY_SIZE, SharedSecret

BUFFER_SIZE = 4096
_BLOCK_BITS = algorithms.AES.block_size


class CryptoError(Exception):
    pass


class EncodingError(Exception):
    pass


def _check_sizes(key: bytes, iv: bytes) -> None:
    if len(key) != KEY_SIZE:
        raise CryptoError(f"key must be {KEY_SIZE} bytes, got {len(key)}")
    if len(iv) != IV_SIZE:
        raise CryptoError(f"iv must be {IV_SIZE} bytes, got {len(iv)}")


def _pump(context, data: bytes) -> bytes:
    """Feed ``data`` through ``context`` one buffer at a time, then flush it."""
    out = bytearray()
    view = memoryview(data)
    for offset in range(0, len(view), BUFFER_SIZE):
        out += context.update(view[offset:offset + BUFFER_SIZE])
    out += context.finalize()
    return bytes(out)


def encrypt(plaintext: bytes, key: bytes, iv: bytes) -> bytes:
    _check_sizes(key, iv)
    padded = _pump(padding.PKCS7(_BLOCK_BITS).padder(), plaintext)
    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    return _pump(encryptor, padded)


def decrypt(ciphertext: bytes, key: bytes, iv: bytes) -> bytes:
    _check_sizes(key, iv)
    decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
    try:
        padded = _pump(decryptor, ciphertext)
        return _pump(padding.PKCS7(_BLOCK_BITS).unpadder(), padded)
    except ValueError as exc:
        # Truncated input or bad padding.
        raise CryptoError(str(exc)) from exc


class TokenCodec:
    """Stateless apart from the immutable secret; safe to share between threads."""

    def __init__(self, secret: SharedSecret) -> None:
        self._secret = secret

    def encode_token(self, plaintext: str) -> str:
        sealed = encrypt(plaintext.encode("utf-8"), self._secret.key, self._secret.iv)
        return base64.b64encode(sealed).decode("ascii")

    def decode_token(self, token: str) -> str:
        try:
            sealed = base64.b64decode(token.encode("ascii"), validate=True)
        except (binascii.Error, UnicodeEncodeError) as exc:
            raise EncodingError("token is not valid base64") from exc

        plaintext = decrypt(sealed, self._secret.key, self._secret.iv)

        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise EncodingError("token payload is not valid UTF-8") from exc


__all__ = [
    "BUFFER_SIZE",
    "CryptoError",
    "EncodingError",
    "TokenCodec",
    "decrypt",
    "encrypt",
]
