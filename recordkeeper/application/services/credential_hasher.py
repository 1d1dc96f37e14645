"""Password hashing strategies."""

from __future__ import annotations

import base64
import secrets

from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from recordkeeper.domain.users.exceptions import PasswordTooLongError
from recordkeeper.domain.users.repositories import CredentialHasher

MAX_PASSWORD_BYTES = 72
SALT_SIZE = 16
SCHEME_ID = "scrypt"
DEFAULT_COST = 14
_KEY_LENGTH = 32


class ScryptCredentialHasher(CredentialHasher):
    """Derives ``$scrypt$<cost>$<base64(salt || key)>`` with a fresh salt per call.

    The envelope starts with the token delimiter and holds exactly three more
    ``$``-separated fields; token parsing in the user directory relies on it.
    """

    def __init__(self, cost: int = DEFAULT_COST) -> None:
        if not 1 <= cost <= 20:
            raise ValueError(f"cost must be between 1 and 20, got {cost}")
        self._cost = cost

    @property
    def cost(self) -> int:
        return self._cost

    def hash(self, password: str | bytes) -> str:
        raw = password.encode("utf-8") if isinstance(password, str) else bytes(password)
        if len(raw) > MAX_PASSWORD_BYTES:
            raise PasswordTooLongError(MAX_PASSWORD_BYTES)

        salt = secrets.token_bytes(SALT_SIZE)
        kdf = Scrypt(salt=salt, length=_KEY_LENGTH, n=2**self._cost, r=8, p=1)
        derived = kdf.derive(raw)

        data = base64.b64encode(salt + derived).decode("ascii")
        return f"${SCHEME_ID}${self._cost}${data}"


__all__ = ["MAX_PASSWORD_BYTES", "SALT_SIZE", "SCHEME_ID", "ScryptCredentialHasher"]
