from __future__ import annotations

import base64

import pytest

from recordkeeper.application.services.credential_hasher import (
    MAX_PASSWORD_BYTES,
    SALT_SIZE,
    ScryptCredentialHasher,
)
from recordkeeper.domain.users.exceptions import PasswordTooLongError


@pytest.fixture()
def hasher() -> ScryptCredentialHasher:
    return ScryptCredentialHasher(cost=4)


def test_hash_produces_versioned_envelope(hasher: ScryptCredentialHasher) -> None:
    credential = hasher.hash("secret123")

    empty, scheme, cost, data = credential.split("$")
    assert empty == ""
    assert scheme == "scrypt"
    assert cost == "4"
    assert len(base64.b64decode(data, validate=True)) == SALT_SIZE + 32


def test_hash_is_salted(hasher: ScryptCredentialHasher) -> None:
    first = hasher.hash("secret123")
    second = hasher.hash("secret123")

    assert first != second
    assert "secret123" not in first


def test_password_at_byte_limit_is_accepted(hasher: ScryptCredentialHasher) -> None:
    assert hasher.hash("a" * MAX_PASSWORD_BYTES).startswith("$scrypt$")


def test_password_over_byte_limit_is_rejected(hasher: ScryptCredentialHasher) -> None:
    with pytest.raises(PasswordTooLongError) as excinfo:
        hasher.hash("a" * (MAX_PASSWORD_BYTES + 1))

    assert excinfo.value.code == "password_too_long"
    assert excinfo.value.status == 400


def test_limit_counts_bytes_not_characters(hasher: ScryptCredentialHasher) -> None:
    # 37 two-byte characters = 74 bytes
    with pytest.raises(PasswordTooLongError):
        hasher.hash("é" * 37)

    assert hasher.hash(b"\xff" * MAX_PASSWORD_BYTES)


@pytest.mark.parametrize("cost", [0, 21])
def test_cost_out_of_range(cost: int) -> None:
    with pytest.raises(ValueError):
        ScryptCredentialHasher(cost=cost)
