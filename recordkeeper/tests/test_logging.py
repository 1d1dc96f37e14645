from __future__ import annotations

import os
from pathlib import Path

import pytest
from loguru import logger as loguru_logger

from recordkeeper.app import EXTENSION_KEY, create_app
from recordkeeper.scripts.issue_token import issue_token_for
from recordkeeper.shared.config import DatabaseConfig, build_config
from recordkeeper.shared.logging import (
    clear_correlation_id,
    get_correlation_id,
    log_file_path,
    sanitize_message,
    set_correlation_id,
    setup_logging,
)

SECRET = "0123456789abcdef" * 4


@pytest.mark.parametrize(
    ("message", "leaked"),
    [
        ("Authorization: Bearer abc/def+ghi==", "abc/def+ghi=="),
        ("GET /users/token/QUJDREVGR0g/aGk= from 127.0.0.1", "QUJDREVGR0g/aGk="),
        ("stored $scrypt$14$c2FsdHNhbHRzYWx0 for alice", "c2FsdHNhbHRzYWx0"),
        ("password=hunter2", "hunter2"),
        ("AUTH_SECRET=0123456789abcdef", "0123456789abcdef"),
        ("postgresql+psycopg://rk:s3cret@db/records", "s3cret"),
    ],
)
def test_sanitize_message_redacts(message: str, leaked: str) -> None:
    sanitized = sanitize_message(message)

    assert leaked not in sanitized
    assert "***REDACTED***" in sanitized


def test_sanitize_message_keeps_plain_text() -> None:
    assert sanitize_message("users.create: ok user_id=3 username=bob") == (
        "users.create: ok user_id=3 username=bob"
    )


def test_correlation_id_roundtrip() -> None:
    set_correlation_id("req-1")
    assert get_correlation_id() == "req-1"

    clear_correlation_id()
    assert get_correlation_id() == "-"

    set_correlation_id(None)
    assert get_correlation_id() == "-"


def test_request_log_redacts_token_and_carries_request_id(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    log_file = tmp_path / "recordkeeper.log"
    monkeypatch.setenv("LOG_FILE", str(log_file))
    monkeypatch.delenv("AUTH_TEST_BYPASS_TOKEN", raising=False)
    app = create_app(
        build_config(
            AUTH_SECRET=SECRET,
            AUTH_HASH_COST=4,
            APP_ENV="test",
            database=DatabaseConfig(DATABASE_URL="sqlite://"),
        )
    )
    token = issue_token_for(app.extensions[EXTENSION_KEY], "admin")
    assert token is not None

    with app.test_client() as client:
        response = client.get(
            f"/users/token/{token}",
            headers={"Authorization": f"Bearer {token}", "X-Request-ID": "req-7f3a"},
        )
    loguru_logger.complete()

    assert response.status_code == 200
    text = log_file.read_text(encoding="utf-8")
    assert "req-7f3a" in text
    assert "/users/token/***REDACTED***" in text
    assert token not in text


def test_default_log_file_lives_under_working_directory(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv("LOG_FILE", raising=False)
    monkeypatch.chdir(tmp_path)
    expected = tmp_path / "instance" / "recordkeeper.log"

    assert log_file_path() == str(expected)
    try:
        setup_logging()
        loguru_logger.info("users.create: ok user_id=1")
        loguru_logger.complete()
        assert "users.create: ok user_id=1" in expected.read_text(encoding="utf-8")
    finally:
        monkeypatch.setenv("LOG_FILE", "")
        setup_logging()


def test_empty_log_file_means_stderr_only(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_FILE", "")

    assert log_file_path() is None


def test_unwritable_log_directory_falls_back_to_stderr(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.delenv("LOG_FILE", raising=False)
    monkeypatch.chdir(tmp_path)

    def read_only(path: str, *args, **kwargs) -> None:
        raise PermissionError(13, "Read-only file system", path)

    monkeypatch.setattr(os, "makedirs", read_only)
    try:
        setup_logging()
        loguru_logger.info("still logging")
    finally:
        monkeypatch.setenv("LOG_FILE", "")
        setup_logging()

    err = capsys.readouterr().err
    assert "logging: file sink disabled" in err
    assert "still logging" in err
    assert not (tmp_path / "instance").exists()
