# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Loguru setup shared by the API process and the token script.

Every sink runs records through ``sanitize_record`` so bearer tokens, token path
segments and credential envelopes never reach stderr or the log file.
"""

from .logger import (
    DEFAULT_LOG_NAME,
    clear_correlation_id,
    get_correlation_id,
    log_file_path,
    logger,
    set_correlation_id,
    setup_logging,
)
from .sensitive_filter import SENSITIVE_PATTERNS, sanitize_message, sanitize_record

__all__ = [
    "DEFAULT_LOG_NAME",
    "SENSITIVE_PATTERNS",
    "clear_correlation_id",
    "get_correlation_id",
    "log_file_path",
    "logger",
    "sanitize_message",
    "sanitize_record",
    "set_correlation_id",
    "setup_logging",
]
