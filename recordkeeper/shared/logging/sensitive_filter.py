# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import re
from typing import Any

SENSITIVE_PATTERNS = [
    # Bearer tokens (standard base64 alphabet)
    (r"(bearer\s+)([A-Za-z0-9+/=_\-\.]{8,})", r"\1***REDACTED***", re.IGNORECASE),
    (r"(/users/token/)([A-Za-z0-9+/=_\-\.%]{8,})", r"\1***REDACTED***"),
    (r"(token\s*[:=]\s*['\"]?)([A-Za-z0-9+/=_\-\.]{8,})(['\"]?)", r"\1***REDACTED***\3", re.IGNORECASE),

    # Stored credential envelopes
    (r"\$scrypt\$\d+\$[A-Za-z0-9+/=]+", r"$scrypt$***REDACTED***"),

    # Passwords and secrets
    (r"(password\s*[:=]\s*['\"]?)([^'\"\s,}]+)(['\"]?)", r"\1***REDACTED***\3", re.IGNORECASE),
    (r"(auth[_-]?secret\s*[:=]\s*['\"]?)([^'\"\s,}]+)(['\"]?)", r"\1***REDACTED***\3", re.IGNORECASE),

    # Database URLs with credentials
    (r"(postgres(?:ql)?|mysql|mariadb)(\+\w+)?://([^:/@]+):([^@]+)@", r"\1\2://\3:***REDACTED***@"),

    # Authorization headers
    (r"(authorization\s*:\s*['\"]?)([^'\"]{4,})(['\"]?)", r"\1***REDACTED***\3", re.IGNORECASE),
]


def sanitize_message(message: str) -> str:
    sanitized = message

    for pattern_tuple in SENSITIVE_PATTERNS:
        if len(pattern_tuple) == 2:
            pattern, replacement = pattern_tuple
            flags = 0
        else:
            pattern, replacement, flags = pattern_tuple

        sanitized = re.sub(pattern, replacement, sanitized, flags=flags)

    return sanitized


def sanitize_record(record: dict[str, Any]) -> bool:
    if "message" in record:
        record["message"] = sanitize_message(record["message"])
    return True


__all__ = ["SENSITIVE_PATTERNS", "sanitize_message", "sanitize_record"]
