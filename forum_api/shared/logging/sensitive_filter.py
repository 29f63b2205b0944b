# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import re
from typing import Any

_REDACTED = "***REDACTED***"

_RULES: list[tuple[re.Pattern[str], str]] = [
    # signing secret
    (
        re.compile(r"(secret[_-]?key\s*[:=]\s*['\"]?)([\w\-]{8,})(['\"]?)", re.IGNORECASE),
        rf"\1{_REDACTED}\3",
    ),
    (re.compile(r"(bearer\s+)([\w\-.]{20,})", re.IGNORECASE), rf"\1{_REDACTED}"),
    # plaintext passwords, also as JSON keys in GraphQL variables; a quoted
    # value is redacted up to its closing quote, spaces included
    (
        re.compile(r"(password['\"]?\s*[:=]\s*)(['\"])(.*?)\2", re.IGNORECASE),
        rf"\1\2{_REDACTED}\2",
    ),
    (
        re.compile(r"(password['\"]?\s*[:=]\s*)(?!['\"])([^,}\s]+)", re.IGNORECASE),
        rf"\1{_REDACTED}",
    ),
    # session ids and the signed qid cookie
    (re.compile(r"(\bsid\s*[:=]\s*['\"]?)([\w\-.]{20,})(['\"]?)"), rf"\1{_REDACTED}\3"),
    (re.compile(r"(\bqid\s*=\s*)([\w\-.]{20,})"), rf"\1{_REDACTED}"),
    # credentials embedded in database / redis URLs
    (
        re.compile(r"\b(postgresql|postgres|mysql|rediss?)(\+\w+)?://([^:/@\s]*):([^@\s]+)@"),
        rf"\1\2://\3:{_REDACTED}@",
    ),
]


def sanitize_message(message: str) -> str:
    for pattern, replacement in _RULES:
        message = pattern.sub(replacement, message)
    return message


def sanitize_record(record: dict[str, Any]) -> bool:
    """Loguru filter: scrub the message in place, never drop the record."""
    record["message"] = sanitize_message(record["message"])
    return True
