"""
SECRETS REDACTION
=================
Mask credentials in query strings before they reach the logs.
"""

from __future__ import annotations

import re

from Security.security_config import feature_enabled


_SECRET_PATTERNS = [
    re.compile(r"(password=)([^&\s]+)", re.IGNORECASE),
    re.compile(r"(password_confirmation=)([^&\s]+)", re.IGNORECASE),
    re.compile(r"(token=)([^&\s]+)", re.IGNORECASE),
]


def redact(value: str) -> str:
    if not feature_enabled("secrets-redaction", True):
        return value
    for pattern in _SECRET_PATTERNS:
        value = pattern.sub(r"\1***", value)
    return value
