"""
Logging redaction helpers.
Redacts API keys and bearer tokens from log messages.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable


_PATTERNS: Iterable[tuple[re.Pattern, str]] = (
    # Authorization: Bearer <token>
    (re.compile(r"(Bearer\s+)([A-Za-z0-9\-\._]+)"), r"\1[REDACTED]"),
    # OpenAI-style secret keys
    (re.compile(r"sk-[A-Za-z0-9\-_]{8,}"), "sk-[REDACTED]"),
    # Generic api key / token key-value pairs
    (re.compile(r"(?i)(api[_-]?key|access_token|token)\s*[:=]\s*([A-Za-z0-9\-\._]+)"), r"\1=[REDACTED]"),
    # Credentials embedded in redis:// URLs
    (re.compile(r"(redis(?:s)?://[^:/@\s]*:)([^@\s]+)(@)"), r"\1[REDACTED]\3"),
)


def redact_message(message: str) -> str:
    redacted = message
    for pattern, replacement in _PATTERNS:
        redacted = pattern.sub(replacement, redacted)
    return redacted


class RedactingFilter(logging.Filter):
    """Filter that redacts sensitive data from log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        try:
            message = record.getMessage()
            record.msg = redact_message(message)
            record.args = ()
        except Exception:
            # If redaction fails, allow log through unmodified
            pass
        return True


def install_redaction_filter() -> None:
    root = logging.getLogger()
    for existing in root.filters:
        if isinstance(existing, RedactingFilter):
            return
    root.addFilter(RedactingFilter())
