"""Logging filters that scrub sensitive content."""

from __future__ import annotations

import logging
import re

_SENSITIVE_PATTERN = re.compile(
    r"(Bearer\s+[\w\.-]+|\"?(?:token|password)\"?\s*[:=]\s*\"?[^\s\",}]+\"?)",
    re.IGNORECASE,
)
_PHONE_PATTERN = re.compile(r"(?<!\d)\d{6}(\d{4})(?!\d)")


def scrub(text: str) -> str:
    """Redact bearer tokens and passwords; mask 10-digit numbers to their last four."""
    text = _SENSITIVE_PATTERN.sub("**REDACTED**", text)
    return _PHONE_PATTERN.sub(r"******\1", text)


class SensitiveFilter(logging.Filter):
    """Replace sensitive tokens in log messages with a redaction marker."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = scrub(record.msg)
        if isinstance(record.args, tuple):
            record.args = tuple(
                scrub(arg) if isinstance(arg, str) else arg for arg in record.args
            )
        elif isinstance(record.args, dict):
            record.args = {
                key: scrub(value) if isinstance(value, str) else value
                for key, value in record.args.items()
            }
        return True


def install(logger_names: tuple[str, ...] = ("uvicorn", "uvicorn.access", "uvicorn.error", "")) -> None:
    """Attach one SensitiveFilter to each named logger."""
    for name in logger_names:
        target = logging.getLogger(name)
        if not any(isinstance(flt, SensitiveFilter) for flt in target.filters):
            target.addFilter(SensitiveFilter())


__all__ = ["SensitiveFilter", "install", "scrub"]
