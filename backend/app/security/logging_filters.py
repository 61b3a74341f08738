"""Logging filters that scrub customer contact details."""

from __future__ import annotations

import logging
import re

_EMAIL_PATTERN = re.compile(r"([A-Za-z0-9._%+-])[A-Za-z0-9._%+-]*@([A-Za-z0-9.-]+\.[A-Za-z]{2,})")
_PHONE_PATTERN = re.compile(r"(?<![\w-])\+?\d[\d .-]{6,}(\d{3})(?![\w-])")


def mask_email(value: str) -> str:
    return _EMAIL_PATTERN.sub(r"\1***@\2", value)


def mask_phone(value: str) -> str:
    return _PHONE_PATTERN.sub(r"***\1", value)


def scrub(value: str) -> str:
    """Mask e-mail addresses and phone numbers in free text."""
    return mask_phone(mask_email(value))


class SensitiveFilter(logging.Filter):
    """Replace customer e-mails and phone numbers in log messages."""

    def filter(self, record: logging.LogRecord) -> bool:
        try:
            message = record.getMessage()
        except (TypeError, ValueError):
            return True
        scrubbed = scrub(message)
        if scrubbed != message:
            record.msg = scrubbed
            record.args = ()
        return True


__all__ = ["SensitiveFilter", "scrub"]
