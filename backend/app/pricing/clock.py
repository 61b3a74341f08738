"""Timezone handling for discount validity windows."""

from __future__ import annotations

import datetime


def as_utc(value: datetime.datetime) -> datetime.datetime:
    """Read naive datetimes as UTC; SQLite hands them back without tzinfo."""
    if value.tzinfo is None:
        return value.replace(tzinfo=datetime.UTC)
    return value
