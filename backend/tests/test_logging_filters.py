"""Tests for the log scrubbing filter."""

from __future__ import annotations

import logging

from app.security.logging_filters import SensitiveFilter, scrub


def test_scrub_masks_email_and_phone() -> None:
    text = scrub("Booking for linh@example.com / 0901234567 created")
    assert "linh@example.com" not in text
    assert "0901234567" not in text
    assert "l***@example.com" in text
    assert "***567" in text


def test_scrub_leaves_amounts_alone() -> None:
    assert scrub("total 152000 for 2 seats") == "total 152000 for 2 seats"


def test_filter_rewrites_formatted_record() -> None:
    record = logging.LogRecord(
        name="app.services.booking_service",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Customer %s booked",
        args=("linh@example.com",),
        exc_info=None,
    )
    assert SensitiveFilter().filter(record) is True
    assert record.getMessage() == "Customer l***@example.com booked"
