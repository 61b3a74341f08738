"""Booking error codes raised by the checkout collaborators."""

from __future__ import annotations

import enum
from decimal import Decimal


class BookingErrorCode(str, enum.Enum):
    """Stable error codes surfaced to API clients."""

    MISSING_SEATS = "MISSING_SEATS"
    SEAT_UNAVAILABLE = "SEAT_UNAVAILABLE"
    DISCOUNT_REJECTED = "DISCOUNT_REJECTED"
    INSUFFICIENT_POINTS = "INSUFFICIENT_POINTS"
    VOUCHER_EXHAUSTED = "VOUCHER_EXHAUSTED"
    PRICE_CHANGED = "PRICE_CHANGED"


class BookingError(ValueError):
    """Base booking failure with a code and a user-safe message."""

    code: BookingErrorCode
    conflict: bool = False

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class MissingSeatsError(BookingError):
    code = BookingErrorCode.MISSING_SEATS

    def __init__(self) -> None:
        super().__init__("At least one seat must be selected")


class SeatUnavailableError(BookingError):
    code = BookingErrorCode.SEAT_UNAVAILABLE
    conflict = True

    def __init__(self, labels: list[str]) -> None:
        super().__init__(f"Seats already booked: {', '.join(sorted(labels))}")
        self.labels = labels


class DiscountRejectedError(BookingError):
    code = BookingErrorCode.DISCOUNT_REJECTED


class InsufficientPointsError(BookingError):
    code = BookingErrorCode.INSUFFICIENT_POINTS
    conflict = True

    def __init__(self, requested: int) -> None:
        super().__init__(f"Member cannot redeem {requested} points")
        self.requested = requested


class VoucherExhaustedError(BookingError):
    code = BookingErrorCode.VOUCHER_EXHAUSTED
    conflict = True

    def __init__(self, code: str) -> None:
        super().__init__(f"Voucher {code} is no longer available")
        self.voucher_code = code


class PriceChangedError(BookingError):
    code = BookingErrorCode.PRICE_CHANGED
    conflict = True

    def __init__(self, expected: Decimal, actual: Decimal) -> None:
        super().__init__(
            f"Total changed from {expected} to {actual}; please review the order"
        )
        self.expected = expected
        self.actual = actual


class NotFoundError(LookupError):
    """A referenced showtime, seat or booking does not exist."""
