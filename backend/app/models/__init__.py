"""ORM models package export."""

from app.models.booking import (
    Booking,
    BookingCombo,
    BookingDiscount,
    BookingSeat,
    BookingSnack,
    BookingStatus,
    PaymentMethod,
    PaymentStatus,
)
from app.models.catalog import (
    CatalogStatus,
    Combo,
    ComboSnack,
    Snack,
    SnackCategory,
    SnackSize,
)
from app.models.cinema import CinemaRoom, Seat, SeatType, Showtime
from app.models.member import (
    Member,
    MembershipLevel,
    PointTransaction,
    PointTransactionType,
)
from app.models.pricing import Promotion, PromotionStatus, Voucher

__all__ = [
    "Booking",
    "BookingCombo",
    "BookingDiscount",
    "BookingSeat",
    "BookingSnack",
    "BookingStatus",
    "CatalogStatus",
    "CinemaRoom",
    "Combo",
    "ComboSnack",
    "Member",
    "MembershipLevel",
    "PaymentMethod",
    "PaymentStatus",
    "PointTransaction",
    "PointTransactionType",
    "Promotion",
    "PromotionStatus",
    "Seat",
    "SeatType",
    "Showtime",
    "Snack",
    "SnackCategory",
    "SnackSize",
    "Voucher",
]
