"""Booking models and their seat, concession and discount lines."""

from __future__ import annotations

import enum
import uuid
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Enum, ForeignKey, Index, Integer, Numeric, String, text, true
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.models.mixins import TimestampMixin, UUIDPrimaryKeyMixin
from app.pricing import DiscountKind

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from app.models.catalog import Combo, Snack
    from app.models.cinema import Seat, Showtime
    from app.models.member import Member
    from app.models.pricing import Promotion, Voucher


class BookingStatus(str, enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"


class PaymentStatus(str, enum.Enum):
    PENDING = "PENDING"
    PAID = "PAID"


class PaymentMethod(str, enum.Enum):
    CASH = "CASH"
    ONLINE = "ONLINE"


class Booking(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Ticket booking with the priced totals captured at creation."""

    __tablename__ = "bookings"

    showtime_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("showtimes.id", ondelete="RESTRICT"), nullable=False
    )
    member_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("members.id", ondelete="SET NULL"), nullable=True
    )
    voucher_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("vouchers.id", ondelete="SET NULL"), nullable=True
    )
    promotion_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("promotions.id", ondelete="SET NULL"), nullable=True
    )
    customer_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    customer_phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    customer_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[BookingStatus] = mapped_column(
        Enum(BookingStatus), default=BookingStatus.PENDING, nullable=False
    )
    payment_method: Mapped[PaymentMethod] = mapped_column(
        Enum(PaymentMethod), nullable=False
    )
    payment_status: Mapped[PaymentStatus] = mapped_column(
        Enum(PaymentStatus), default=PaymentStatus.PENDING, nullable=False
    )
    subtotal: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    discount_total: Mapped[Decimal] = mapped_column(
        Numeric(14, 2), default=Decimal("0"), nullable=False
    )
    total_price: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    loyalty_points_used: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False
    )
    loyalty_points_earned: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False
    )

    showtime: Mapped["Showtime"] = relationship("Showtime")
    member: Mapped["Member | None"] = relationship("Member")
    voucher: Mapped["Voucher | None"] = relationship("Voucher")
    promotion: Mapped["Promotion | None"] = relationship("Promotion")
    seats: Mapped[list["BookingSeat"]] = relationship(
        "BookingSeat", back_populates="booking", cascade="all, delete-orphan"
    )
    combos: Mapped[list["BookingCombo"]] = relationship(
        "BookingCombo", back_populates="booking", cascade="all, delete-orphan"
    )
    snacks: Mapped[list["BookingSnack"]] = relationship(
        "BookingSnack", back_populates="booking", cascade="all, delete-orphan"
    )
    discounts: Mapped[list["BookingDiscount"]] = relationship(
        "BookingDiscount",
        back_populates="booking",
        cascade="all, delete-orphan",
        order_by="BookingDiscount.position",
    )


class BookingSeat(UUIDPrimaryKeyMixin, Base):
    """A seat held by a booking; at most one active row per showtime seat."""

    __tablename__ = "booking_seats"
    __table_args__ = (
        Index(
            "uq_booking_seats_active_seat",
            "showtime_id",
            "seat_id",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active"),
        ),
    )

    booking_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False
    )
    showtime_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("showtimes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    seat_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("seats.id", ondelete="RESTRICT"), nullable=False
    )
    unit_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    # False releases the seat for rebooking.
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default=true(), nullable=False
    )

    booking: Mapped[Booking] = relationship("Booking", back_populates="seats")
    seat: Mapped["Seat"] = relationship("Seat")


class BookingCombo(UUIDPrimaryKeyMixin, Base):
    __tablename__ = "booking_combos"

    booking_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False
    )
    combo_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("combos.id", ondelete="RESTRICT"), nullable=False
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    booking: Mapped[Booking] = relationship("Booking", back_populates="combos")
    combo: Mapped["Combo"] = relationship("Combo")


class BookingSnack(UUIDPrimaryKeyMixin, Base):
    __tablename__ = "booking_snacks"

    booking_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False
    )
    snack_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("snacks.id", ondelete="RESTRICT"), nullable=False
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    booking: Mapped[Booking] = relationship("Booking", back_populates="snacks")
    snack: Mapped["Snack"] = relationship("Snack")


class BookingDiscount(UUIDPrimaryKeyMixin, Base):
    """Applied discount, kept in display order as an audit trail."""

    __tablename__ = "booking_discounts"

    booking_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    kind: Mapped[DiscountKind] = mapped_column(Enum(DiscountKind), nullable=False)
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)

    booking: Mapped[Booking] = relationship("Booking", back_populates="discounts")
