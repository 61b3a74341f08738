"""Cinema room, seat and showtime models."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.models.mixins import TimestampMixin, UUIDPrimaryKeyMixin


class CinemaRoom(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Auditorium; ``fee`` is charged once per booked seat."""

    __tablename__ = "cinema_rooms"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    fee: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), default=Decimal("0"), nullable=False
    )

    seats: Mapped[list["Seat"]] = relationship("Seat", back_populates="room")


class SeatType(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Ticket price tier for a seat (standard, VIP, couple...)."""

    __tablename__ = "seat_types"

    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)


class Seat(UUIDPrimaryKeyMixin, Base):
    __tablename__ = "seats"
    __table_args__ = (UniqueConstraint("room_id", "row", "number"),)

    room_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("cinema_rooms.id", ondelete="CASCADE"), nullable=False
    )
    seat_type_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("seat_types.id"), nullable=False
    )
    row: Mapped[str] = mapped_column(String(4), nullable=False)
    number: Mapped[int] = mapped_column(Integer, nullable=False)

    room: Mapped[CinemaRoom] = relationship("CinemaRoom", back_populates="seats")
    seat_type: Mapped[SeatType] = relationship("SeatType")

    @property
    def label(self) -> str:
        return f"{self.row}{self.number}"


class Showtime(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A screening of a movie in a room."""

    __tablename__ = "showtimes"

    room_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("cinema_rooms.id", ondelete="CASCADE"), nullable=False
    )
    movie_title: Mapped[str] = mapped_column(String(255), nullable=False)
    starts_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    ends_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    room: Mapped[CinemaRoom] = relationship("CinemaRoom")
