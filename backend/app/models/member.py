"""Loyalty member and point ledger models."""

from __future__ import annotations

import enum
import uuid
from decimal import Decimal

from sqlalchemy import Enum, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.models.mixins import TimestampMixin, UUIDPrimaryKeyMixin


class MembershipLevel(str, enum.Enum):
    SILVER = "Silver"
    GOLD = "Gold"
    PLATINUM = "Platinum"


class PointTransactionType(str, enum.Enum):
    EARN = "earn"
    REDEEM = "redeem"


class Member(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Loyalty programme member."""

    __tablename__ = "members"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True, index=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    membership_level: Mapped[MembershipLevel] = mapped_column(
        Enum(MembershipLevel), default=MembershipLevel.SILVER, nullable=False
    )
    current_points: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_spent: Mapped[Decimal] = mapped_column(
        Numeric(14, 2), default=Decimal("0"), nullable=False
    )

    transactions: Mapped[list["PointTransaction"]] = relationship(
        "PointTransaction",
        back_populates="member",
        cascade="all, delete-orphan",
        order_by="PointTransaction.created_at",
    )


class PointTransaction(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Ledger entry for points earned or redeemed."""

    __tablename__ = "point_transactions"

    member_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("members.id", ondelete="CASCADE"), nullable=False
    )
    type: Mapped[PointTransactionType] = mapped_column(
        Enum(PointTransactionType), nullable=False
    )
    points: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    booking_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("bookings.id", ondelete="SET NULL"), nullable=True
    )

    member: Mapped[Member] = relationship("Member", back_populates="transactions")
