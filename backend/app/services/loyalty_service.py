"""Loyalty member lookups and point ledger operations."""

from __future__ import annotations

import logging
from decimal import ROUND_CEILING, ROUND_FLOOR, Decimal
from uuid import UUID

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.models import Member, PointTransaction, PointTransactionType
from app.pricing import LoyaltyRedemption
from app.services.errors import InsufficientPointsError

logger = logging.getLogger(__name__)


def _point_value(point_value: Decimal | None) -> Decimal:
    if point_value is not None:
        return Decimal(point_value)
    return get_settings().loyalty_point_value


async def get_member(session: AsyncSession, member_id: UUID) -> Member | None:
    return await session.get(Member, member_id)


async def find_member(session: AsyncSession, *, query: str) -> Member | None:
    """Find a member by exact phone number or case-insensitive email."""

    needle = query.strip()
    if not needle:
        return None
    stmt = (
        select(Member)
        .where(or_(Member.phone == needle, Member.email.ilike(needle)))
        .limit(1)
    )
    return await session.scalar(stmt)


def max_redeemable_points(
    *, balance: int, order_amount: Decimal, point_value: Decimal | None = None
) -> int:
    """Points usable on an order: the balance, capped by what the order can absorb."""

    value = _point_value(point_value)
    if order_amount <= 0:
        return 0
    absorbable = int((Decimal(order_amount) / value).to_integral_value(ROUND_FLOOR))
    return max(0, min(balance, absorbable))


def points_for_amount(amount: Decimal, *, point_value: Decimal | None = None) -> int:
    """Whole points needed to cover a discount amount, rounded up."""

    value = _point_value(point_value)
    if amount <= 0 or value <= 0:
        return 0
    return int((Decimal(amount) / value).to_integral_value(ROUND_CEILING))


def to_redemption(
    member: Member | None,
    *,
    points: int,
    point_value: Decimal | None = None,
) -> LoyaltyRedemption:
    """Build a redemption source; the balance is attached when the member is known."""
    return LoyaltyRedemption(
        points_requested=points,
        point_value=_point_value(point_value),
        available_points=member.current_points if member is not None else None,
        reference_id=str(member.id) if member is not None else None,
    )


async def redeem_points(
    session: AsyncSession,
    *,
    member: Member,
    points: int,
    booking_id: UUID | None = None,
) -> PointTransaction:
    """Deduct points with a guarded UPDATE and record the ledger entry.

    Does not commit.
    """

    if points <= 0:
        raise ValueError("Points to redeem must be positive")
    stmt = (
        update(Member)
        .where(Member.id == member.id, Member.current_points >= points)
        .values(current_points=Member.current_points - points)
        .execution_options(synchronize_session=False)
    )
    result = await session.execute(stmt)
    if result.rowcount != 1:
        logger.warning("Member %s cannot redeem %s points", member.id, points)
        raise InsufficientPointsError(points)
    await session.refresh(member, attribute_names=["current_points"])

    entry = PointTransaction(
        member_id=member.id,
        type=PointTransactionType.REDEEM,
        points=points,
        description=f"Redeemed {points} points at checkout",
        booking_id=booking_id,
    )
    session.add(entry)
    return entry


async def earn_points(
    session: AsyncSession,
    *,
    member: Member,
    amount_paid: Decimal,
    booking_id: UUID | None = None,
    point_value: Decimal | None = None,
) -> int:
    """Credit one point per ``point_value`` paid. Does not commit.

    Balance and spend are incremented in the database so a concurrent
    redemption is never overwritten by this member snapshot.
    """

    value = _point_value(point_value)
    amount = Decimal(amount_paid)
    earned = max(0, int((amount / value).to_integral_value(ROUND_FLOOR)))
    stmt = (
        update(Member)
        .where(Member.id == member.id)
        .values(
            current_points=Member.current_points + earned,
            total_spent=Member.total_spent + amount,
        )
        .execution_options(synchronize_session=False)
    )
    await session.execute(stmt)
    await session.refresh(member, attribute_names=["current_points", "total_spent"])
    if earned == 0:
        return 0
    session.add(
        PointTransaction(
            member_id=member.id,
            type=PointTransactionType.EARN,
            points=earned,
            description=f"Earned {earned} points from booking",
            booking_id=booking_id,
        )
    )
    return earned


async def list_transactions(
    session: AsyncSession, *, member_id: UUID, limit: int = 50
) -> list[PointTransaction]:
    stmt = (
        select(PointTransaction)
        .where(PointTransaction.member_id == member_id)
        .order_by(PointTransaction.created_at.desc())
        .limit(limit)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())
