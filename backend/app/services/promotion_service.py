"""Promotion lookups for checkout."""

from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Promotion, PromotionStatus
from app.pricing import PromotionDiscount, as_utc


async def get_promotion(session: AsyncSession, promotion_id: UUID) -> Promotion | None:
    return await session.get(Promotion, promotion_id)


async def list_active(
    session: AsyncSession, *, now: datetime | None = None
) -> list[Promotion]:
    """Return promotions that are active and within their time window."""

    moment = as_utc(now) if now is not None else datetime.now(UTC)
    stmt = (
        select(Promotion)
        .where(Promotion.status == PromotionStatus.ACTIVE)
        .order_by(Promotion.end_time.asc())
    )
    result = await session.execute(stmt)
    return [
        promotion
        for promotion in result.scalars().all()
        if as_utc(promotion.start_time) <= moment <= as_utc(promotion.end_time)
    ]


def to_discount(promotion: Promotion) -> PromotionDiscount:
    """Snapshot a promotion row as a pricing discount source."""
    return PromotionDiscount(
        title=promotion.title,
        discount_type=promotion.discount_type,
        discount_value=Decimal(promotion.discount_value),
        start_time=as_utc(promotion.start_time),
        end_time=as_utc(promotion.end_time),
        min_purchase=Decimal(promotion.min_purchase),
        is_active=promotion.status is PromotionStatus.ACTIVE,
        reference_id=str(promotion.id),
    )
