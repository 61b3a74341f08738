"""Tests for promotion window filtering."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from typing import Any

import pytest

from app.db.session import get_sessionmaker
from app.services import promotion_service

pytestmark = pytest.mark.asyncio


async def test_list_active_respects_window(
    app_context: dict[str, Any], db_url: str
) -> None:
    now = app_context["now"]
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        running = await promotion_service.list_active(session, now=now)
        before = await promotion_service.list_active(
            session, now=now - timedelta(days=8)
        )
        after = await promotion_service.list_active(
            session, now=(now + timedelta(days=8)).replace(tzinfo=None)
        )

    assert [promotion.title for promotion in running] == ["Summer Sale"]
    assert before == []
    assert after == []


async def test_to_discount_reads_stored_window_as_utc(
    app_context: dict[str, Any], db_url: str
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        promotion = await promotion_service.get_promotion(
            session, app_context["promotion_ids"]["summer"]
        )
    discount = promotion_service.to_discount(promotion)

    assert discount.start_time.tzinfo is not None
    assert discount.is_active
    assert discount.is_eligible(Decimal("300000"), app_context["now"])
    assert not discount.is_eligible(
        Decimal("300000"), app_context["now"] + timedelta(days=8)
    )
