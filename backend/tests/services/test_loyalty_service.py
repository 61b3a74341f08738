"""Tests for loyalty point lookups and ledger updates."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

import pytest
from sqlalchemy import select

from app.db.session import get_sessionmaker
from app.models import Member, PointTransaction, PointTransactionType
from app.services import loyalty_service
from app.services.errors import InsufficientPointsError

pytestmark = pytest.mark.asyncio


async def test_max_redeemable_points_is_capped_by_order() -> None:
    assert (
        loyalty_service.max_redeemable_points(
            balance=500, order_amount=Decimal("152500"), point_value=Decimal("1000")
        )
        == 152
    )
    assert (
        loyalty_service.max_redeemable_points(
            balance=40, order_amount=Decimal("152500"), point_value=Decimal("1000")
        )
        == 40
    )
    assert (
        loyalty_service.max_redeemable_points(balance=40, order_amount=Decimal("0"))
        == 0
    )


async def test_find_member_by_phone_or_email(
    app_context: dict[str, Any], db_url: str
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        by_phone = await loyalty_service.find_member(session, query="0901234567")
        by_email = await loyalty_service.find_member(session, query="LINH@example.com")
        missing = await loyalty_service.find_member(session, query="nobody@example.com")
    assert by_phone is not None and by_phone.id == app_context["member_id"]
    assert by_email is not None and by_email.id == app_context["member_id"]
    assert missing is None


async def test_redeem_and_earn_record_ledger(
    app_context: dict[str, Any], db_url: str
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        member = await session.get(Member, app_context["member_id"])
        await loyalty_service.redeem_points(session, member=member, points=200)
        earned = await loyalty_service.earn_points(
            session, member=member, amount_paid=Decimal("152500")
        )
        await session.commit()

        assert earned == 152
        assert member.current_points == 452
        assert member.total_spent == Decimal("152500")

        entries = (
            await session.execute(
                select(PointTransaction).where(
                    PointTransaction.member_id == member.id
                )
            )
        ).scalars().all()
        assert sorted((e.type, e.points) for e in entries) == sorted(
            [(PointTransactionType.REDEEM, 200), (PointTransactionType.EARN, 152)]
        )


async def test_redeem_more_than_balance_fails(
    app_context: dict[str, Any], db_url: str
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        member = await session.get(Member, app_context["member_id"])
        with pytest.raises(InsufficientPointsError):
            await loyalty_service.redeem_points(session, member=member, points=501)
        await session.rollback()

    async with sessionmaker() as session:
        member = await session.get(Member, app_context["member_id"])
        assert member.current_points == 500


async def test_points_for_amount_rounds_up() -> None:
    value = Decimal("1000")
    assert loyalty_service.points_for_amount(Decimal("100000"), point_value=value) == 100
    assert loyalty_service.points_for_amount(Decimal("152500"), point_value=value) == 153
    assert loyalty_service.points_for_amount(Decimal("0"), point_value=value) == 0


async def test_earn_does_not_overwrite_concurrent_redemption(
    app_context: dict[str, Any], db_url: str
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as stale_session:
        stale = await stale_session.get(Member, app_context["member_id"])
        assert stale.current_points == 500

        async with sessionmaker() as other_session:
            member = await other_session.get(Member, app_context["member_id"])
            await loyalty_service.redeem_points(other_session, member=member, points=200)
            await other_session.commit()

        earned = await loyalty_service.earn_points(
            stale_session, member=stale, amount_paid=Decimal("50000")
        )
        await stale_session.commit()

    assert earned == 50
    assert stale.current_points == 350

    async with sessionmaker() as session:
        member = await session.get(Member, app_context["member_id"])
        assert member.current_points == 350
        assert member.total_spent == Decimal("50000")
