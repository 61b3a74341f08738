"""Tests for checkout quotes built from stored catalog and discounts."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

import pytest

from app.db.session import get_sessionmaker
from app.models import CatalogStatus, Combo
from app.pricing import DiscountKind, IneligibleReason, NoticeCode
from app.schemas.pricing import CheckoutQuoteRequest, SelectionItem
from app.services import checkout_service
from app.services.errors import NotFoundError

pytestmark = pytest.mark.asyncio


def _request(context: dict[str, Any], **overrides: Any) -> CheckoutQuoteRequest:
    fields: dict[str, Any] = {
        "showtime_id": context["showtime_id"],
        "seat_ids": [context["seat_ids"]["A1"], context["seat_ids"]["A2"]],
        "combos": [SelectionItem(id=context["combo_ids"]["couple"], quantity=1)],
    }
    fields.update(overrides)
    return CheckoutQuoteRequest(**fields)


async def test_quote_stacks_all_three_discounts(
    app_context: dict[str, Any], db_url: str
) -> None:
    payload = _request(
        app_context,
        member_id=app_context["member_id"],
        points_to_use=100,
        voucher_code="welcome10",
        promotion_id=app_context["promotion_ids"]["summer"],
    )
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        quote = await checkout_service.build_quote(session, payload)

    breakdown = quote.breakdown
    assert breakdown.ticket_cost == Decimal("200000")
    assert breakdown.combo_cost == Decimal("160000")
    assert breakdown.subtotal == Decimal("360000")
    assert breakdown.points_discount == Decimal("100000")
    assert breakdown.voucher_discount == Decimal("36000")
    assert breakdown.promotion_discount == Decimal("72000")
    assert breakdown.final_total == Decimal("152000")
    assert quote.max_redeemable_points == 360

    payload_dict = quote.to_dict()
    assert payload_dict["seats"] == ["A1", "A2"]
    assert payload_dict["currency"] == "VND"
    assert [d["kind"] for d in payload_dict["applied_discounts"]] == [
        DiscountKind.LOYALTY_POINTS.value,
        DiscountKind.VOUCHER.value,
        DiscountKind.PROMOTION.value,
    ]


async def test_unavailable_catalog_rows_are_zeroed(
    app_context: dict[str, Any], db_url: str
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        couple = await session.get(Combo, app_context["combo_ids"]["couple"])
        couple.status = CatalogStatus.UNAVAILABLE
        await session.commit()

    payload = _request(
        app_context,
        snacks=[SelectionItem(id=app_context["snack_ids"]["nachos"], quantity=2)],
    )
    async with sessionmaker() as session:
        quote = await checkout_service.build_quote(session, payload)

    assert quote.breakdown.combo_cost == Decimal("0")
    assert quote.breakdown.snack_cost == Decimal("0")
    assert quote.breakdown.subtotal == Decimal("200000")
    stale = {
        notice.reference_id
        for notice in quote.breakdown.notices
        if notice.code is NoticeCode.STALE_CATALOG_DATA
    }
    assert stale == {
        str(app_context["combo_ids"]["couple"]),
        str(app_context["snack_ids"]["nachos"]),
    }


async def test_unknown_references_become_notices(
    app_context: dict[str, Any], db_url: str
) -> None:
    payload = _request(app_context, voucher_code="GHOST", points_to_use=10)
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        quote = await checkout_service.build_quote(session, payload)

    codes = [notice.code for notice in quote.breakdown.notices]
    assert NoticeCode.UNKNOWN_VOUCHER in codes
    assert NoticeCode.UNKNOWN_MEMBER in codes
    assert quote.breakdown.applied == ()
    assert quote.breakdown.final_total == Decimal("360000")


async def test_inactive_promotion_is_rejected_not_raised(
    app_context: dict[str, Any], db_url: str
) -> None:
    payload = _request(app_context, promotion_id=app_context["promotion_ids"]["retired"])
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        quote = await checkout_service.build_quote(session, payload)

    assert [r.reason for r in quote.breakdown.rejected] == [IneligibleReason.INACTIVE]


async def test_seat_from_another_room_is_refused(
    app_context: dict[str, Any], db_url: str
) -> None:
    payload = _request(app_context, seat_ids=[app_context["foreign_seat_id"]])
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        with pytest.raises(ValueError):
            await checkout_service.build_quote(session, payload)


async def test_unknown_showtime(app_context: dict[str, Any], db_url: str) -> None:
    payload = _request(app_context, showtime_id=app_context["room_id"])
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        with pytest.raises(NotFoundError):
            await checkout_service.build_quote(session, payload)
