"""Tests for the checkout pricing engine."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest

from app.pricing import (
    DiscountKind,
    DiscountType,
    IneligibleReason,
    InvalidQuantityError,
    LineItemKind,
    LoyaltyRedemption,
    NoticeCode,
    PriceableSelection,
    PromotionDiscount,
    VoucherDiscount,
    compute,
)

NOW = datetime(2025, 6, 15, 12, 0, tzinfo=UTC)


def _selection(subtotal: str) -> PriceableSelection:
    selection = PriceableSelection()
    selection.add_line_item(LineItemKind.SEAT, Decimal(subtotal), reference_id="s1")
    return selection


def _voucher(**overrides) -> VoucherDiscount:
    fields = dict(
        code="WELCOME10",
        discount_type=DiscountType.PERCENTAGE,
        discount_value=Decimal("10"),
        valid_from=NOW - timedelta(days=1),
        valid_to=NOW + timedelta(days=1),
        usage_limit=1000,
        used_count=150,
        min_order_amount=Decimal("100000"),
        max_discount_amount=Decimal("50000"),
    )
    fields.update(overrides)
    return VoucherDiscount(**fields)


def _promotion(**overrides) -> PromotionDiscount:
    fields = dict(
        title="Summer Sale",
        discount_type=DiscountType.PERCENTAGE,
        discount_value=Decimal("20"),
        start_time=NOW - timedelta(days=1),
        end_time=NOW + timedelta(days=1),
        min_purchase=Decimal("150000"),
    )
    fields.update(overrides)
    return PromotionDiscount(**fields)


def test_subtotal_includes_room_fee_per_seat() -> None:
    selection = PriceableSelection(room_fee=Decimal("10000"))
    selection.add_line_item(LineItemKind.SEAT, Decimal("90000"), 2, reference_id="a")
    selection.add_line_item(LineItemKind.COMBO, Decimal("160000"), 1, reference_id="c")
    selection.add_line_item(LineItemKind.SNACK, Decimal("30000"), 0, reference_id="s")

    assert selection.seat_count == 2
    assert selection.compute_subtotal() == Decimal("360000")

    breakdown = compute(selection, now=NOW)
    assert breakdown.ticket_cost == Decimal("200000")
    assert breakdown.combo_cost == Decimal("160000")
    assert breakdown.snack_cost == Decimal("0")
    assert breakdown.final_total == Decimal("360000")


def test_negative_quantity_is_rejected() -> None:
    selection = PriceableSelection()
    with pytest.raises(InvalidQuantityError):
        selection.add_line_item(LineItemKind.SNACK, Decimal("30000"), -1)
    assert selection.items == []

    selection.add_line_item(LineItemKind.SNACK, Decimal("30000"), 1, reference_id="s")
    with pytest.raises(InvalidQuantityError):
        selection.set_quantity(LineItemKind.SNACK, "s", -2)
    assert selection.items[0].quantity == 1


def test_unavailable_items_are_not_added_and_cannot_grow() -> None:
    selection = PriceableSelection()
    assert (
        selection.add_line_item(
            LineItemKind.COMBO, Decimal("265000"), 1, reference_id="f", available=False
        )
        is None
    )
    assert selection.items == []

    selection.add_line_item(LineItemKind.COMBO, Decimal("160000"), 1, reference_id="c")
    selection.mark_unavailable(LineItemKind.COMBO, "c")
    item = selection.set_quantity(LineItemKind.COMBO, "c", 3)
    assert item is not None and item.quantity == 1

    cleared = selection.set_quantity(LineItemKind.COMBO, "c", 0)
    assert cleared is not None and cleared.quantity == 0


def test_voucher_percentage_under_cap() -> None:
    breakdown = compute(_selection("500000"), [_voucher()], NOW)

    assert breakdown.voucher_discount == Decimal("50000")
    assert breakdown.final_total == Decimal("450000")


def test_voucher_below_minimum_is_rejected() -> None:
    voucher = _voucher(
        code="MOVIE50K",
        discount_type=DiscountType.FIXED,
        discount_value=Decimal("50000"),
        min_order_amount=Decimal("200000"),
        max_discount_amount=None,
    )
    breakdown = compute(_selection("80000"), [voucher], NOW)

    assert breakdown.applied == ()
    assert [r.reason for r in breakdown.rejected] == [IneligibleReason.BELOW_MINIMUM]
    assert breakdown.total_discount == Decimal("0")
    assert breakdown.final_total == Decimal("80000")


def test_points_and_promotion_sum_against_original_subtotal() -> None:
    points = LoyaltyRedemption(points_requested=100, point_value=Decimal("1000"))
    breakdown = compute(_selection("300000"), [_promotion(), points], NOW)

    assert breakdown.points_discount == Decimal("100000")
    assert breakdown.promotion_discount == Decimal("60000")
    assert breakdown.total_discount == Decimal("160000")
    assert breakdown.final_total == Decimal("140000")
    assert [d.kind for d in breakdown.applied] == [
        DiscountKind.LOYALTY_POINTS,
        DiscountKind.PROMOTION,
    ]


def test_stacked_discounts_floor_final_total_at_zero() -> None:
    fixed = {"discount_type": DiscountType.FIXED, "discount_value": Decimal("40000")}
    discounts = [
        LoyaltyRedemption(points_requested=40, point_value=Decimal("1000")),
        _voucher(min_order_amount=Decimal("0"), max_discount_amount=None, **fixed),
        _promotion(min_purchase=Decimal("0"), **fixed),
    ]
    breakdown = compute(_selection("50000"), discounts, NOW)

    assert breakdown.total_discount == Decimal("120000")
    assert breakdown.final_total == Decimal("0")


def test_each_amount_is_capped_to_subtotal() -> None:
    points = LoyaltyRedemption(points_requested=500, point_value=Decimal("1000"))
    breakdown = compute(_selection("120000"), [points], NOW)

    assert breakdown.points_discount == Decimal("120000")
    assert breakdown.final_total == Decimal("0")


def test_stale_combo_contributes_nothing() -> None:
    selection = _selection("100000")
    selection.add_line_item(LineItemKind.COMBO, Decimal("160000"), 2, reference_id="c")
    selection.mark_unavailable(LineItemKind.COMBO, "c")

    breakdown = compute(selection, now=NOW)

    assert breakdown.combo_cost == Decimal("0")
    assert breakdown.subtotal == Decimal("100000")
    assert [n.code for n in breakdown.notices] == [NoticeCode.STALE_CATALOG_DATA]
    assert breakdown.notices[0].reference_id == "c"


@pytest.mark.parametrize(
    ("overrides", "reason"),
    [
        ({"is_active": False}, IneligibleReason.INACTIVE),
        ({"valid_from": NOW + timedelta(hours=1)}, IneligibleReason.NOT_STARTED),
        ({"valid_to": NOW - timedelta(seconds=1)}, IneligibleReason.EXPIRED),
        ({"used_count": 1000}, IneligibleReason.USAGE_LIMIT_REACHED),
    ],
)
def test_voucher_ineligibility_reasons(overrides, reason) -> None:
    breakdown = compute(_selection("500000"), [_voucher(**overrides)], NOW)

    assert breakdown.applied == ()
    assert breakdown.rejected[0].reason is reason
    assert breakdown.final_total == Decimal("500000")


def test_validity_window_is_inclusive() -> None:
    voucher = _voucher(valid_from=NOW, valid_to=NOW)
    assert voucher.is_eligible(Decimal("500000"), NOW)


@pytest.mark.parametrize(
    ("overrides", "reason"),
    [
        ({"start_time": NOW + timedelta(minutes=5)}, IneligibleReason.NOT_STARTED),
        ({"end_time": NOW - timedelta(seconds=1)}, IneligibleReason.EXPIRED),
    ],
)
def test_promotion_outside_window_is_rejected(overrides, reason) -> None:
    breakdown = compute(_selection("300000"), [_promotion(**overrides)], NOW)

    assert breakdown.applied == ()
    assert breakdown.rejected[0].reason is reason
    assert breakdown.final_total == Decimal("300000")


def test_naive_now_is_read_as_utc() -> None:
    naive_now = NOW.replace(tzinfo=None)
    promotion = _promotion(end_time=NOW - timedelta(hours=1))

    breakdown = compute(_selection("300000"), [_voucher(), promotion], naive_now)

    assert [a.kind for a in breakdown.applied] == [DiscountKind.VOUCHER]
    assert breakdown.rejected[0].reason is IneligibleReason.EXPIRED


def test_inactive_promotion_is_rejected() -> None:
    breakdown = compute(_selection("300000"), [_promotion(is_active=False)], NOW)
    assert breakdown.rejected[0].reason is IneligibleReason.INACTIVE


def test_duplicate_source_kind_is_rejected() -> None:
    second = _voucher(
        code="OTHER", discount_type=DiscountType.FIXED, discount_value=Decimal("1000")
    )
    breakdown = compute(_selection("500000"), [_voucher(), second], NOW)

    assert len(breakdown.applied) == 1
    assert breakdown.rejected[0].reason is IneligibleReason.DUPLICATE_SOURCE
    assert breakdown.rejected[0].source.code == "OTHER"


def test_redemption_beyond_known_balance_is_rejected() -> None:
    points = LoyaltyRedemption(
        points_requested=600, point_value=Decimal("1000"), available_points=500
    )
    breakdown = compute(_selection("800000"), [points], NOW)

    assert breakdown.rejected[0].reason is IneligibleReason.INSUFFICIENT_POINTS
    assert breakdown.points_discount == Decimal("0")


def test_compute_is_idempotent_and_does_not_mutate_inputs() -> None:
    selection = PriceableSelection(room_fee=Decimal("10000"))
    selection.add_line_item(LineItemKind.SEAT, Decimal("90000"), 2, reference_id="a")
    voucher = _voucher(used_count=999)
    discounts = [voucher, _promotion()]

    first = compute(selection, discounts, NOW)
    second = compute(selection, discounts, NOW)

    assert first == second
    assert first.to_dict() == second.to_dict()
    assert voucher.used_count == 999


def test_minimum_purchase_eligibility_is_monotonic() -> None:
    promotion = _promotion()
    eligible_at = [
        promotion.is_eligible(Decimal(subtotal), NOW)
        for subtotal in ("100000", "149999", "150000", "150001", "900000")
    ]
    assert eligible_at == [False, False, True, True, True]


def test_amounts_never_exceed_subtotal_or_go_negative() -> None:
    sources = [
        LoyaltyRedemption(points_requested=1000, point_value=Decimal("1000")),
        _voucher(discount_value=Decimal("150"), max_discount_amount=None),
        _promotion(discount_type=DiscountType.FIXED, discount_value=Decimal("999999")),
    ]
    for subtotal in ("0", "1", "99999", "1000000"):
        for source in sources:
            amount = source.compute_amount(Decimal(subtotal))
            assert Decimal("0") <= amount <= Decimal(subtotal)


def test_breakdown_lines_follow_display_order() -> None:
    points = LoyaltyRedemption(points_requested=10, point_value=Decimal("1000"))
    breakdown = compute(_selection("300000"), [_promotion(), _voucher(), points], NOW)

    assert [line.description for line in breakdown.lines] == [
        "Tickets",
        "Combos",
        "Snacks",
        "10 loyalty points",
        "Voucher WELCOME10",
        "Promotion Summer Sale",
    ]
    payload = breakdown.to_dict()
    assert payload["final_total"] == "200000"
    assert payload["lines"][3]["amount"] == "-10000"
