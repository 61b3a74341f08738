"""Checkout pricing engine.

``compute`` composes a :class:`PriceableSelection` and the chosen discount
sources into a :class:`PricingBreakdown`. Every eligible discount is computed
against the same original subtotal and the amounts are summed, not chained.
Each amount is bounded by the subtotal, but their sum is not; the final total
is floored at zero instead.

The computation is pure: inputs are never mutated, nothing is fetched, and
ineligible sources or stale catalog lines are reported rather than raised.
"""

from __future__ import annotations

import datetime
import enum
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from app.pricing.clock import as_utc
from app.pricing.discounts import (
    REASON_MESSAGES,
    DiscountKind,
    DiscountSource,
    IneligibleReason,
)
from app.pricing.money import ZERO, money_str
from app.pricing.selection import LineItemKind, PriceableSelection

logger = logging.getLogger(__name__)

_KIND_ORDER = {kind: index for index, kind in enumerate(DiscountKind)}


class NoticeCode(str, enum.Enum):
    """Non-fatal conditions surfaced alongside a breakdown."""

    STALE_CATALOG_DATA = "stale_catalog_data"
    UNKNOWN_CATALOG_ITEM = "unknown_catalog_item"
    UNKNOWN_VOUCHER = "unknown_voucher"
    UNKNOWN_PROMOTION = "unknown_promotion"
    UNKNOWN_MEMBER = "unknown_member"


@dataclass(frozen=True, slots=True)
class PricingNotice:
    code: NoticeCode
    message: str
    reference_id: str | None = None


@dataclass(frozen=True, slots=True)
class PricingLine:
    """Individual component of the displayed breakdown."""

    description: str
    amount: Decimal


@dataclass(frozen=True, slots=True)
class AppliedDiscount:
    source: DiscountSource
    amount: Decimal

    @property
    def kind(self) -> DiscountKind:
        return self.source.kind


@dataclass(frozen=True, slots=True)
class RejectedDiscount:
    source: DiscountSource
    reason: IneligibleReason

    @property
    def kind(self) -> DiscountKind:
        return self.source.kind

    @property
    def message(self) -> str:
        return REASON_MESSAGES[self.reason]


@dataclass(frozen=True, slots=True)
class PricingBreakdown:
    """Derived pricing for one selection; recomputed on every input change."""

    ticket_cost: Decimal
    combo_cost: Decimal
    snack_cost: Decimal
    subtotal: Decimal
    applied: tuple[AppliedDiscount, ...]
    rejected: tuple[RejectedDiscount, ...]
    notices: tuple[PricingNotice, ...]
    total_discount: Decimal
    final_total: Decimal

    def discount_for(self, kind: DiscountKind) -> Decimal:
        return sum(
            (discount.amount for discount in self.applied if discount.kind is kind),
            ZERO,
        )

    def applied_source(self, kind: DiscountKind) -> DiscountSource | None:
        for discount in self.applied:
            if discount.kind is kind:
                return discount.source
        return None

    @property
    def points_discount(self) -> Decimal:
        return self.discount_for(DiscountKind.LOYALTY_POINTS)

    @property
    def voucher_discount(self) -> Decimal:
        return self.discount_for(DiscountKind.VOUCHER)

    @property
    def promotion_discount(self) -> Decimal:
        return self.discount_for(DiscountKind.PROMOTION)

    @property
    def lines(self) -> list[PricingLine]:
        """Display lines: tickets, combos, snacks, then each applied discount."""
        lines = [
            PricingLine("Tickets", self.ticket_cost),
            PricingLine("Combos", self.combo_cost),
            PricingLine("Snacks", self.snack_cost),
        ]
        lines.extend(
            PricingLine(discount.source.description, -discount.amount)
            for discount in self.applied
        )
        return lines

    def to_dict(self) -> dict[str, Any]:
        """Serialize the breakdown to plain types for responses."""
        return {
            "ticket_cost": money_str(self.ticket_cost),
            "combo_cost": money_str(self.combo_cost),
            "snack_cost": money_str(self.snack_cost),
            "subtotal": money_str(self.subtotal),
            "points_discount": money_str(self.points_discount),
            "voucher_discount": money_str(self.voucher_discount),
            "promotion_discount": money_str(self.promotion_discount),
            "total_discount": money_str(self.total_discount),
            "final_total": money_str(self.final_total),
            "lines": [
                {"description": line.description, "amount": money_str(line.amount)}
                for line in self.lines
            ],
            "applied_discounts": [
                {
                    "kind": discount.kind.value,
                    "description": discount.source.description,
                    "amount": money_str(discount.amount),
                }
                for discount in self.applied
            ],
            "rejected_discounts": [
                {
                    "kind": rejected.kind.value,
                    "description": rejected.source.description,
                    "reason": rejected.reason.value,
                    "message": rejected.message,
                }
                for rejected in self.rejected
            ],
            "notices": [
                {
                    "code": notice.code.value,
                    "message": notice.message,
                    "reference_id": notice.reference_id,
                }
                for notice in self.notices
            ],
        }


def compute(
    selection: PriceableSelection,
    discounts: Iterable[DiscountSource] = (),
    now: datetime.datetime | None = None,
    *,
    notices: Iterable[PricingNotice] = (),
) -> PricingBreakdown:
    """Price a selection with the chosen discount sources.

    At most one source of each kind is honoured; later duplicates are
    rejected. Sources are evaluated in display order (points, voucher,
    promotion) regardless of the order they were passed in.
    A naive ``now`` is read as UTC.
    """

    now = datetime.datetime.now(datetime.UTC) if now is None else as_utc(now)

    subtotal = selection.compute_subtotal()

    collected = list(notices)
    for item in selection.stale_items():
        logger.debug(
            "Zeroing stale %s line %s (quantity %s)",
            item.kind.value,
            item.reference_id,
            item.quantity,
        )
        collected.append(
            PricingNotice(
                code=NoticeCode.STALE_CATALOG_DATA,
                message=f"{item.description or item.kind.value} is no longer available",
                reference_id=item.reference_id,
            )
        )

    applied: list[AppliedDiscount] = []
    rejected: list[RejectedDiscount] = []
    seen: set[DiscountKind] = set()
    for source in sorted(discounts, key=lambda candidate: _KIND_ORDER[candidate.kind]):
        if source.kind in seen:
            rejected.append(RejectedDiscount(source, IneligibleReason.DUPLICATE_SOURCE))
            continue
        seen.add(source.kind)

        reason = source.ineligibility_reason(subtotal, now)
        if reason is not None:
            logger.debug(
                "Dropping %s discount %s: %s",
                source.kind.value,
                source.description,
                reason.value,
            )
            rejected.append(RejectedDiscount(source, reason))
            continue
        applied.append(AppliedDiscount(source, source.compute_amount(subtotal)))

    total_discount = sum((discount.amount for discount in applied), ZERO)
    final_total = max(ZERO, subtotal - total_discount)

    return PricingBreakdown(
        ticket_cost=selection.cost_of(LineItemKind.SEAT) + selection.room_fee_total,
        combo_cost=selection.cost_of(LineItemKind.COMBO),
        snack_cost=selection.cost_of(LineItemKind.SNACK),
        subtotal=subtotal,
        applied=tuple(applied),
        rejected=tuple(rejected),
        notices=tuple(collected),
        total_discount=total_discount,
        final_total=final_total,
    )
