"""Discount sources: loyalty redemption, vouchers and promotions.

Each variant decides its own eligibility against a subtotal and a point in
time, and computes its standalone amount against that subtotal. Amounts are
always within ``[0, subtotal]``.
"""

from __future__ import annotations

import datetime
import enum
from dataclasses import dataclass
from decimal import Decimal
from typing import ClassVar, Union

from app.pricing.clock import as_utc
from app.pricing.money import ZERO, clamp_to, floor_money, to_money


class DiscountKind(str, enum.Enum):
    """Discount source variants, declared in display order."""

    LOYALTY_POINTS = "loyalty_points"
    VOUCHER = "voucher"
    PROMOTION = "promotion"


class DiscountType(str, enum.Enum):
    """How a voucher or promotion value is interpreted."""

    PERCENTAGE = "percentage"
    FIXED = "fixed"


class IneligibleReason(str, enum.Enum):
    """Why a chosen discount source was dropped from a breakdown."""

    INACTIVE = "inactive"
    NOT_STARTED = "not_started"
    EXPIRED = "expired"
    USAGE_LIMIT_REACHED = "usage_limit_reached"
    BELOW_MINIMUM = "below_minimum"
    INSUFFICIENT_POINTS = "insufficient_points"
    DUPLICATE_SOURCE = "duplicate_source"


REASON_MESSAGES: dict[IneligibleReason, str] = {
    IneligibleReason.INACTIVE: "Discount has been deactivated",
    IneligibleReason.NOT_STARTED: "Discount is not yet valid",
    IneligibleReason.EXPIRED: "Discount has expired",
    IneligibleReason.USAGE_LIMIT_REACHED: "Discount usage limit reached",
    IneligibleReason.BELOW_MINIMUM: "Order is below the minimum amount",
    IneligibleReason.INSUFFICIENT_POINTS: "Not enough loyalty points",
    IneligibleReason.DUPLICATE_SOURCE: "Only one discount of this kind is allowed",
}


def _window_reason(
    now: datetime.datetime,
    starts_at: datetime.datetime,
    ends_at: datetime.datetime,
) -> IneligibleReason | None:
    now = as_utc(now)
    if now < as_utc(starts_at):
        return IneligibleReason.NOT_STARTED
    if now > as_utc(ends_at):
        return IneligibleReason.EXPIRED
    return None


def rate_amount(
    discount_type: DiscountType,
    value: Decimal,
    subtotal: Decimal,
    cap: Decimal | None = None,
) -> Decimal:
    """Amount for a percentage or fixed discount, bounded to the subtotal."""

    if discount_type is DiscountType.PERCENTAGE:
        amount = floor_money(subtotal * Decimal(value) / Decimal("100"))
        if cap is not None:
            amount = min(amount, Decimal(cap))
    else:
        amount = to_money(value)
    return clamp_to(amount, subtotal)


class _Eligibility:
    __slots__ = ()

    def ineligibility_reason(
        self, subtotal: Decimal, now: datetime.datetime
    ) -> IneligibleReason | None:  # pragma: no cover - overridden
        raise NotImplementedError

    def is_eligible(self, subtotal: Decimal, now: datetime.datetime) -> bool:
        return self.ineligibility_reason(subtotal, now) is None


@dataclass(frozen=True, slots=True)
class LoyaltyRedemption(_Eligibility):
    """Redeem loyalty points at a fixed money value per point.

    ``available_points`` is the balance reported by the member service. When it
    is unknown the redemption is structurally eligible.
    """

    kind: ClassVar[DiscountKind] = DiscountKind.LOYALTY_POINTS

    points_requested: int
    point_value: Decimal
    available_points: int | None = None
    reference_id: str | None = None

    def __post_init__(self) -> None:
        if self.points_requested < 0:
            raise ValueError("Points requested cannot be negative")
        if self.point_value < ZERO:
            raise ValueError("Point value cannot be negative")

    @property
    def description(self) -> str:
        return f"{self.points_requested} loyalty points"

    def ineligibility_reason(
        self, subtotal: Decimal, now: datetime.datetime
    ) -> IneligibleReason | None:
        if (
            self.available_points is not None
            and self.points_requested > self.available_points
        ):
            return IneligibleReason.INSUFFICIENT_POINTS
        return None

    def compute_amount(self, subtotal: Decimal) -> Decimal:
        return clamp_to(to_money(self.point_value * self.points_requested), subtotal)


@dataclass(frozen=True, slots=True)
class VoucherDiscount(_Eligibility):
    """A voucher code with a validity window, usage budget and minimum order."""

    kind: ClassVar[DiscountKind] = DiscountKind.VOUCHER

    code: str
    discount_type: DiscountType
    discount_value: Decimal
    valid_from: datetime.datetime
    valid_to: datetime.datetime
    usage_limit: int
    used_count: int = 0
    min_order_amount: Decimal = ZERO
    max_discount_amount: Decimal | None = None
    is_active: bool = True
    reference_id: str | None = None

    @property
    def description(self) -> str:
        return f"Voucher {self.code}"

    def ineligibility_reason(
        self, subtotal: Decimal, now: datetime.datetime
    ) -> IneligibleReason | None:
        if not self.is_active:
            return IneligibleReason.INACTIVE
        window = _window_reason(now, self.valid_from, self.valid_to)
        if window is not None:
            return window
        if self.used_count >= self.usage_limit:
            return IneligibleReason.USAGE_LIMIT_REACHED
        if subtotal < self.min_order_amount:
            return IneligibleReason.BELOW_MINIMUM
        return None

    def compute_amount(self, subtotal: Decimal) -> Decimal:
        return rate_amount(
            self.discount_type,
            self.discount_value,
            subtotal,
            cap=self.max_discount_amount,
        )


@dataclass(frozen=True, slots=True)
class PromotionDiscount(_Eligibility):
    """A time-boxed promotion with a minimum purchase."""

    kind: ClassVar[DiscountKind] = DiscountKind.PROMOTION

    title: str
    discount_type: DiscountType
    discount_value: Decimal
    start_time: datetime.datetime
    end_time: datetime.datetime
    min_purchase: Decimal = ZERO
    is_active: bool = True
    reference_id: str | None = None

    @property
    def description(self) -> str:
        return f"Promotion {self.title}"

    def ineligibility_reason(
        self, subtotal: Decimal, now: datetime.datetime
    ) -> IneligibleReason | None:
        if not self.is_active:
            return IneligibleReason.INACTIVE
        window = _window_reason(now, self.start_time, self.end_time)
        if window is not None:
            return window
        if subtotal < self.min_purchase:
            return IneligibleReason.BELOW_MINIMUM
        return None

    def compute_amount(self, subtotal: Decimal) -> Decimal:
        return rate_amount(self.discount_type, self.discount_value, subtotal)


DiscountSource = Union[LoyaltyRedemption, VoucherDiscount, PromotionDiscount]
