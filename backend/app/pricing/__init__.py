"""Checkout pricing: selections, discount sources and the composition engine."""

from app.pricing.clock import as_utc
from app.pricing.discounts import (
    DiscountKind,
    DiscountSource,
    DiscountType,
    IneligibleReason,
    LoyaltyRedemption,
    PromotionDiscount,
    VoucherDiscount,
)
from app.pricing.engine import (
    AppliedDiscount,
    NoticeCode,
    PricingBreakdown,
    PricingLine,
    PricingNotice,
    RejectedDiscount,
    compute,
)
from app.pricing.money import ZERO, money_str, to_money
from app.pricing.selection import (
    InvalidQuantityError,
    LineItem,
    LineItemKind,
    PriceableSelection,
)

__all__ = [
    "AppliedDiscount",
    "DiscountKind",
    "DiscountSource",
    "DiscountType",
    "IneligibleReason",
    "InvalidQuantityError",
    "LineItem",
    "LineItemKind",
    "LoyaltyRedemption",
    "NoticeCode",
    "PriceableSelection",
    "PricingBreakdown",
    "PricingLine",
    "PricingNotice",
    "PromotionDiscount",
    "RejectedDiscount",
    "VoucherDiscount",
    "ZERO",
    "as_utc",
    "compute",
    "money_str",
    "to_money",
]
