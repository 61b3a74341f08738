"""Checkout quote schema definitions."""

from __future__ import annotations

import uuid
from decimal import Decimal

from pydantic import BaseModel, Field


class SelectionItem(BaseModel):
    """A combo or snack chosen at checkout with its quantity."""

    id: uuid.UUID
    quantity: int = 1


class CheckoutQuoteRequest(BaseModel):
    """Input payload for pricing a checkout selection."""

    showtime_id: uuid.UUID
    seat_ids: list[uuid.UUID] = Field(default_factory=list)
    combos: list[SelectionItem] = Field(default_factory=list)
    snacks: list[SelectionItem] = Field(default_factory=list)
    member_id: uuid.UUID | None = None
    points_to_use: int = 0
    voucher_code: str | None = None
    promotion_id: uuid.UUID | None = None


class PricingLineRead(BaseModel):
    """Individual line within a pricing breakdown."""

    description: str
    amount: Decimal


class AppliedDiscountRead(BaseModel):
    kind: str
    description: str
    amount: Decimal


class RejectedDiscountRead(BaseModel):
    kind: str
    description: str
    reason: str
    message: str


class PricingNoticeRead(BaseModel):
    code: str
    message: str
    reference_id: str | None = None


class CheckoutQuoteRead(BaseModel):
    """Priced breakdown for a checkout selection."""

    showtime_id: uuid.UUID
    seats: list[str]
    ticket_cost: Decimal
    combo_cost: Decimal
    snack_cost: Decimal
    subtotal: Decimal
    points_discount: Decimal
    voucher_discount: Decimal
    promotion_discount: Decimal
    total_discount: Decimal
    final_total: Decimal
    max_redeemable_points: int
    currency: str
    lines: list[PricingLineRead]
    applied_discounts: list[AppliedDiscountRead]
    rejected_discounts: list[RejectedDiscountRead]
    notices: list[PricingNoticeRead]
