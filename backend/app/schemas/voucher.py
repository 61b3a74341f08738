"""Voucher and promotion schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from app.models import PromotionStatus
from app.pricing import DiscountType


class VoucherValidateRequest(BaseModel):
    """Preview a voucher code against an order amount."""

    code: str = Field(min_length=1)
    order_amount: Decimal = Field(ge=0)


class VoucherValidationRead(BaseModel):
    code: str
    is_valid: bool
    message: str
    reason: str | None = None
    discount: Decimal
    voucher_id: uuid.UUID | None = None


class PromotionRead(BaseModel):
    """Serialized promotion."""

    id: uuid.UUID
    title: str
    description: str | None = None
    image: str | None = None
    discount_type: DiscountType
    discount_value: Decimal
    min_purchase: Decimal
    start_time: datetime
    end_time: datetime
    status: PromotionStatus

    model_config = ConfigDict(from_attributes=True)
