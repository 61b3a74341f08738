"""Booking schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, EmailStr

from app.models import BookingStatus, PaymentMethod, PaymentStatus
from app.pricing import DiscountKind
from app.schemas.pricing import CheckoutQuoteRequest


class BookingCreate(CheckoutQuoteRequest):
    """Checkout submission.

    ``expected_total`` is the final total the customer was shown; the booking
    is refused when a fresh quote disagrees.
    """

    customer_name: str | None = None
    customer_phone: str | None = None
    customer_email: EmailStr | None = None
    payment_method: PaymentMethod = PaymentMethod.CASH
    expected_total: Decimal | None = None


class BookingSeatRead(BaseModel):
    seat_id: uuid.UUID
    unit_price: Decimal

    model_config = ConfigDict(from_attributes=True)


class BookingComboRead(BaseModel):
    combo_id: uuid.UUID
    quantity: int
    unit_price: Decimal

    model_config = ConfigDict(from_attributes=True)


class BookingSnackRead(BaseModel):
    snack_id: uuid.UUID
    quantity: int
    unit_price: Decimal

    model_config = ConfigDict(from_attributes=True)


class BookingDiscountRead(BaseModel):
    position: int
    kind: DiscountKind
    description: str
    amount: Decimal

    model_config = ConfigDict(from_attributes=True)


class BookingRead(BaseModel):
    """Serialized booking with its priced lines."""

    id: uuid.UUID
    showtime_id: uuid.UUID
    member_id: uuid.UUID | None = None
    voucher_id: uuid.UUID | None = None
    promotion_id: uuid.UUID | None = None
    customer_name: str | None = None
    customer_phone: str | None = None
    customer_email: str | None = None
    status: BookingStatus
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    subtotal: Decimal
    discount_total: Decimal
    total_price: Decimal
    loyalty_points_used: int
    loyalty_points_earned: int
    seats: list[BookingSeatRead]
    combos: list[BookingComboRead]
    snacks: list[BookingSnackRead]
    discounts: list[BookingDiscountRead]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
