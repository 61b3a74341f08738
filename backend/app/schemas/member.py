"""Loyalty member schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from app.models import MembershipLevel, PointTransactionType


class MemberRead(BaseModel):
    """Serialized loyalty member."""

    id: uuid.UUID
    name: str
    phone: str | None = None
    email: str | None = None
    membership_level: MembershipLevel
    current_points: int
    total_spent: Decimal

    model_config = ConfigDict(from_attributes=True)


class PointTransactionRead(BaseModel):
    id: uuid.UUID
    type: PointTransactionType
    points: int
    description: str
    booking_id: uuid.UUID | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
