"""Concession catalog schemas."""

from __future__ import annotations

import uuid
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from app.models import CatalogStatus, SnackCategory, SnackSize


class SnackRead(BaseModel):
    """Serialized snack."""

    id: uuid.UUID
    name: str
    category: SnackCategory
    size: SnackSize
    flavor: str | None = None
    description: str | None = None
    price: Decimal
    status: CatalogStatus

    model_config = ConfigDict(from_attributes=True)


class ComboSnackRead(BaseModel):
    snack_id: uuid.UUID
    quantity: int
    snack: SnackRead

    model_config = ConfigDict(from_attributes=True)


class ComboRead(BaseModel):
    """Serialized combo with its computed price."""

    id: uuid.UUID
    name: str
    description: str | None = None
    status: CatalogStatus
    price: Decimal
    snack_links: list[ComboSnackRead]

    model_config = ConfigDict(from_attributes=True)


class CatalogStatusUpdate(BaseModel):
    """Back-office availability toggle."""

    status: CatalogStatus
