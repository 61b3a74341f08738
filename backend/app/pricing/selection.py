"""Priceable selection: seats, combos and snacks plus the per-seat room fee."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field, replace
from decimal import Decimal

from app.pricing.money import ZERO

logger = logging.getLogger(__name__)


class InvalidQuantityError(ValueError):
    """Raised when a line item is given a negative quantity or price."""


class LineItemKind(str, enum.Enum):
    """What a line in the selection represents."""

    SEAT = "seat"
    COMBO = "combo"
    SNACK = "snack"


@dataclass(frozen=True, slots=True)
class LineItem:
    """A single seat, combo or snack row with its quantity.

    ``available`` mirrors the catalog status at computation time. An
    unavailable line keeps its quantity for display but costs nothing.
    """

    kind: LineItemKind
    unit_price: Decimal
    quantity: int = 1
    reference_id: str | None = None
    description: str = ""
    available: bool = True

    def __post_init__(self) -> None:
        if self.quantity < 0:
            raise InvalidQuantityError(
                f"Quantity cannot be negative for {self.kind.value} line"
            )
        if self.unit_price < ZERO:
            raise InvalidQuantityError("Unit price cannot be negative")

    @property
    def cost(self) -> Decimal:
        if not self.available:
            return ZERO
        return self.unit_price * self.quantity

    @property
    def is_stale(self) -> bool:
        """True when the catalog entry went unavailable with a quantity still held."""
        return not self.available and self.quantity > 0


@dataclass(slots=True)
class PriceableSelection:
    """Ordered line items plus a room fee charged once per selected seat."""

    room_fee: Decimal = ZERO
    items: list[LineItem] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.room_fee < ZERO:
            raise InvalidQuantityError("Room fee cannot be negative")

    def add_line_item(
        self,
        kind: LineItemKind,
        unit_price: Decimal | int | str,
        quantity: int = 1,
        *,
        reference_id: str | None = None,
        description: str = "",
        available: bool = True,
    ) -> LineItem | None:
        """Append a line and return it.

        Unavailable catalog entries are not added; ``None`` is returned and the
        selection is left untouched.
        """

        item = LineItem(
            kind=kind,
            unit_price=Decimal(unit_price),
            quantity=quantity,
            reference_id=reference_id,
            description=description,
            available=available,
        )
        if not available:
            logger.debug("Ignoring unavailable %s %s", kind.value, reference_id)
            return None
        self.items.append(item)
        return item

    def set_quantity(
        self, kind: LineItemKind, reference_id: str, quantity: int
    ) -> LineItem | None:
        """Change the quantity of an existing line.

        Increasing an unavailable line is silently refused and the prior
        quantity is kept. Lowering it is allowed so stale rows can be cleared.
        """

        if quantity < 0:
            raise InvalidQuantityError(
                f"Quantity cannot be negative for {kind.value} line"
            )
        for index, item in enumerate(self.items):
            if item.kind is not kind or item.reference_id != reference_id:
                continue
            if not item.available and quantity > item.quantity:
                return item
            updated = replace(item, quantity=quantity)
            self.items[index] = updated
            return updated
        return None

    def mark_unavailable(self, kind: LineItemKind, reference_id: str) -> None:
        """Flag a line whose catalog entry became unavailable after selection."""
        self.items = [
            replace(item, available=False)
            if item.kind is kind and item.reference_id == reference_id
            else item
            for item in self.items
        ]

    @property
    def seat_count(self) -> int:
        return sum(
            item.quantity
            for item in self.items
            if item.kind is LineItemKind.SEAT and item.available
        )

    @property
    def room_fee_total(self) -> Decimal:
        return self.room_fee * self.seat_count

    def cost_of(self, kind: LineItemKind) -> Decimal:
        return sum((item.cost for item in self.items if item.kind is kind), ZERO)

    def compute_subtotal(self) -> Decimal:
        """Sum of ``unit_price * quantity`` over available lines plus room fees."""
        return sum((item.cost for item in self.items), ZERO) + self.room_fee_total

    def stale_items(self) -> list[LineItem]:
        return [item for item in self.items if item.is_stale]
