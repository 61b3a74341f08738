"""Concession catalog models: snacks, combos and combo composition."""

from __future__ import annotations

import enum
import uuid
from decimal import Decimal

from sqlalchemy import Enum, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.models.mixins import TimestampMixin, UUIDPrimaryKeyMixin


class CatalogStatus(str, enum.Enum):
    """Whether a catalog entry can currently be sold."""

    AVAILABLE = "AVAILABLE"
    UNAVAILABLE = "UNAVAILABLE"


class SnackCategory(str, enum.Enum):
    DRINK = "DRINK"
    FOOD = "FOOD"


class SnackSize(str, enum.Enum):
    SMALL = "SMALL"
    MEDIUM = "MEDIUM"
    LARGE = "LARGE"


class Snack(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Individually sold snack or drink."""

    __tablename__ = "snacks"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[SnackCategory] = mapped_column(
        Enum(SnackCategory), nullable=False
    )
    size: Mapped[SnackSize] = mapped_column(
        Enum(SnackSize), default=SnackSize.MEDIUM, nullable=False
    )
    flavor: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    status: Mapped[CatalogStatus] = mapped_column(
        Enum(CatalogStatus), default=CatalogStatus.AVAILABLE, nullable=False
    )

    @property
    def is_available(self) -> bool:
        return self.status is CatalogStatus.AVAILABLE


class Combo(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Bundle of snacks priced from its components."""

    __tablename__ = "combos"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[CatalogStatus] = mapped_column(
        Enum(CatalogStatus), default=CatalogStatus.AVAILABLE, nullable=False
    )

    snack_links: Mapped[list["ComboSnack"]] = relationship(
        "ComboSnack",
        back_populates="combo",
        cascade="all, delete-orphan",
    )

    @property
    def is_available(self) -> bool:
        return self.status is CatalogStatus.AVAILABLE

    @property
    def price(self) -> Decimal:
        """Sum of component snack prices times their quantity in the combo.

        Requires ``snack_links`` and each link's ``snack`` to be loaded.
        """
        return sum(
            (link.snack.price * link.quantity for link in self.snack_links),
            Decimal("0"),
        )


class ComboSnack(UUIDPrimaryKeyMixin, Base):
    """Quantity of one snack inside a combo."""

    __tablename__ = "combo_snacks"
    __table_args__ = (UniqueConstraint("combo_id", "snack_id"),)

    combo_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("combos.id", ondelete="CASCADE"), nullable=False
    )
    snack_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("snacks.id", ondelete="CASCADE"), nullable=False
    )
    quantity: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    combo: Mapped[Combo] = relationship("Combo", back_populates="snack_links")
    snack: Mapped[Snack] = relationship("Snack")
