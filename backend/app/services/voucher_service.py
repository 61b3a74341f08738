"""Voucher lookup, validation and redemption."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Voucher
from app.pricing import IneligibleReason, VoucherDiscount, ZERO, as_utc, money_str
from app.services.errors import VoucherExhaustedError

logger = logging.getLogger(__name__)

_VALIDATION_MESSAGES = {
    IneligibleReason.INACTIVE: "Voucher is no longer active",
    IneligibleReason.NOT_STARTED: "Voucher is not yet valid",
    IneligibleReason.EXPIRED: "Voucher has expired",
    IneligibleReason.USAGE_LIMIT_REACHED: "Voucher usage limit reached",
}


def normalize_code(code: str) -> str:
    return code.strip().upper()


@dataclass(slots=True)
class VoucherValidation:
    """Outcome of checking a voucher code against an order amount."""

    code: str
    is_valid: bool
    message: str
    discount: Decimal
    reason: IneligibleReason | None = None
    voucher: Voucher | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "is_valid": self.is_valid,
            "message": self.message,
            "reason": self.reason.value if self.reason else None,
            "discount": money_str(self.discount),
            "voucher_id": str(self.voucher.id) if self.voucher else None,
        }


async def get_by_code(session: AsyncSession, code: str) -> Voucher | None:
    """Case-insensitive voucher lookup."""
    stmt = select(Voucher).where(func.upper(Voucher.code) == normalize_code(code))
    return await session.scalar(stmt)


def to_discount(voucher: Voucher) -> VoucherDiscount:
    """Snapshot a voucher row as a pricing discount source."""
    return VoucherDiscount(
        code=voucher.code,
        discount_type=voucher.discount_type,
        discount_value=Decimal(voucher.discount_value),
        valid_from=as_utc(voucher.valid_from),
        valid_to=as_utc(voucher.valid_to),
        usage_limit=voucher.usage_limit,
        used_count=voucher.used_count,
        min_order_amount=Decimal(voucher.min_order_amount),
        max_discount_amount=(
            Decimal(voucher.max_discount_amount)
            if voucher.max_discount_amount is not None
            else None
        ),
        is_active=voucher.is_active,
        reference_id=str(voucher.id),
    )


async def validate_voucher(
    session: AsyncSession,
    *,
    code: str,
    order_amount: Decimal,
    now: datetime | None = None,
) -> VoucherValidation:
    """Check a code the way checkout will, without consuming it."""

    normalized = normalize_code(code)
    voucher = await get_by_code(session, normalized)
    if voucher is None:
        return VoucherValidation(
            code=normalized,
            is_valid=False,
            message="Voucher code does not exist",
            discount=ZERO,
        )

    discount = to_discount(voucher)
    reason = discount.ineligibility_reason(
        Decimal(order_amount), now or datetime.now(UTC)
    )
    if reason is IneligibleReason.BELOW_MINIMUM:
        message = (
            f"Order must be at least {money_str(discount.min_order_amount)} "
            "to use this voucher"
        )
    elif reason is None:
        message = f"Voucher applied: {voucher.title}"
    else:
        message = _VALIDATION_MESSAGES.get(reason, "Voucher cannot be applied")

    amount = ZERO
    if reason is None:
        amount = discount.compute_amount(Decimal(order_amount))
    return VoucherValidation(
        code=voucher.code,
        is_valid=reason is None,
        message=message,
        discount=amount,
        reason=reason,
        voucher=voucher,
    )


async def consume_voucher(session: AsyncSession, *, voucher: Voucher) -> None:
    """Increment ``used_count`` if the usage budget still allows it.

    The increment is a single guarded UPDATE so concurrent checkouts cannot
    push the count past ``usage_limit``. Does not commit.
    """

    stmt = (
        update(Voucher)
        .where(
            Voucher.id == voucher.id,
            Voucher.is_active.is_(True),
            Voucher.used_count < Voucher.usage_limit,
        )
        .values(used_count=Voucher.used_count + 1)
        .execution_options(synchronize_session=False)
    )
    result = await session.execute(stmt)
    if result.rowcount != 1:
        logger.warning("Voucher %s exhausted during checkout", voucher.code)
        raise VoucherExhaustedError(voucher.code)
    await session.refresh(voucher, attribute_names=["used_count"])
