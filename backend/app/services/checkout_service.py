"""Checkout quotes: load fresh collaborator data and run the pricing engine."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.config import get_settings
from app.models import Combo, Member, Promotion, Seat, Showtime, Snack, Voucher
from app.pricing import (
    DiscountSource,
    LineItemKind,
    NoticeCode,
    PriceableSelection,
    PricingBreakdown,
    PricingNotice,
    compute,
)
from app.schemas.pricing import CheckoutQuoteRequest, SelectionItem
from app.services import (
    catalog_service,
    loyalty_service,
    promotion_service,
    voucher_service,
)
from app.services.errors import NotFoundError

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CheckoutQuote:
    """Pricing breakdown plus the rows it was computed from."""

    showtime: Showtime
    seats: list[Seat]
    combos: dict[UUID, Combo]
    snacks: dict[UUID, Snack]
    member: Member | None
    voucher: Voucher | None
    promotion: Promotion | None
    breakdown: PricingBreakdown
    max_redeemable_points: int

    def to_dict(self) -> dict[str, Any]:
        payload = self.breakdown.to_dict()
        payload.update(
            showtime_id=str(self.showtime.id),
            seats=[seat.label for seat in self.seats],
            max_redeemable_points=self.max_redeemable_points,
            currency=get_settings().currency,
        )
        return payload


async def _load_showtime(session: AsyncSession, showtime_id: UUID) -> Showtime:
    stmt = (
        select(Showtime)
        .options(selectinload(Showtime.room))
        .where(Showtime.id == showtime_id)
    )
    showtime = await session.scalar(stmt)
    if showtime is None:
        raise NotFoundError("Showtime not found")
    return showtime


async def _load_seats(
    session: AsyncSession, showtime: Showtime, seat_ids: list[UUID]
) -> list[Seat]:
    ordered = list(dict.fromkeys(seat_ids))
    if not ordered:
        return []
    stmt = (
        select(Seat)
        .options(selectinload(Seat.seat_type))
        .where(Seat.id.in_(ordered))
    )
    result = await session.execute(stmt)
    found = {seat.id: seat for seat in result.scalars().all()}
    seats: list[Seat] = []
    for seat_id in ordered:
        seat = found.get(seat_id)
        if seat is None or seat.room_id != showtime.room_id:
            raise ValueError(f"Seat {seat_id} does not belong to this showtime")
        seats.append(seat)
    return seats


def _add_concessions(
    selection: PriceableSelection,
    kind: LineItemKind,
    lines: list[SelectionItem],
    catalog: dict[UUID, Combo] | dict[UUID, Snack],
    notices: list[PricingNotice],
) -> None:
    for line in lines:
        entry = catalog.get(line.id)
        if entry is None:
            notices.append(
                PricingNotice(
                    code=NoticeCode.UNKNOWN_CATALOG_ITEM,
                    message=f"Unknown {kind.value} in selection",
                    reference_id=str(line.id),
                )
            )
            continue
        selection.add_line_item(
            kind,
            entry.price,
            line.quantity,
            reference_id=str(entry.id),
            description=entry.name,
        )
        # Fresh status wins over whatever the client saw when selecting.
        if not entry.is_available:
            selection.mark_unavailable(kind, str(entry.id))


async def build_quote(
    session: AsyncSession,
    payload: CheckoutQuoteRequest,
    *,
    now: datetime | None = None,
) -> CheckoutQuote:
    """Price a checkout request against the current catalog and discounts.

    Unknown vouchers, promotions and members are reported as notices rather
    than errors so the customer can still see a total.
    """

    moment = now or datetime.now(UTC)
    showtime = await _load_showtime(session, payload.showtime_id)
    seats = await _load_seats(session, showtime, payload.seat_ids)

    notices: list[PricingNotice] = []
    selection = PriceableSelection(room_fee=showtime.room.fee)
    for seat in seats:
        selection.add_line_item(
            LineItemKind.SEAT,
            seat.seat_type.price,
            reference_id=str(seat.id),
            description=f"Seat {seat.label}",
        )

    combos = await catalog_service.load_combos(
        session, [line.id for line in payload.combos]
    )
    snacks = await catalog_service.load_snacks(
        session, [line.id for line in payload.snacks]
    )
    _add_concessions(selection, LineItemKind.COMBO, payload.combos, combos, notices)
    _add_concessions(selection, LineItemKind.SNACK, payload.snacks, snacks, notices)

    discounts: list[DiscountSource] = []

    member: Member | None = None
    if payload.member_id is not None:
        member = await loyalty_service.get_member(session, payload.member_id)
        if member is None:
            notices.append(
                PricingNotice(
                    code=NoticeCode.UNKNOWN_MEMBER,
                    message="Member not found",
                    reference_id=str(payload.member_id),
                )
            )
    if payload.points_to_use:
        if member is None:
            if payload.member_id is None:
                notices.append(
                    PricingNotice(
                        code=NoticeCode.UNKNOWN_MEMBER,
                        message="Loyalty points require a member",
                    )
                )
        else:
            discounts.append(
                loyalty_service.to_redemption(member, points=payload.points_to_use)
            )

    voucher: Voucher | None = None
    if payload.voucher_code:
        voucher = await voucher_service.get_by_code(session, payload.voucher_code)
        if voucher is None:
            notices.append(
                PricingNotice(
                    code=NoticeCode.UNKNOWN_VOUCHER,
                    message="Voucher code does not exist",
                    reference_id=voucher_service.normalize_code(payload.voucher_code),
                )
            )
        else:
            discounts.append(voucher_service.to_discount(voucher))

    promotion: Promotion | None = None
    if payload.promotion_id is not None:
        promotion = await promotion_service.get_promotion(session, payload.promotion_id)
        if promotion is None:
            notices.append(
                PricingNotice(
                    code=NoticeCode.UNKNOWN_PROMOTION,
                    message="Promotion not found",
                    reference_id=str(payload.promotion_id),
                )
            )
        else:
            discounts.append(promotion_service.to_discount(promotion))

    breakdown = compute(selection, discounts, moment, notices=notices)

    max_points = 0
    if member is not None:
        max_points = loyalty_service.max_redeemable_points(
            balance=member.current_points, order_amount=breakdown.subtotal
        )

    logger.debug(
        "Quoted showtime %s: subtotal %s final %s",
        showtime.id,
        breakdown.subtotal,
        breakdown.final_total,
    )
    return CheckoutQuote(
        showtime=showtime,
        seats=seats,
        combos=combos,
        snacks=snacks,
        member=member,
        voucher=voucher,
        promotion=promotion,
        breakdown=breakdown,
        max_redeemable_points=max_points,
    )
