"""Booking creation with server-side re-pricing and atomic discount commits."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models import (
    Booking,
    BookingCombo,
    BookingDiscount,
    BookingSeat,
    BookingSnack,
    BookingStatus,
    PaymentStatus,
    Showtime,
)
from app.pricing import DiscountKind, NoticeCode, to_money
from app.schemas.booking import BookingCreate
from app.schemas.pricing import SelectionItem
from app.services import checkout_service, loyalty_service, voucher_service
from app.services.errors import (
    BookingError,
    DiscountRejectedError,
    MissingSeatsError,
    PriceChangedError,
    SeatUnavailableError,
)

logger = logging.getLogger(__name__)

_UNKNOWN_DISCOUNT_NOTICES = {
    NoticeCode.UNKNOWN_VOUCHER,
    NoticeCode.UNKNOWN_PROMOTION,
    NoticeCode.UNKNOWN_MEMBER,
}


def _booking_query():
    return select(Booking).options(
        selectinload(Booking.seats),
        selectinload(Booking.combos),
        selectinload(Booking.snacks),
        selectinload(Booking.discounts),
    )


def _merge_quantities(lines: Sequence[SelectionItem]) -> dict[uuid.UUID, int]:
    merged: dict[uuid.UUID, int] = {}
    for line in lines:
        merged[line.id] = merged.get(line.id, 0) + line.quantity
    return merged


async def _taken_seat_ids(
    session: AsyncSession, *, showtime_id: uuid.UUID, seat_ids: Sequence[uuid.UUID]
) -> set[uuid.UUID]:
    stmt = (
        select(BookingSeat.seat_id).where(
            BookingSeat.showtime_id == showtime_id,
            BookingSeat.seat_id.in_(seat_ids),
            BookingSeat.is_active.is_(True),
        )
    )
    result = await session.execute(stmt)
    return set(result.scalars().all())


async def create_booking(
    session: AsyncSession,
    payload: BookingCreate,
    *,
    now: datetime | None = None,
) -> Booking:
    """Re-price the selection and persist a booking.

    Voucher usage, point redemption and the booking rows are committed in one
    transaction. Any :class:`BookingError` rolls the whole attempt back.
    """

    if not payload.seat_ids:
        raise MissingSeatsError()

    quote = await checkout_service.build_quote(session, payload, now=now)
    breakdown = quote.breakdown

    # Serialises checkouts per showtime on Postgres; SQLite ignores FOR UPDATE.
    await session.execute(
        select(Showtime.id).where(Showtime.id == quote.showtime.id).with_for_update()
    )
    taken = await _taken_seat_ids(
        session, showtime_id=quote.showtime.id, seat_ids=[s.id for s in quote.seats]
    )
    if taken:
        raise SeatUnavailableError(
            [seat.label for seat in quote.seats if seat.id in taken]
        )

    for notice in breakdown.notices:
        if notice.code in _UNKNOWN_DISCOUNT_NOTICES:
            raise DiscountRejectedError(notice.message)
    if breakdown.rejected:
        rejected = breakdown.rejected[0]
        raise DiscountRejectedError(
            f"{rejected.source.description}: {rejected.message}"
        )

    if (
        payload.expected_total is not None
        and to_money(payload.expected_total) != breakdown.final_total
    ):
        raise PriceChangedError(to_money(payload.expected_total), breakdown.final_total)

    combo_quantities = _merge_quantities(payload.combos)
    snack_quantities = _merge_quantities(payload.snacks)

    # Only the points the capped discount actually absorbed are redeemed.
    redemption = breakdown.applied_source(DiscountKind.LOYALTY_POINTS)
    points_used = 0
    if redemption is not None:
        points_used = min(
            redemption.points_requested,
            loyalty_service.points_for_amount(
                breakdown.points_discount, point_value=redemption.point_value
            ),
        )

    booking = Booking(
        showtime_id=quote.showtime.id,
        member_id=quote.member.id if quote.member is not None else None,
        customer_name=payload.customer_name,
        customer_phone=payload.customer_phone,
        customer_email=payload.customer_email,
        status=BookingStatus.PENDING,
        payment_method=payload.payment_method,
        payment_status=PaymentStatus.PENDING,
        subtotal=breakdown.subtotal,
        discount_total=breakdown.total_discount,
        total_price=breakdown.final_total,
        loyalty_points_used=0,
        loyalty_points_earned=0,
        seats=[
            BookingSeat(
                showtime_id=quote.showtime.id,
                seat_id=seat.id,
                unit_price=seat.seat_type.price,
            )
            for seat in quote.seats
        ],
        combos=[
            BookingCombo(combo_id=combo_id, quantity=quantity, unit_price=combo.price)
            for combo_id, quantity in combo_quantities.items()
            if (combo := quote.combos.get(combo_id)) is not None
            and combo.is_available
            and quantity > 0
        ],
        snacks=[
            BookingSnack(snack_id=snack_id, quantity=quantity, unit_price=snack.price)
            for snack_id, quantity in snack_quantities.items()
            if (snack := quote.snacks.get(snack_id)) is not None
            and snack.is_available
            and quantity > 0
        ],
        discounts=[
            BookingDiscount(
                position=position,
                kind=applied.kind,
                description=(
                    f"{points_used} loyalty points"
                    if applied.kind is DiscountKind.LOYALTY_POINTS
                    else applied.source.description
                ),
                amount=applied.amount,
            )
            for position, applied in enumerate(breakdown.applied)
        ],
    )

    try:
        session.add(booking)
        try:
            await session.flush()
        except IntegrityError as exc:
            logger.warning(
                "Seat conflict for showtime %s at write time", quote.showtime.id
            )
            raise SeatUnavailableError([seat.label for seat in quote.seats]) from exc

        if breakdown.applied_source(DiscountKind.VOUCHER) is not None:
            await voucher_service.consume_voucher(session, voucher=quote.voucher)
            booking.voucher_id = quote.voucher.id
        if breakdown.applied_source(DiscountKind.PROMOTION) is not None:
            booking.promotion_id = quote.promotion.id
        if points_used > 0:
            await loyalty_service.redeem_points(
                session,
                member=quote.member,
                points=points_used,
                booking_id=booking.id,
            )
            booking.loyalty_points_used = points_used
        if quote.member is not None:
            booking.loyalty_points_earned = await loyalty_service.earn_points(
                session,
                member=quote.member,
                amount_paid=breakdown.final_total,
                booking_id=booking.id,
            )
        await session.commit()
    except BookingError:
        await session.rollback()
        raise

    logger.info(
        "Created booking %s for showtime %s: %s seats, total %s",
        booking.id,
        booking.showtime_id,
        len(booking.seats),
        booking.total_price,
    )
    return booking


async def get_booking(session: AsyncSession, booking_id: uuid.UUID) -> Booking | None:
    stmt = _booking_query().where(Booking.id == booking_id)
    result = await session.execute(stmt)
    return result.scalars().unique().one_or_none()


async def list_bookings(
    session: AsyncSession,
    *,
    showtime_id: uuid.UUID | None = None,
    member_id: uuid.UUID | None = None,
    limit: int = 50,
) -> list[Booking]:
    """Most recent bookings first, optionally filtered."""

    stmt = _booking_query().order_by(Booking.created_at.desc()).limit(limit)
    if showtime_id is not None:
        stmt = stmt.where(Booking.showtime_id == showtime_id)
    if member_id is not None:
        stmt = stmt.where(Booking.member_id == member_id)
    result = await session.execute(stmt)
    return list(result.scalars().unique().all())
