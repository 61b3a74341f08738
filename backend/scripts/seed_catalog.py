"""Seed a demo room, concessions, vouchers, promotions and a member."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import session_scope
from app.models import (
    CatalogStatus,
    CinemaRoom,
    Combo,
    ComboSnack,
    Member,
    MembershipLevel,
    Promotion,
    PromotionStatus,
    Seat,
    SeatType,
    Showtime,
    Snack,
    SnackCategory,
    SnackSize,
    Voucher,
)
from app.pricing import DiscountType

ROOM_NAME = "Room 1"

SEAT_TYPES = {"Standard": Decimal("90000"), "VIP": Decimal("140000")}

SNACKS = [
    ("Popcorn", SnackCategory.FOOD, SnackSize.LARGE, "Caramel", Decimal("50000")),
    ("Coca-Cola", SnackCategory.DRINK, SnackSize.MEDIUM, None, Decimal("30000")),
    ("Nachos", SnackCategory.FOOD, SnackSize.MEDIUM, "Cheese", Decimal("45000")),
]

COMBOS = {
    "Couple Combo": {"Popcorn": 1, "Coca-Cola": 2},
    "Family Combo": {"Popcorn": 2, "Coca-Cola": 4, "Nachos": 1},
}

# code, title, type, value, min order, max discount, usage limit, used, active, expired
VOUCHERS = [
    ("WELCOME10", "Welcome new members", DiscountType.PERCENTAGE, "10", "100000", "50000", 1000, 150, True, False),
    ("MOVIE50K", "Flat 50K off", DiscountType.FIXED, "50000", "200000", None, 500, 89, True, False),
    ("WEEKEND20", "Happy weekend", DiscountType.PERCENTAGE, "20", "150000", "100000", 300, 45, True, False),
    ("EXPIRED50", "Expired code", DiscountType.FIXED, "50000", "100000", None, 100, 100, False, True),
    ("SUMMER100", "Summer blast", DiscountType.FIXED, "100000", "500000", None, 200, 12, True, False),
]

PROMOTIONS = [
    ("Summer Sale", DiscountType.PERCENTAGE, "20", "100000"),
    ("New Year Deal", DiscountType.FIXED, "50000", "200000"),
]


async def _exists(session: AsyncSession, column, value) -> bool:
    count = await session.scalar(select(func.count()).where(column == value))
    return bool(count)


async def _seed_room(session: AsyncSession, now: datetime) -> int:
    if await _exists(session, CinemaRoom.name, ROOM_NAME):
        return 0
    seat_types = {}
    for name, price in SEAT_TYPES.items():
        seat_type = await session.scalar(select(SeatType).where(SeatType.name == name))
        if seat_type is None:
            seat_type = SeatType(name=name, price=price)
            session.add(seat_type)
        seat_types[name] = seat_type
    room = CinemaRoom(name=ROOM_NAME, fee=Decimal("10000"))
    for row in "ABCDE":
        tier = "VIP" if row in {"D", "E"} else "Standard"
        for number in range(1, 11):
            room.seats.append(Seat(row=row, number=number, seat_type=seat_types[tier]))
    session.add(room)
    session.add(
        Showtime(
            room=room,
            movie_title="Demo Feature",
            starts_at=now + timedelta(days=1),
            ends_at=now + timedelta(days=1, hours=2),
        )
    )
    return len(room.seats)


async def _seed_concessions(session: AsyncSession) -> int:
    created = 0
    snacks: dict[str, Snack] = {}
    for name, category, size, flavor, price in SNACKS:
        snack = await session.scalar(select(Snack).where(Snack.name == name))
        if snack is None:
            snack = Snack(
                name=name,
                category=category,
                size=size,
                flavor=flavor,
                price=price,
                status=CatalogStatus.AVAILABLE,
            )
            session.add(snack)
            created += 1
        snacks[name] = snack
    for combo_name, parts in COMBOS.items():
        if await _exists(session, Combo.name, combo_name):
            continue
        combo = Combo(name=combo_name, status=CatalogStatus.AVAILABLE)
        combo.snack_links = [
            ComboSnack(snack=snacks[snack_name], quantity=quantity)
            for snack_name, quantity in parts.items()
        ]
        session.add(combo)
        created += 1
    return created


async def _seed_discounts(session: AsyncSession, now: datetime) -> int:
    created = 0
    for (
        code,
        title,
        discount_type,
        value,
        min_order,
        max_discount,
        usage_limit,
        used_count,
        active,
        expired,
    ) in VOUCHERS:
        if await _exists(session, Voucher.code, code):
            continue
        valid_to = now - timedelta(days=1) if expired else now + timedelta(days=180)
        session.add(
            Voucher(
                code=code,
                title=title,
                discount_type=discount_type,
                discount_value=Decimal(value),
                min_order_amount=Decimal(min_order),
                max_discount_amount=Decimal(max_discount) if max_discount else None,
                valid_from=now - timedelta(days=30),
                valid_to=valid_to,
                usage_limit=usage_limit,
                used_count=used_count,
                is_active=active,
            )
        )
        created += 1
    for title, discount_type, value, min_purchase in PROMOTIONS:
        if await _exists(session, Promotion.title, title):
            continue
        session.add(
            Promotion(
                title=title,
                discount_type=discount_type,
                discount_value=Decimal(value),
                min_purchase=Decimal(min_purchase),
                start_time=now - timedelta(days=7),
                end_time=now + timedelta(days=60),
                status=PromotionStatus.ACTIVE,
            )
        )
        created += 1
    return created


async def seed_catalog() -> None:
    now = datetime.now(UTC)
    async with session_scope() as session:
        seats = await _seed_room(session, now)
        concessions = await _seed_concessions(session)
        discounts = await _seed_discounts(session, now)
        members = 0
        if not await _exists(session, Member.phone, "0901234567"):
            session.add(
                Member(
                    name="Demo Member",
                    phone="0901234567",
                    email="member@example.com",
                    membership_level=MembershipLevel.GOLD,
                    current_points=500,
                )
            )
            members = 1

    print(
        f"Seeded {seats} seat(s), {concessions} concession(s), "
        f"{discounts} discount(s) and {members} member(s)."
    )


def main() -> None:
    asyncio.run(seed_catalog())


if __name__ == "__main__":
    main()
