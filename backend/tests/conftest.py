"""Test fixtures for the cinema checkout backend."""
from __future__ import annotations

import os
from collections.abc import AsyncIterator
from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")

from app.core.config import get_settings
from app.db.base import Base
from app.db.session import dispose_engine, get_sessionmaker
from app.main import app
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
    Voucher,
)
from app.pricing import DiscountType


@pytest.fixture(scope="session")
def db_url(tmp_path_factory: pytest.TempPathFactory) -> str:
    """Provide a temporary SQLite database URL for the test session."""
    db_path = tmp_path_factory.mktemp("db") / "test.db"
    return f"sqlite+aiosqlite:///{db_path}"


@pytest_asyncio.fixture()
async def reset_database(db_url: str) -> AsyncIterator[None]:
    """Drop and recreate the database schema for an isolated test."""
    os.environ["DATABASE_URL"] = db_url
    get_settings.cache_clear()
    get_settings()

    await dispose_engine(db_url)
    engine = create_async_engine(db_url, future=True)
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.drop_all)
        await connection.run_sync(Base.metadata.create_all)
    await engine.dispose()
    yield
    await dispose_engine(db_url)


def _voucher(
    code: str,
    discount_type: DiscountType,
    value: str,
    *,
    now: datetime,
    min_order: str = "0",
    max_discount: str | None = None,
    usage_limit: int = 100,
    used_count: int = 0,
    valid_to: datetime | None = None,
) -> Voucher:
    return Voucher(
        code=code,
        title=f"{code} voucher",
        discount_type=discount_type,
        discount_value=Decimal(value),
        min_order_amount=Decimal(min_order),
        max_discount_amount=Decimal(max_discount) if max_discount else None,
        valid_from=now - timedelta(days=30),
        valid_to=valid_to or now + timedelta(days=30),
        usage_limit=usage_limit,
        used_count=used_count,
        is_active=True,
    )


@pytest_asyncio.fixture()
async def app_context(
    reset_database: AsyncIterator[None], db_url: str
) -> AsyncIterator[dict[str, object]]:
    """Yield an async client and a seeded cinema with concessions and discounts.

    Room fee is 10,000 per seat; A1/A2 are Standard (90,000) and B1 is VIP
    (140,000). The Couple combo is 2 popcorn + 2 cola = 160,000.
    """
    sessionmaker = get_sessionmaker(db_url)
    now = datetime.now(UTC)

    async with sessionmaker() as session:
        standard = SeatType(name="Standard", price=Decimal("90000"))
        vip = SeatType(name="VIP", price=Decimal("140000"))
        room = CinemaRoom(name="Room 1", fee=Decimal("10000"))
        other_room = CinemaRoom(name="Room 2", fee=Decimal("0"))
        seat_a1 = Seat(room=room, seat_type=standard, row="A", number=1)
        seat_a2 = Seat(room=room, seat_type=standard, row="A", number=2)
        seat_b1 = Seat(room=room, seat_type=vip, row="B", number=1)
        foreign_seat = Seat(room=other_room, seat_type=standard, row="Z", number=1)
        showtime = Showtime(
            room=room,
            movie_title="The Long Projection",
            starts_at=now + timedelta(days=1),
            ends_at=now + timedelta(days=1, hours=2),
        )
        session.add_all([room, other_room, showtime])

        popcorn = Snack(
            name="Popcorn",
            category=SnackCategory.FOOD,
            price=Decimal("50000"),
            status=CatalogStatus.AVAILABLE,
        )
        cola = Snack(
            name="Cola",
            category=SnackCategory.DRINK,
            price=Decimal("30000"),
            status=CatalogStatus.AVAILABLE,
        )
        nachos = Snack(
            name="Nachos",
            category=SnackCategory.FOOD,
            price=Decimal("45000"),
            status=CatalogStatus.UNAVAILABLE,
        )
        couple = Combo(name="Couple Combo", status=CatalogStatus.AVAILABLE)
        couple.snack_links = [
            ComboSnack(snack=popcorn, quantity=2),
            ComboSnack(snack=cola, quantity=2),
        ]
        family = Combo(name="Family Combo", status=CatalogStatus.UNAVAILABLE)
        family.snack_links = [
            ComboSnack(snack=popcorn, quantity=2),
            ComboSnack(snack=cola, quantity=4),
        ]
        session.add_all([popcorn, cola, nachos, couple, family])

        welcome = _voucher(
            "WELCOME10",
            DiscountType.PERCENTAGE,
            "10",
            now=now,
            min_order="100000",
            max_discount="50000",
            usage_limit=1000,
            used_count=150,
        )
        movie = _voucher(
            "MOVIE50K", DiscountType.FIXED, "50000", now=now, min_order="200000"
        )
        expired = _voucher(
            "EXPIRED50",
            DiscountType.FIXED,
            "50000",
            now=now,
            valid_to=now - timedelta(days=1),
        )
        used_up = _voucher(
            "USEDUP", DiscountType.FIXED, "20000", now=now, usage_limit=1, used_count=1
        )
        last_one = _voucher("LASTONE", DiscountType.FIXED, "20000", now=now, usage_limit=1)
        session.add_all([welcome, movie, expired, used_up, last_one])

        summer = Promotion(
            title="Summer Sale",
            discount_type=DiscountType.PERCENTAGE,
            discount_value=Decimal("20"),
            min_purchase=Decimal("150000"),
            start_time=now - timedelta(days=7),
            end_time=now + timedelta(days=7),
            status=PromotionStatus.ACTIVE,
        )
        retired = Promotion(
            title="Retired Deal",
            discount_type=DiscountType.FIXED,
            discount_value=Decimal("50000"),
            min_purchase=Decimal("0"),
            start_time=now - timedelta(days=7),
            end_time=now + timedelta(days=7),
            status=PromotionStatus.INACTIVE,
        )
        session.add_all([summer, retired])

        member = Member(
            name="Linh Tran",
            phone="0901234567",
            email="linh@example.com",
            membership_level=MembershipLevel.GOLD,
            current_points=500,
        )
        session.add(member)
        await session.commit()

        context: dict[str, object] = {
            "now": now,
            "showtime_id": showtime.id,
            "room_id": room.id,
            "seat_ids": {"A1": seat_a1.id, "A2": seat_a2.id, "B1": seat_b1.id},
            "foreign_seat_id": foreign_seat.id,
            "snack_ids": {"popcorn": popcorn.id, "cola": cola.id, "nachos": nachos.id},
            "combo_ids": {"couple": couple.id, "family": family.id},
            "voucher_ids": {
                "WELCOME10": welcome.id,
                "MOVIE50K": movie.id,
                "EXPIRED50": expired.id,
                "USEDUP": used_up.id,
                "LASTONE": last_one.id,
            },
            "promotion_ids": {"summer": summer.id, "retired": retired.id},
            "member_id": member.id,
        }

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        context["client"] = client
        yield context
