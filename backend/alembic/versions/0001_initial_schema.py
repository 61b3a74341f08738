"""Initial cinema checkout schema.

Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

_ENUMS: dict[str, tuple[str, ...]] = {
    "catalogstatus": ("AVAILABLE", "UNAVAILABLE"),
    "snackcategory": ("DRINK", "FOOD"),
    "snacksize": ("SMALL", "MEDIUM", "LARGE"),
    "discounttype": ("PERCENTAGE", "FIXED"),
    "promotionstatus": ("ACTIVE", "INACTIVE"),
    "membershiplevel": ("SILVER", "GOLD", "PLATINUM"),
    "pointtransactiontype": ("EARN", "REDEEM"),
    "bookingstatus": ("PENDING", "CONFIRMED", "CANCELLED"),
    "paymentstatus": ("PENDING", "PAID"),
    "paymentmethod": ("CASH", "ONLINE"),
    "discountkind": ("LOYALTY_POINTS", "VOUCHER", "PROMOTION"),
}


def _enum(name: str) -> postgresql.ENUM:
    # Types are created up front so tables can share them.
    return postgresql.ENUM(*_ENUMS[name], name=name, create_type=False)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def _fk(target: str, ondelete: str) -> sa.ForeignKey:
    return sa.ForeignKey(target, ondelete=ondelete)


def upgrade() -> None:
    bind = op.get_bind()
    for name, values in _ENUMS.items():
        postgresql.ENUM(*values, name=name).create(bind, checkfirst=True)

    op.create_table(
        "snacks",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("category", _enum("snackcategory"), nullable=False),
        sa.Column("size", _enum("snacksize"), nullable=False),
        sa.Column("flavor", sa.String(length=255)),
        sa.Column("description", sa.Text()),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("status", _enum("catalogstatus"), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "combos",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("status", _enum("catalogstatus"), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "combo_snacks",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "combo_id", sa.Uuid(as_uuid=True), _fk("combos.id", "CASCADE"), nullable=False
        ),
        sa.Column(
            "snack_id", sa.Uuid(as_uuid=True), _fk("snacks.id", "CASCADE"), nullable=False
        ),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.UniqueConstraint("combo_id", "snack_id"),
    )

    op.create_table(
        "cinema_rooms",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("fee", sa.Numeric(12, 2), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "seat_types",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(length=100), nullable=False, unique=True),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "seats",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "room_id",
            sa.Uuid(as_uuid=True),
            _fk("cinema_rooms.id", "CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "seat_type_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("seat_types.id"),
            nullable=False,
        ),
        sa.Column("row", sa.String(length=4), nullable=False),
        sa.Column("number", sa.Integer(), nullable=False),
        sa.UniqueConstraint("room_id", "row", "number"),
    )

    op.create_table(
        "showtimes",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "room_id",
            sa.Uuid(as_uuid=True),
            _fk("cinema_rooms.id", "CASCADE"),
            nullable=False,
        ),
        sa.Column("movie_title", sa.String(length=255), nullable=False),
        sa.Column("starts_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("ends_at", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "vouchers",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("code", sa.String(length=64), nullable=False, unique=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("discount_type", _enum("discounttype"), nullable=False),
        sa.Column("discount_value", sa.Numeric(12, 2), nullable=False),
        sa.Column("min_order_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("max_discount_amount", sa.Numeric(12, 2)),
        sa.Column("valid_from", sa.DateTime(timezone=True), nullable=False),
        sa.Column("valid_to", sa.DateTime(timezone=True), nullable=False),
        sa.Column("usage_limit", sa.Integer(), nullable=False),
        sa.Column("used_count", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "promotions",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("image", sa.String(length=500)),
        sa.Column("discount_type", _enum("discounttype"), nullable=False),
        sa.Column("discount_value", sa.Numeric(12, 2), nullable=False),
        sa.Column("min_purchase", sa.Numeric(12, 2), nullable=False),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", _enum("promotionstatus"), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "members",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=32)),
        sa.Column("email", sa.String(length=255)),
        sa.Column("membership_level", _enum("membershiplevel"), nullable=False),
        sa.Column("current_points", sa.Integer(), nullable=False),
        sa.Column("total_spent", sa.Numeric(14, 2), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_members_phone", "members", ["phone"])
    op.create_index("ix_members_email", "members", ["email"])

    op.create_table(
        "bookings",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "showtime_id",
            sa.Uuid(as_uuid=True),
            _fk("showtimes.id", "RESTRICT"),
            nullable=False,
        ),
        sa.Column("member_id", sa.Uuid(as_uuid=True), _fk("members.id", "SET NULL")),
        sa.Column("voucher_id", sa.Uuid(as_uuid=True), _fk("vouchers.id", "SET NULL")),
        sa.Column(
            "promotion_id", sa.Uuid(as_uuid=True), _fk("promotions.id", "SET NULL")
        ),
        sa.Column("customer_name", sa.String(length=255)),
        sa.Column("customer_phone", sa.String(length=32)),
        sa.Column("customer_email", sa.String(length=255)),
        sa.Column("status", _enum("bookingstatus"), nullable=False),
        sa.Column("payment_method", _enum("paymentmethod"), nullable=False),
        sa.Column("payment_status", _enum("paymentstatus"), nullable=False),
        sa.Column("subtotal", sa.Numeric(14, 2), nullable=False),
        sa.Column("discount_total", sa.Numeric(14, 2), nullable=False),
        sa.Column("total_price", sa.Numeric(14, 2), nullable=False),
        sa.Column("loyalty_points_used", sa.Integer(), nullable=False),
        sa.Column("loyalty_points_earned", sa.Integer(), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "booking_seats",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "booking_id",
            sa.Uuid(as_uuid=True),
            _fk("bookings.id", "CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "showtime_id",
            sa.Uuid(as_uuid=True),
            _fk("showtimes.id", "CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "seat_id", sa.Uuid(as_uuid=True), _fk("seats.id", "RESTRICT"), nullable=False
        ),
        sa.Column("unit_price", sa.Numeric(12, 2), nullable=False),
        sa.Column(
            "is_active", sa.Boolean(), server_default=sa.true(), nullable=False
        ),
    )
    op.create_index(
        "ix_booking_seats_showtime_id", "booking_seats", ["showtime_id"]
    )
    op.create_index(
        "uq_booking_seats_active_seat",
        "booking_seats",
        ["showtime_id", "seat_id"],
        unique=True,
        postgresql_where=sa.text("is_active"),
        sqlite_where=sa.text("is_active"),
    )

    op.create_table(
        "booking_combos",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "booking_id",
            sa.Uuid(as_uuid=True),
            _fk("bookings.id", "CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "combo_id", sa.Uuid(as_uuid=True), _fk("combos.id", "RESTRICT"), nullable=False
        ),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price", sa.Numeric(12, 2), nullable=False),
    )

    op.create_table(
        "booking_snacks",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "booking_id",
            sa.Uuid(as_uuid=True),
            _fk("bookings.id", "CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "snack_id", sa.Uuid(as_uuid=True), _fk("snacks.id", "RESTRICT"), nullable=False
        ),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price", sa.Numeric(12, 2), nullable=False),
    )

    op.create_table(
        "booking_discounts",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "booking_id",
            sa.Uuid(as_uuid=True),
            _fk("bookings.id", "CASCADE"),
            nullable=False,
        ),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("kind", _enum("discountkind"), nullable=False),
        sa.Column("description", sa.String(length=255), nullable=False),
        sa.Column("amount", sa.Numeric(14, 2), nullable=False),
    )

    op.create_table(
        "point_transactions",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "member_id",
            sa.Uuid(as_uuid=True),
            _fk("members.id", "CASCADE"),
            nullable=False,
        ),
        sa.Column("type", _enum("pointtransactiontype"), nullable=False),
        sa.Column("points", sa.Integer(), nullable=False),
        sa.Column("description", sa.String(length=255), nullable=False),
        sa.Column("booking_id", sa.Uuid(as_uuid=True), _fk("bookings.id", "SET NULL")),
        *_timestamps(),
    )


def downgrade() -> None:
    op.drop_table("point_transactions")
    op.drop_table("booking_discounts")
    op.drop_table("booking_snacks")
    op.drop_table("booking_combos")
    op.drop_index("uq_booking_seats_active_seat", table_name="booking_seats")
    op.drop_index("ix_booking_seats_showtime_id", table_name="booking_seats")
    op.drop_table("booking_seats")
    op.drop_table("bookings")
    op.drop_index("ix_members_email", table_name="members")
    op.drop_index("ix_members_phone", table_name="members")
    op.drop_table("members")
    op.drop_table("promotions")
    op.drop_table("vouchers")
    op.drop_table("showtimes")
    op.drop_table("seats")
    op.drop_table("seat_types")
    op.drop_table("cinema_rooms")
    op.drop_table("combo_snacks")
    op.drop_table("combos")
    op.drop_table("snacks")

    bind = op.get_bind()
    for name in reversed(list(_ENUMS)):
        postgresql.ENUM(name=name).drop(bind, checkfirst=True)
