"""Service layer exports."""
from app.services import (
    booking_service,
    catalog_service,
    checkout_service,
    loyalty_service,
    promotion_service,
    voucher_service,
)

__all__ = [
    "booking_service",
    "catalog_service",
    "checkout_service",
    "loyalty_service",
    "promotion_service",
    "voucher_service",
]
