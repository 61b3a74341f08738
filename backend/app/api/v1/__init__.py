"""Versioned API router."""

from fastapi import APIRouter

from . import (
    bookings,
    catalog,
    checkout,
    health,
    members,
    promotions,
    vouchers,
)

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(catalog.router)
router.include_router(promotions.router)
router.include_router(vouchers.router)
router.include_router(members.router)
router.include_router(checkout.router)
router.include_router(bookings.router)

__all__ = ["router"]
