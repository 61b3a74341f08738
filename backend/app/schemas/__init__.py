"""Schema exports."""

from app.schemas.booking import (
    BookingComboRead,
    BookingCreate,
    BookingDiscountRead,
    BookingRead,
    BookingSeatRead,
    BookingSnackRead,
)
from app.schemas.catalog import CatalogStatusUpdate, ComboRead, ComboSnackRead, SnackRead
from app.schemas.member import MemberRead, PointTransactionRead
from app.schemas.pricing import (
    AppliedDiscountRead,
    CheckoutQuoteRead,
    CheckoutQuoteRequest,
    PricingLineRead,
    PricingNoticeRead,
    RejectedDiscountRead,
    SelectionItem,
)
from app.schemas.voucher import (
    PromotionRead,
    VoucherValidateRequest,
    VoucherValidationRead,
)

__all__ = [
    "AppliedDiscountRead",
    "BookingComboRead",
    "BookingCreate",
    "BookingDiscountRead",
    "BookingRead",
    "BookingSeatRead",
    "BookingSnackRead",
    "CatalogStatusUpdate",
    "CheckoutQuoteRead",
    "CheckoutQuoteRequest",
    "ComboRead",
    "ComboSnackRead",
    "MemberRead",
    "PointTransactionRead",
    "PricingLineRead",
    "PricingNoticeRead",
    "PromotionRead",
    "RejectedDiscountRead",
    "SelectionItem",
    "SnackRead",
    "VoucherValidateRequest",
    "VoucherValidationRead",
]
