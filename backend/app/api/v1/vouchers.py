"""Voucher endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.schemas.voucher import VoucherValidateRequest, VoucherValidationRead
from app.services import voucher_service

router = APIRouter(prefix="/vouchers", tags=["vouchers"])


@router.post(
    "/validate",
    response_model=VoucherValidationRead,
    summary="Preview a voucher against an order amount",
)
async def validate_voucher(
    payload: VoucherValidateRequest,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> VoucherValidationRead:
    """Check a code without consuming it; usage is only counted on booking."""
    validation = await voucher_service.validate_voucher(
        session, code=payload.code, order_amount=payload.order_amount
    )
    return VoucherValidationRead.model_validate(validation.to_dict())
