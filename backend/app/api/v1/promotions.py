"""Promotion endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.schemas.voucher import PromotionRead
from app.services import promotion_service

router = APIRouter(prefix="/promotions", tags=["promotions"])


@router.get(
    "/active", response_model=list[PromotionRead], summary="List running promotions"
)
async def list_active_promotions(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> list[PromotionRead]:
    promotions = await promotion_service.list_active(session)
    return [PromotionRead.model_validate(promotion) for promotion in promotions]
