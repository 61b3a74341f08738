"""Checkout pricing endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.schemas.pricing import CheckoutQuoteRead, CheckoutQuoteRequest
from app.services import checkout_service
from app.services.errors import NotFoundError

router = APIRouter(prefix="/checkout", tags=["checkout"])


@router.post(
    "/quote", response_model=CheckoutQuoteRead, summary="Price a checkout selection"
)
async def quote_checkout(
    payload: CheckoutQuoteRequest,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> CheckoutQuoteRead:
    try:
        quote = await checkout_service.build_quote(session, payload)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    return CheckoutQuoteRead.model_validate(quote.to_dict())
