"""Concession catalog endpoints."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.schemas.catalog import CatalogStatusUpdate, ComboRead, SnackRead
from app.services import catalog_service

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("/combos", response_model=list[ComboRead], summary="List combos")
async def list_combos(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> list[ComboRead]:
    combos = await catalog_service.list_combos(session)
    return [ComboRead.model_validate(combo) for combo in combos]


@router.get("/snacks", response_model=list[SnackRead], summary="List snacks")
async def list_snacks(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> list[SnackRead]:
    snacks = await catalog_service.list_snacks(session)
    return [SnackRead.model_validate(snack) for snack in snacks]


@router.patch(
    "/combos/{combo_id}/status",
    response_model=ComboRead,
    summary="Change combo availability",
)
async def update_combo_status(
    combo_id: UUID,
    payload: CatalogStatusUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> ComboRead:
    combo = await catalog_service.set_combo_status(
        session, combo_id=combo_id, status=payload.status
    )
    if combo is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Combo not found")
    return ComboRead.model_validate(combo)


@router.patch(
    "/snacks/{snack_id}/status",
    response_model=SnackRead,
    summary="Change snack availability",
)
async def update_snack_status(
    snack_id: UUID,
    payload: CatalogStatusUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> SnackRead:
    snack = await catalog_service.set_snack_status(
        session, snack_id=snack_id, status=payload.status
    )
    if snack is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Snack not found")
    return SnackRead.model_validate(snack)
