"""Concession catalog lookups and availability management."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models import CatalogStatus, Combo, ComboSnack, Snack

logger = logging.getLogger(__name__)


def _combo_options():
    return selectinload(Combo.snack_links).selectinload(ComboSnack.snack)


async def list_combos(session: AsyncSession) -> list[Combo]:
    """Return every combo, available or not, ordered by name."""
    stmt = select(Combo).options(_combo_options()).order_by(Combo.name.asc())
    result = await session.execute(stmt)
    return list(result.scalars().unique().all())


async def list_snacks(session: AsyncSession) -> list[Snack]:
    stmt = select(Snack).order_by(Snack.category.asc(), Snack.name.asc())
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def load_combos(
    session: AsyncSession, combo_ids: Iterable[UUID]
) -> dict[UUID, Combo]:
    """Load combos with their components, keyed by id."""
    ids = set(combo_ids)
    if not ids:
        return {}
    stmt = select(Combo).options(_combo_options()).where(Combo.id.in_(ids))
    result = await session.execute(stmt)
    return {combo.id: combo for combo in result.scalars().unique().all()}


async def load_snacks(
    session: AsyncSession, snack_ids: Iterable[UUID]
) -> dict[UUID, Snack]:
    ids = set(snack_ids)
    if not ids:
        return {}
    result = await session.execute(select(Snack).where(Snack.id.in_(ids)))
    return {snack.id: snack for snack in result.scalars().all()}


async def set_combo_status(
    session: AsyncSession, *, combo_id: UUID, status: CatalogStatus
) -> Combo | None:
    """Mark a combo available or unavailable; returns ``None`` when missing."""
    combos = await load_combos(session, [combo_id])
    combo = combos.get(combo_id)
    if combo is None:
        return None
    combo.status = status
    await session.commit()
    logger.info("Combo %s marked %s", combo_id, status.value)
    return combo


async def set_snack_status(
    session: AsyncSession, *, snack_id: UUID, status: CatalogStatus
) -> Snack | None:
    snack = await session.get(Snack, snack_id)
    if snack is None:
        return None
    snack.status = status
    await session.commit()
    await session.refresh(snack)
    logger.info("Snack %s marked %s", snack_id, status.value)
    return snack
