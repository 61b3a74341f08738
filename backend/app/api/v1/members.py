"""Loyalty member endpoints."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.schemas.member import MemberRead, PointTransactionRead
from app.services import loyalty_service

router = APIRouter(prefix="/members", tags=["members"])


@router.get("/lookup", response_model=MemberRead, summary="Find member by phone or email")
async def lookup_member(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    query: Annotated[str, Query(min_length=1)],
) -> MemberRead:
    member = await loyalty_service.find_member(session, query=query)
    if member is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Member not found")
    return MemberRead.model_validate(member)


@router.get("/{member_id}", response_model=MemberRead, summary="Get member")
async def get_member(
    member_id: UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> MemberRead:
    member = await loyalty_service.get_member(session, member_id)
    if member is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Member not found")
    return MemberRead.model_validate(member)


@router.get(
    "/{member_id}/transactions",
    response_model=list[PointTransactionRead],
    summary="List point transactions",
)
async def list_member_transactions(
    member_id: UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    limit: Annotated[int, Query(ge=1, le=200)] = 50,
) -> list[PointTransactionRead]:
    member = await loyalty_service.get_member(session, member_id)
    if member is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Member not found")
    transactions = await loyalty_service.list_transactions(
        session, member_id=member_id, limit=limit
    )
    return [PointTransactionRead.model_validate(entry) for entry in transactions]
