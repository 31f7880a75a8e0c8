"""Shared helper functions for members service routers."""

import uuid
from typing import Iterable

from fastapi import HTTPException, status
from services.members_service.models import Member
from services.members_service.schemas import MemberDetailResponse, MemberResponse
from services.members_service.services.transform import member_to_flat
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession


def member_response(member: Member, include_history: bool = False) -> MemberResponse:
    """Build the flat response model for a loaded member."""
    flat = member_to_flat(member, include_history=include_history)
    if include_history:
        return MemberDetailResponse.model_validate(flat)
    return MemberResponse.model_validate(flat)


async def ensure_member_exists(db: AsyncSession, member_id: uuid.UUID) -> None:
    result = await db.execute(select(Member.id).where(Member.id == member_id))
    if result.first() is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Member not found",
        )


async def member_briefs(
    db: AsyncSession, member_ids: Iterable[uuid.UUID]
) -> dict[uuid.UUID, dict]:
    """Batch-load id and name for the given members, keyed by id."""
    ids = list(set(member_ids))
    if not ids:
        return {}
    result = await db.execute(
        select(Member.id, Member.first_name, Member.last_name).where(Member.id.in_(ids))
    )
    return {row.id: dict(row._mapping) for row in result.all()}
