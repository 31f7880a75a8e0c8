"""Core members router - search, stats and CRUD for member records."""

import uuid
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from libs.auth.dependencies import get_optional_user
from libs.auth.models import AuthUser, actor_for
from libs.common.datetime_utils import get_today
from libs.common.error_handler import format_validation_errors
from libs.common.logging import get_logger
from libs.common.schemas import split_csv
from libs.db.session import get_async_db
from pydantic import ValidationError
from services.members_service.routers._helpers import member_response
from services.members_service.schemas import (
    DeleteResponse,
    MemberCreate,
    MemberDetailResponse,
    MemberFiltersEcho,
    MemberListResponse,
    MemberResponse,
    MemberStatsResponse,
    MemberUpdate,
)
from services.members_service.services import member_service
from services.members_service.services.filters import (
    MemberFilter,
    build_member_query,
)
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)
router = APIRouter(prefix="/members", tags=["members"])


def parse_member_filter(
    query: Optional[str] = None,
    tags: Optional[str] = None,
    status_list: Optional[str] = Query(None, alias="status"),
    age_min: Optional[int] = Query(None, alias="ageMin"),
    age_max: Optional[int] = Query(None, alias="ageMax"),
    join_start: Optional[date] = Query(None, alias="joinStart"),
    join_end: Optional[date] = Query(None, alias="joinEnd"),
    sort_by: str = Query("firstName", alias="sortBy"),
    sort_order: str = Query("asc", alias="sortOrder"),
    limit: int = 20,
    offset: int = 0,
) -> MemberFilter:
    """Parse the raw query string into a validated ``MemberFilter``."""
    try:
        return MemberFilter(
            query=query,
            tags=split_csv(tags),
            membership_status=split_csv(status_list),
            age_min=age_min,
            age_max=age_max,
            join_start=join_start,
            join_end=join_end,
            sort_by=sort_by,
            sort_order=sort_order,
            limit=limit,
            offset=offset,
        )
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=format_validation_errors(exc.errors()),
        )


@router.get("/", response_model=MemberListResponse)
async def list_members(
    filters: MemberFilter = Depends(parse_member_filter),
    today: date = Depends(get_today),
    db: AsyncSession = Depends(get_async_db),
):
    """Search members with filters, sorting and pagination."""
    member_query = build_member_query(filters, today)
    page = await member_service.list_members(db, member_query)
    return MemberListResponse(
        members=[member_response(m) for m in page.items],
        total=page.total,
        limit=page.limit,
        offset=page.offset,
        filters=MemberFiltersEcho.model_validate(filters.model_dump(mode="json")),
    )


@router.get("/stats", response_model=MemberStatsResponse)
async def get_member_stats(
    today: date = Depends(get_today),
    db: AsyncSession = Depends(get_async_db),
):
    return await member_service.member_stats(db, today)


@router.get("/{member_id}", response_model=MemberDetailResponse)
async def get_member(
    member_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_db),
):
    """Get one member including attendance and care history."""
    member = await member_service.get_member_or_404(db, member_id, include_history=True)
    return member_response(member, include_history=True)


@router.post("/", response_model=MemberResponse, status_code=status.HTTP_201_CREATED)
async def create_member(
    member_in: MemberCreate,
    current_user: Optional[AuthUser] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_async_db),
):
    member = await member_service.create_member(
        db, member_in, actor=actor_for(current_user)
    )
    return member_response(member)


@router.put("/{member_id}", response_model=MemberResponse)
@router.patch("/{member_id}", response_model=MemberResponse)
async def update_member(
    member_id: uuid.UUID,
    member_in: MemberUpdate,
    current_user: Optional[AuthUser] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_async_db),
):
    """
    Update a member. Only fields present in the body are changed.
    A supplied ``tags`` list replaces the member's tags.
    """
    member = await member_service.update_member(
        db, member_id, member_in, actor=actor_for(current_user)
    )
    return member_response(member)


@router.delete("/{member_id}", response_model=DeleteResponse)
async def delete_member(
    member_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_db),
):
    await member_service.delete_member(db, member_id)
    return DeleteResponse(success=True, message="Member deleted successfully")
