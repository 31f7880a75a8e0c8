"""Groups router - ministry/small groups and their memberships."""

import uuid
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, status
from libs.common.datetime_utils import get_today
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from services.members_service.models import Group, GroupMembership, Member
from services.members_service.schemas import (
    DeleteResponse,
    GroupCreate,
    GroupListResponse,
    GroupMemberAdd,
    GroupMembershipResponse,
    GroupResponse,
)
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)
router = APIRouter(prefix="/groups", tags=["groups"])


async def _get_group_or_404(db: AsyncSession, group_id: uuid.UUID) -> Group:
    group = await db.get(Group, group_id)
    if not group:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Group not found",
        )
    return group


@router.get("/", response_model=GroupListResponse)
async def list_groups(
    active: bool | None = None,
    db: AsyncSession = Depends(get_async_db),
):
    member_count = (
        select(func.count(GroupMembership.id))
        .where(GroupMembership.group_id == Group.id)
        .correlate(Group)
        .scalar_subquery()
    )
    query = select(Group, member_count.label("member_count")).order_by(
        Group.name, Group.id
    )
    if active is not None:
        query = query.where(Group.is_active.is_(active))

    result = await db.execute(query)
    groups = []
    for group, count in result.all():
        item = GroupResponse.model_validate(group)
        item.member_count = count
        groups.append(item)
    return GroupListResponse(groups=groups, total=len(groups))


@router.post("/", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
async def create_group(
    group_in: GroupCreate,
    db: AsyncSession = Depends(get_async_db),
):
    existing = await db.execute(select(Group.id).where(Group.name == group_in.name))
    if existing.first() is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Group with this name already exists",
        )

    group = Group(**group_in.model_dump())
    db.add(group)
    await db.commit()
    await db.refresh(group)
    logger.info("Created group %s (%s)", group.id, group.name)
    return GroupResponse.model_validate(group)


@router.post(
    "/{group_id}/members",
    response_model=GroupMembershipResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_group_member(
    group_id: uuid.UUID,
    body: GroupMemberAdd,
    today: date = Depends(get_today),
    db: AsyncSession = Depends(get_async_db),
):
    await _get_group_or_404(db, group_id)
    member = await db.get(Member, body.member_id)
    if not member:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Member not found",
        )

    existing = await db.execute(
        select(GroupMembership.id).where(
            GroupMembership.group_id == group_id,
            GroupMembership.member_id == body.member_id,
        )
    )
    if existing.first() is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Member is already in this group",
        )

    membership = GroupMembership(
        group_id=group_id,
        member_id=body.member_id,
        role=body.role,
        join_date=body.join_date or today,
    )
    db.add(membership)
    await db.commit()
    await db.refresh(membership)
    return GroupMembershipResponse.model_validate(membership)


@router.delete("/{group_id}/members/{member_id}", response_model=DeleteResponse)
async def remove_group_member(
    group_id: uuid.UUID,
    member_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_db),
):
    await _get_group_or_404(db, group_id)
    result = await db.execute(
        delete(GroupMembership).where(
            GroupMembership.group_id == group_id,
            GroupMembership.member_id == member_id,
        )
    )
    if result.rowcount == 0:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Member is not in this group",
        )
    await db.commit()
    return DeleteResponse(success=True, message="Member removed from group")
