"""Schemas for groups and group memberships."""

import uuid
from datetime import date, datetime
from typing import Optional

from libs.common.schemas import CamelModel
from pydantic import Field
from services.members_service.models.enums import GroupRole


class GroupCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    group_type: Optional[str] = None
    is_active: bool = True


class GroupResponse(CamelModel):
    id: uuid.UUID
    name: str
    description: Optional[str] = None
    group_type: Optional[str] = None
    is_active: bool
    member_count: int = 0
    created_at: datetime


class GroupListResponse(CamelModel):
    groups: list[GroupResponse]
    total: int


class GroupMemberAdd(CamelModel):
    member_id: uuid.UUID
    role: GroupRole = GroupRole.MEMBER
    join_date: Optional[date] = None


class GroupMembershipResponse(CamelModel):
    id: uuid.UUID
    group_id: uuid.UUID
    member_id: uuid.UUID
    role: GroupRole
    join_date: date
