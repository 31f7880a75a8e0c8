"""Pydantic schemas for member records, in the flat shape the frontend uses."""

import uuid
from datetime import date, datetime
from typing import Optional

from libs.common.schemas import CamelModel
from pydantic import EmailStr, Field, field_validator
from services.members_service.models.enums import (
    CareType,
    CommunicationMethod,
    GroupRole,
    MembershipStatus,
    PrivacyLevel,
)

# ============================================================================
# EMBEDDED RECORDS
# ============================================================================


class Address(CamelModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None


class MemberEmergencyContactInput(CamelModel):
    name: Optional[str] = None
    relationship: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None


class MemberEmergencyContactResponse(MemberEmergencyContactInput):
    pass


class MemberPreferencesInput(CamelModel):
    communication_method: Optional[CommunicationMethod] = None
    newsletter: Optional[bool] = None
    event_notifications: Optional[bool] = None
    privacy_level: Optional[PrivacyLevel] = None


class MemberPreferencesResponse(CamelModel):
    communication_method: CommunicationMethod
    newsletter: bool
    event_notifications: bool
    privacy_level: PrivacyLevel


class SpiritualJourneyInput(CamelModel):
    current_stage: Optional[str] = None
    salvation_date: Optional[date] = None
    baptism_date: Optional[date] = None
    notes: Optional[str] = None


class SpiritualJourneyResponse(SpiritualJourneyInput):
    pass


class GroupMembershipSummary(CamelModel):
    group_id: uuid.UUID
    group_name: str
    role: GroupRole
    join_date: Optional[date] = None


class AttendanceSummary(CamelModel):
    event_id: uuid.UUID
    event_name: str
    date: date
    attended: bool


class CareRecordSummary(CamelModel):
    date: date
    care_type: CareType = Field(alias="type")
    notes: Optional[str] = None
    care_giver: Optional[str] = None


# ============================================================================
# MEMBER WRITE SCHEMAS
# ============================================================================


class MemberCreate(CamelModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    address: Optional[Address] = None
    membership_status: MembershipStatus = MembershipStatus.PENDING
    tags: list[str] = Field(default_factory=list)
    notes: Optional[str] = None
    gender: Optional[str] = None
    marital_status: Optional[str] = None
    profile_photo: Optional[str] = None
    emergency_contact: Optional[MemberEmergencyContactInput] = None
    preferences: Optional[MemberPreferencesInput] = None
    spiritual_journey: Optional[SpiritualJourneyInput] = None

    @field_validator("first_name", "last_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class MemberUpdate(CamelModel):
    """Partial update. Only the fields present in the request are applied."""

    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    address: Optional[Address] = None
    membership_status: Optional[MembershipStatus] = None
    tags: Optional[list[str]] = None
    notes: Optional[str] = None
    gender: Optional[str] = None
    marital_status: Optional[str] = None
    profile_photo: Optional[str] = None
    is_active: Optional[bool] = None
    emergency_contact: Optional[MemberEmergencyContactInput] = None
    preferences: Optional[MemberPreferencesInput] = None
    spiritual_journey: Optional[SpiritualJourneyInput] = None


# ============================================================================
# MEMBER READ SCHEMAS
# ============================================================================


class MemberResponse(CamelModel):
    id: uuid.UUID
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    address: Optional[Address] = None
    profile_photo: Optional[str] = None
    membership_status: MembershipStatus
    join_date: Optional[date] = None
    tags: list[str] = Field(default_factory=list)
    notes: Optional[str] = None
    gender: Optional[str] = None
    marital_status: Optional[str] = None
    is_active: bool = True
    emergency_contact: Optional[MemberEmergencyContactResponse] = None
    spiritual_journey: Optional[SpiritualJourneyResponse] = None
    preferences: Optional[MemberPreferencesResponse] = None
    group_memberships: list[GroupMembershipSummary] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    created_by: Optional[str] = None
    updated_by: Optional[str] = None


class MemberDetailResponse(MemberResponse):
    attendance: list[AttendanceSummary] = Field(default_factory=list)
    care_history: list[CareRecordSummary] = Field(default_factory=list)


class MemberFiltersEcho(CamelModel):
    query: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    membership_status: list[MembershipStatus] = Field(default_factory=list)
    age_min: Optional[int] = None
    age_max: Optional[int] = None
    join_start: Optional[date] = None
    join_end: Optional[date] = None
    sort_by: str
    sort_order: str
    limit: int
    offset: int


class MemberListResponse(CamelModel):
    members: list[MemberResponse]
    total: int
    limit: int
    offset: int
    filters: MemberFiltersEcho


class TagCount(CamelModel):
    name: str
    count: int


class MemberStatsResponse(CamelModel):
    total_members: int
    active_members: int
    new_members_this_month: int
    members_by_status: dict[str, int]
    top_tags: list[TagCount]


class DeleteResponse(CamelModel):
    success: bool = True
    message: str
