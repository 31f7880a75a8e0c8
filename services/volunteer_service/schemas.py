"""Pydantic schemas for the Volunteer Service."""

import uuid
from datetime import date, datetime
from typing import Any, Optional

from libs.common.schemas import CamelModel
from pydantic import EmailStr, Field, model_validator
from services.volunteer_service.models import (
    BackgroundCheckStatus,
    OpportunityStatus,
    SignupStatus,
    Urgency,
)


class MemberSummary(CamelModel):
    id: uuid.UUID
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None


class DeleteResponse(CamelModel):
    success: bool = True
    message: str


# ============================================================================
# VOLUNTEER SCHEMAS
# ============================================================================


class VolunteerCreate(CamelModel):
    member_id: uuid.UUID
    skills: list[str] = Field(default_factory=list)
    interests: list[str] = Field(default_factory=list)
    preferred_ministries: list[str] = Field(default_factory=list)
    availability: Optional[dict[str, Any]] = None
    max_hours_per_week: Optional[int] = Field(None, ge=0)
    transportation_available: bool = False
    willing_to_travel: bool = False
    background_check: BackgroundCheckStatus = BackgroundCheckStatus.NOT_REQUIRED
    emergency_contact: Optional[dict[str, Any]] = None
    notes: Optional[str] = None


class VolunteerUpdate(CamelModel):
    skills: Optional[list[str]] = None
    interests: Optional[list[str]] = None
    preferred_ministries: Optional[list[str]] = None
    availability: Optional[dict[str, Any]] = None
    max_hours_per_week: Optional[int] = Field(None, ge=0)
    transportation_available: Optional[bool] = None
    willing_to_travel: Optional[bool] = None
    background_check: Optional[BackgroundCheckStatus] = None
    emergency_contact: Optional[dict[str, Any]] = None
    notes: Optional[str] = None
    is_active: Optional[bool] = None


class VolunteerResponse(CamelModel):
    id: uuid.UUID
    member_id: uuid.UUID
    member: Optional[MemberSummary] = None
    skills: list[str] = Field(default_factory=list)
    interests: list[str] = Field(default_factory=list)
    preferred_ministries: list[str] = Field(default_factory=list)
    availability: Optional[dict[str, Any]] = None
    max_hours_per_week: Optional[int] = None
    transportation_available: bool
    willing_to_travel: bool
    background_check: BackgroundCheckStatus
    emergency_contact: Optional[dict[str, Any]] = None
    notes: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class VolunteerHourResponse(CamelModel):
    id: uuid.UUID
    volunteer_id: uuid.UUID
    opportunity_id: Optional[uuid.UUID] = None
    work_date: date = Field(alias="date")
    hours_worked: float
    description: Optional[str] = None
    category: Optional[str] = None
    ministry: Optional[str] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    is_verified: bool
    created_at: datetime


class VolunteerDetailResponse(VolunteerResponse):
    total_hours: float = 0.0
    recent_hours: list[VolunteerHourResponse] = Field(default_factory=list)


class VolunteerListResponse(CamelModel):
    volunteers: list[VolunteerResponse]
    total: int
    limit: int
    offset: int


class SkillCount(CamelModel):
    skill: str
    count: int


class VolunteerStatsResponse(CamelModel):
    total_volunteers: int
    active_volunteers: int
    total_hours: float
    total_opportunities: int
    active_opportunities: int
    top_skills: list[SkillCount]


# ============================================================================
# HOURS SCHEMAS
# ============================================================================


class VolunteerHourCreate(CamelModel):
    opportunity_id: Optional[uuid.UUID] = None
    work_date: date = Field(..., alias="date")
    hours_worked: float = Field(..., gt=0, le=24)
    description: Optional[str] = None
    category: Optional[str] = None
    ministry: Optional[str] = None
    location: Optional[str] = None
    notes: Optional[str] = None


class VolunteerHourListResponse(CamelModel):
    hours: list[VolunteerHourResponse]
    total_hours: float
    total: int
    limit: int
    offset: int


# ============================================================================
# OPPORTUNITY SCHEMAS
# ============================================================================


class OpportunityBase(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    ministry: str = Field(..., min_length=1, max_length=100)
    location: Optional[str] = None
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = None
    skills_required: list[str] = Field(default_factory=list)
    min_age: Optional[int] = Field(None, ge=0)
    max_age: Optional[int] = Field(None, ge=0)
    background_check_required: bool = False
    training_required: list[str] = Field(default_factory=list)
    start_date: datetime
    end_date: Optional[datetime] = None
    is_recurring: bool = False
    recurring_schedule: Optional[str] = None
    estimated_hours: Optional[float] = Field(None, ge=0)
    max_volunteers: Optional[int] = Field(None, ge=1)
    current_volunteers: int = Field(0, ge=0)
    urgency: Urgency = Urgency.NORMAL
    status: OpportunityStatus = OpportunityStatus.OPEN
    coordinator_id: uuid.UUID
    is_active: bool = True


class OpportunityCreate(OpportunityBase):
    @model_validator(mode="after")
    def check_ranges(self):
        if (
            self.min_age is not None
            and self.max_age is not None
            and self.min_age > self.max_age
        ):
            raise ValueError("minAge must not be greater than maxAge")
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        return self


class OpportunityUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    ministry: Optional[str] = Field(None, min_length=1, max_length=100)
    location: Optional[str] = None
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = None
    skills_required: Optional[list[str]] = None
    min_age: Optional[int] = Field(None, ge=0)
    max_age: Optional[int] = Field(None, ge=0)
    background_check_required: Optional[bool] = None
    training_required: Optional[list[str]] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_recurring: Optional[bool] = None
    recurring_schedule: Optional[str] = None
    estimated_hours: Optional[float] = Field(None, ge=0)
    max_volunteers: Optional[int] = Field(None, ge=1)
    current_volunteers: Optional[int] = Field(None, ge=0)
    urgency: Optional[Urgency] = None
    status: Optional[OpportunityStatus] = None
    coordinator_id: Optional[uuid.UUID] = None
    is_active: Optional[bool] = None


class OpportunityResponse(OpportunityBase):
    id: uuid.UUID
    contact_email: Optional[str] = None
    coordinator: Optional[MemberSummary] = None
    signup_count: int = 0
    created_at: datetime
    updated_at: datetime


class OpportunityDetailResponse(OpportunityResponse):
    signups: list["SignupResponse"] = Field(default_factory=list)


class OpportunityMatchResponse(OpportunityResponse):
    match_score: int = 0
    matching_skills: list[str] = Field(default_factory=list)
    matching_ministries: list[str] = Field(default_factory=list)


class OpportunityListResponse(CamelModel):
    opportunities: list[OpportunityResponse]
    total: int
    limit: int
    offset: int


class OpportunitySearchResponse(CamelModel):
    opportunities: list[OpportunityMatchResponse]
    total: int


class MinistryCount(CamelModel):
    ministry: str
    count: int


class StatusCount(CamelModel):
    status: OpportunityStatus
    count: int


class OpportunityStatsResponse(CamelModel):
    total_opportunities: int
    active_opportunities: int
    open_opportunities: int
    urgent_opportunities: int
    ministry_breakdown: list[MinistryCount]
    status_breakdown: list[StatusCount]


# ============================================================================
# SIGNUP SCHEMAS
# ============================================================================


class SignupCreate(CamelModel):
    volunteer_id: uuid.UUID
    message: Optional[str] = None
    special_requests: Optional[str] = None
    scheduled_date: Optional[date] = None
    estimated_hours: Optional[float] = Field(None, ge=0)


class SignupUpdate(CamelModel):
    status: SignupStatus
    confirmed_by: Optional[str] = None
    declined_reason: Optional[str] = None
    actual_hours: Optional[float] = Field(None, ge=0)
    feedback: Optional[str] = None
    rating: Optional[int] = Field(None, ge=1, le=5)


class SignupResponse(CamelModel):
    id: uuid.UUID
    volunteer_id: uuid.UUID
    opportunity_id: uuid.UUID
    status: SignupStatus
    message: Optional[str] = None
    special_requests: Optional[str] = None
    scheduled_date: Optional[date] = None
    estimated_hours: Optional[float] = None
    confirmed_at: Optional[datetime] = None
    confirmed_by: Optional[str] = None
    declined_at: Optional[datetime] = None
    declined_reason: Optional[str] = None
    completed_at: Optional[datetime] = None
    actual_hours: Optional[float] = None
    feedback: Optional[str] = None
    rating: Optional[int] = None
    created_at: datetime


class SignupCreateResponse(CamelModel):
    signup: SignupResponse
    message: Optional[str] = None


class SignupListResponse(CamelModel):
    signups: list[SignupResponse]
    total: int


OpportunityDetailResponse.model_rebuild()
