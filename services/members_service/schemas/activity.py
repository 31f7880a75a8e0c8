"""Schemas for events, attendance records and pastoral care records."""

import uuid
from datetime import date, datetime
from typing import Optional

from libs.common.schemas import CamelModel
from pydantic import Field, field_validator
from services.members_service.models.enums import CareType


class MemberBrief(CamelModel):
    id: uuid.UUID
    first_name: str
    last_name: str


# ============================================================================
# EVENTS
# ============================================================================


class EventCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    start_date: Optional[datetime] = None
    location: Optional[str] = Field(None, max_length=200)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class EventUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    start_date: Optional[datetime] = None
    location: Optional[str] = Field(None, max_length=200)


class EventResponse(CamelModel):
    id: uuid.UUID
    name: str
    start_date: Optional[datetime] = None
    location: Optional[str] = None
    attendance_count: int = 0
    created_at: Optional[datetime] = None


class EventListResponse(CamelModel):
    events: list[EventResponse]
    total: int
    limit: int
    offset: int


class EventStatsResponse(CamelModel):
    total_events: int
    upcoming_events: int
    past_events: int
    next_events: list[EventResponse]


# ============================================================================
# ATTENDANCE
# ============================================================================


class AttendanceRecordCreate(CamelModel):
    """One check-in. ``date`` defaults to the event's day, else today."""

    event_id: uuid.UUID
    member_id: uuid.UUID
    attendance_date: Optional[date] = Field(None, alias="date")
    attended: bool = True


class BulkAttendanceEntry(CamelModel):
    member_id: uuid.UUID
    attended: bool = True


class BulkAttendanceCreate(CamelModel):
    event_id: uuid.UUID
    attendance_date: Optional[date] = Field(None, alias="date")
    attendances: list[BulkAttendanceEntry] = Field(..., min_length=1)


class AttendanceRecordResponse(CamelModel):
    id: uuid.UUID
    event_id: uuid.UUID
    event_name: str
    member_id: uuid.UUID
    member: Optional[MemberBrief] = None
    attendance_date: date = Field(alias="date")
    attended: bool


class AttendanceListResponse(CamelModel):
    attendances: list[AttendanceRecordResponse]
    total: int
    limit: int
    offset: int


class BulkAttendanceResponse(CamelModel):
    attendances: list[AttendanceRecordResponse]


class AttendanceStatsResponse(CamelModel):
    total_records: int
    present: int
    absent: int
    attendance_rate: int


# ============================================================================
# PASTORAL CARE
# ============================================================================


class CareRecordCreate(CamelModel):
    member_id: uuid.UUID
    care_type: CareType = Field(CareType.OTHER, alias="type")
    care_date: Optional[date] = Field(None, alias="date")
    notes: Optional[str] = None
    care_giver: Optional[str] = Field(None, max_length=200)


class CareRecordUpdate(CamelModel):
    """Partial update. Only the fields present in the request are applied."""

    care_type: Optional[CareType] = Field(None, alias="type")
    care_date: Optional[date] = Field(None, alias="date")
    notes: Optional[str] = None
    care_giver: Optional[str] = Field(None, max_length=200)


class CareRecordResponse(CamelModel):
    id: uuid.UUID
    member_id: uuid.UUID
    member: Optional[MemberBrief] = None
    care_type: CareType = Field(alias="type")
    care_date: date = Field(alias="date")
    notes: Optional[str] = None
    care_giver: Optional[str] = None
    created_at: Optional[datetime] = None


class CareListResponse(CamelModel):
    care_records: list[CareRecordResponse]
    total: int
    limit: int
    offset: int


class CareStatsResponse(CamelModel):
    total_records: int
    by_type: dict[str, int]
    recent: list[CareRecordResponse]
