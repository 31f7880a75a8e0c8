"""Volunteer profiles, opportunities, signups and logged hours."""

import uuid
from datetime import date, datetime
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from sqlalchemy import JSON, Boolean, CheckConstraint, Date, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import Float, ForeignKey, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy import column, table
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .enums import (
    BackgroundCheckStatus,
    OpportunityStatus,
    SignupStatus,
    Urgency,
    enum_values,
)

# ============================================================================
# MEMBER REFERENCE (soft reference, no cross-service imports)
# ============================================================================

# Lightweight view of the shared members table. It is not registered on
# Base.metadata, so this service never creates or migrates it.
members_table = table(
    "members",
    column("id", Uuid),
    column("first_name", String),
    column("last_name", String),
    column("email", String),
    column("phone", String),
)


# ============================================================================
# MODELS
# ============================================================================


class Volunteer(Base):
    """Volunteer profile; one per member."""

    __tablename__ = "volunteers"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    member_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, unique=True, index=True, nullable=False
    )
    skills: Mapped[list] = mapped_column(JSON, default=list)
    interests: Mapped[list] = mapped_column(JSON, default=list)
    preferred_ministries: Mapped[list] = mapped_column(JSON, default=list)
    availability: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    max_hours_per_week: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    transportation_available: Mapped[bool] = mapped_column(Boolean, default=False)
    willing_to_travel: Mapped[bool] = mapped_column(Boolean, default=False)
    background_check: Mapped[BackgroundCheckStatus] = mapped_column(
        SAEnum(
            BackgroundCheckStatus,
            name="background_check_status",
            values_callable=enum_values,
            native_enum=False,
            length=20,
        ),
        default=BackgroundCheckStatus.NOT_REQUIRED,
    )
    emergency_contact: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    def __repr__(self) -> str:
        return f"<Volunteer member={self.member_id}>"


class VolunteerOpportunity(Base):
    """A posted volunteer need for one ministry."""

    __tablename__ = "volunteer_opportunities"
    __table_args__ = (
        CheckConstraint(
            "max_volunteers IS NULL OR current_volunteers <= max_volunteers",
            name="ck_opportunity_capacity",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    ministry: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    location: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    contact_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    contact_phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    skills_required: Mapped[list] = mapped_column(JSON, default=list)
    min_age: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    max_age: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    background_check_required: Mapped[bool] = mapped_column(Boolean, default=False)
    training_required: Mapped[list] = mapped_column(JSON, default=list)
    start_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
    end_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    is_recurring: Mapped[bool] = mapped_column(Boolean, default=False)
    recurring_schedule: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    estimated_hours: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    max_volunteers: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    current_volunteers: Mapped[int] = mapped_column(Integer, default=0)
    urgency: Mapped[Urgency] = mapped_column(
        SAEnum(
            Urgency,
            name="opportunity_urgency",
            values_callable=enum_values,
            native_enum=False,
            length=20,
        ),
        default=Urgency.NORMAL,
    )
    status: Mapped[OpportunityStatus] = mapped_column(
        SAEnum(
            OpportunityStatus,
            name="opportunity_status",
            values_callable=enum_values,
            native_enum=False,
            length=20,
        ),
        default=OpportunityStatus.OPEN,
        index=True,
    )
    coordinator_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    # Relationships
    signups: Mapped[list["VolunteerSignup"]] = relationship(
        back_populates="opportunity", cascade="all, delete-orphan", lazy="raise"
    )

    @property
    def has_capacity(self) -> bool:
        return self.max_volunteers is None or self.current_volunteers < self.max_volunteers

    def __repr__(self) -> str:
        return f"<VolunteerOpportunity {self.title} ({self.status})>"


class VolunteerSignup(Base):
    """A volunteer's request to serve on an opportunity."""

    __tablename__ = "volunteer_signups"
    __table_args__ = (
        UniqueConstraint(
            "volunteer_id", "opportunity_id", "scheduled_date", name="uq_volunteer_signup"
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    volunteer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("volunteers.id", ondelete="CASCADE"), index=True, nullable=False
    )
    opportunity_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("volunteer_opportunities.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    status: Mapped[SignupStatus] = mapped_column(
        SAEnum(
            SignupStatus,
            name="signup_status",
            values_callable=enum_values,
            native_enum=False,
            length=20,
        ),
        default=SignupStatus.PENDING,
    )
    message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    special_requests: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    scheduled_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    estimated_hours: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    confirmed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    confirmed_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    declined_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    declined_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    completed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    actual_hours: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    feedback: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    rating: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    # Relationships
    opportunity: Mapped["VolunteerOpportunity"] = relationship(back_populates="signups")

    def __repr__(self) -> str:
        return f"<VolunteerSignup volunteer={self.volunteer_id} status={self.status}>"


class VolunteerHour(Base):
    """Hours a volunteer served, optionally against an opportunity."""

    __tablename__ = "volunteer_hours"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    volunteer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("volunteers.id", ondelete="CASCADE"), index=True, nullable=False
    )
    opportunity_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("volunteer_opportunities.id", ondelete="SET NULL"),
        nullable=True,
    )
    work_date: Mapped[date] = mapped_column("date", Date, nullable=False, index=True)
    hours_worked: Mapped[float] = mapped_column(Float, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    ministry: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    location: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )

    def __repr__(self) -> str:
        return f"<VolunteerHour volunteer={self.volunteer_id} hours={self.hours_worked}>"
