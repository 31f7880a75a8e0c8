"""Core member models: identity, owned sub-records, and tags."""

import uuid
from datetime import date, datetime
from typing import TYPE_CHECKING, Optional

from libs.common.datetime_utils import utc_now, utc_today
from libs.db.base import Base
from sqlalchemy import Boolean, Date, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .enums import (
    CommunicationMethod,
    MembershipStatus,
    PrivacyLevel,
    TagCategory,
    enum_values,
)

if TYPE_CHECKING:
    from .activity import Attendance, CareRecord
    from .group import GroupMembership


class Member(Base):
    """Core member identity and lifecycle status.

    ``address`` holds a serialized JSON object; read and write it through
    ``services.members_service.services.transform``.
    """

    __tablename__ = "members"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    # Demographics
    date_of_birth: Mapped[Optional[date]] = mapped_column(Date, nullable=True, index=True)
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    gender: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    marital_status: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    profile_photo: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Lifecycle
    membership_status: Mapped[MembershipStatus] = mapped_column(
        SAEnum(
            MembershipStatus,
            name="membership_status",
            values_callable=enum_values,
            native_enum=False,
            length=20,
        ),
        default=MembershipStatus.PENDING,
        nullable=False,
        index=True,
    )
    join_date: Mapped[date] = mapped_column(Date, default=utc_today, nullable=False, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    # Audit
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )
    created_by: Mapped[str] = mapped_column(String(255), default="system")
    updated_by: Mapped[str] = mapped_column(String(255), default="system")

    # Relationships
    tags: Mapped[list["Tag"]] = relationship(
        "Tag",
        secondary="member_tags",
        lazy="selectin",
        viewonly=True,
        order_by="Tag.name",
    )
    emergency_contact: Mapped[Optional["MemberEmergencyContact"]] = relationship(
        "MemberEmergencyContact", back_populates="member", uselist=False, lazy="selectin"
    )
    preferences: Mapped[Optional["MemberPreferences"]] = relationship(
        "MemberPreferences", back_populates="member", uselist=False, lazy="selectin"
    )
    spiritual_journey: Mapped[Optional["SpiritualJourney"]] = relationship(
        "SpiritualJourney", back_populates="member", uselist=False, lazy="selectin"
    )
    group_memberships: Mapped[list["GroupMembership"]] = relationship(
        "GroupMembership", back_populates="member", lazy="selectin"
    )
    attendance: Mapped[list["Attendance"]] = relationship(
        "Attendance", back_populates="member", lazy="raise"
    )
    care_history: Mapped[list["CareRecord"]] = relationship(
        "CareRecord", back_populates="member", lazy="raise"
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self):
        return f"<Member {self.email}>"


class MemberEmergencyContact(Base):
    """Emergency contact, one per member."""

    __tablename__ = "member_emergency_contacts"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    member_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("members.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )

    name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    contact_relationship: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    member: Mapped["Member"] = relationship("Member", back_populates="emergency_contact")

    def __repr__(self):
        return f"<MemberEmergencyContact member_id={self.member_id}>"


class MemberPreferences(Base):
    """Communication and privacy preferences, one per member."""

    __tablename__ = "member_preferences"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    member_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("members.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )

    communication_method: Mapped[CommunicationMethod] = mapped_column(
        SAEnum(
            CommunicationMethod,
            name="communication_method",
            values_callable=enum_values,
            native_enum=False,
            length=20,
        ),
        default=CommunicationMethod.EMAIL,
    )
    newsletter: Mapped[bool] = mapped_column(Boolean, default=True)
    event_notifications: Mapped[bool] = mapped_column(Boolean, default=True)
    privacy_level: Mapped[PrivacyLevel] = mapped_column(
        SAEnum(
            PrivacyLevel,
            name="privacy_level",
            values_callable=enum_values,
            native_enum=False,
            length=20,
        ),
        default=PrivacyLevel.MEMBERS,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    member: Mapped["Member"] = relationship("Member", back_populates="preferences")

    def __repr__(self):
        return f"<MemberPreferences member_id={self.member_id}>"


class SpiritualJourney(Base):
    """Spiritual-journey milestones, one per member."""

    __tablename__ = "spiritual_journeys"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    member_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("members.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )

    current_stage: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    salvation_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    baptism_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    member: Mapped["Member"] = relationship("Member", back_populates="spiritual_journey")

    def __repr__(self):
        return f"<SpiritualJourney member_id={self.member_id} stage={self.current_stage}>"


class Tag(Base):
    """Shared tag lookup. Tags are not owned by any single member."""

    __tablename__ = "tags"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), unique=True, index=True, nullable=False)
    description: Mapped[str] = mapped_column(String, default="")
    color: Mapped[str] = mapped_column(String(20), default="#3B82F6")
    category: Mapped[TagCategory] = mapped_column(
        SAEnum(
            TagCategory,
            name="tag_category",
            values_callable=enum_values,
            native_enum=False,
            length=20,
        ),
        default=TagCategory.OTHER,
    )
    is_system_tag: Mapped[bool] = mapped_column(Boolean, default=False)
    created_by: Mapped[str] = mapped_column(String(255), default="system")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)

    def __repr__(self):
        return f"<Tag {self.name}>"


class MemberTag(Base):
    """Link between a member and a shared tag."""

    __tablename__ = "member_tags"
    __table_args__ = (UniqueConstraint("member_id", "tag_id", name="uq_member_tag"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    member_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("members.id", ondelete="CASCADE"), index=True, nullable=False
    )
    tag_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("tags.id", ondelete="CASCADE"), index=True, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)

    def __repr__(self):
        return f"<MemberTag member_id={self.member_id} tag_id={self.tag_id}>"
