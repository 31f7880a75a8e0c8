"""Attendance and pastoral-care history recorded against members."""

import uuid
from datetime import date, datetime
from typing import TYPE_CHECKING, Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from sqlalchemy import Boolean, Date, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .enums import CareType, enum_values

if TYPE_CHECKING:
    from .member import Member


class Event(Base):
    __tablename__ = "events"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    start_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    location: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)

    def __repr__(self):
        return f"<Event {self.name}>"


class Attendance(Base):
    """Whether a member attended an event on a given date."""

    __tablename__ = "attendance"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    member_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("members.id", ondelete="CASCADE"), index=True, nullable=False
    )
    event_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("events.id", ondelete="CASCADE"), index=True, nullable=False
    )
    attendance_date: Mapped[date] = mapped_column("date", Date, nullable=False)
    attended: Mapped[bool] = mapped_column(Boolean, default=True)

    event: Mapped["Event"] = relationship("Event", lazy="selectin")
    member: Mapped["Member"] = relationship("Member", back_populates="attendance")

    def __repr__(self):
        return f"<Attendance member={self.member_id} event={self.event_id}>"


class CareRecord(Base):
    """A pastoral care contact (visit, call, prayer, ...)."""

    __tablename__ = "care_history"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    member_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("members.id", ondelete="CASCADE"), index=True, nullable=False
    )
    care_date: Mapped[date] = mapped_column("date", Date, nullable=False)
    care_type: Mapped[CareType] = mapped_column(
        SAEnum(
            CareType,
            name="care_type",
            values_callable=enum_values,
            native_enum=False,
            length=20,
        ),
        default=CareType.OTHER,
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    care_giver: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)

    member: Mapped["Member"] = relationship("Member", back_populates="care_history")

    def __repr__(self):
        return f"<CareRecord member={self.member_id} type={self.care_type}>"
