"""Small groups and their member links."""

import uuid
from datetime import date, datetime
from typing import TYPE_CHECKING, Optional

from libs.common.datetime_utils import utc_now, utc_today
from libs.db.base import Base
from sqlalchemy import Boolean, Date, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .enums import GroupRole, enum_values

if TYPE_CHECKING:
    from .member import Member


class Group(Base):
    """A ministry or small group members can join."""

    __tablename__ = "groups"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    group_type: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    memberships: Mapped[list["GroupMembership"]] = relationship(
        "GroupMembership", back_populates="group", lazy="raise"
    )

    def __repr__(self):
        return f"<Group {self.name}>"


class GroupMembership(Base):
    """Association between a group and a member, with the member's role."""

    __tablename__ = "group_memberships"
    __table_args__ = (
        UniqueConstraint("group_id", "member_id", name="uq_group_membership"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    group_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("groups.id", ondelete="CASCADE"), index=True, nullable=False
    )
    member_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("members.id", ondelete="CASCADE"), index=True, nullable=False
    )
    role: Mapped[GroupRole] = mapped_column(
        SAEnum(
            GroupRole,
            name="group_role",
            values_callable=enum_values,
            native_enum=False,
            length=20,
        ),
        default=GroupRole.MEMBER,
    )
    join_date: Mapped[date] = mapped_column(Date, default=utc_today)

    group: Mapped["Group"] = relationship(
        "Group", back_populates="memberships", lazy="selectin"
    )
    member: Mapped["Member"] = relationship("Member", back_populates="group_memberships")

    def __repr__(self):
        return f"<GroupMembership group={self.group_id} member={self.member_id}>"
