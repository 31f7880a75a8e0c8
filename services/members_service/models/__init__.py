"""Members Service models package.

Re-exports all models and enums so that:
  - ``from services.members_service.models import Member`` works
  - Alembic env.py sees every table on a single import
  - SQLAlchemy's mapper registry sees every model class on import

Model definitions are split across:
  - models/member.py  : Member, owned sub-records, and tags
  - models/group.py   : Groups and group memberships
  - models/activity.py: Events, attendance, and pastoral care history
"""

from services.members_service.models.activity import (  # noqa: F401
    Attendance,
    CareRecord,
    Event,
)
from services.members_service.models.enums import (  # noqa: F401
    CareType,
    CommunicationMethod,
    GroupRole,
    MembershipStatus,
    PrivacyLevel,
    TagCategory,
)
from services.members_service.models.group import Group, GroupMembership  # noqa: F401
from services.members_service.models.member import (  # noqa: F401
    Member,
    MemberEmergencyContact,
    MemberPreferences,
    MemberTag,
    SpiritualJourney,
    Tag,
)

__all__ = [
    "Attendance",
    "CareRecord",
    "CareType",
    "CommunicationMethod",
    "Event",
    "Group",
    "GroupMembership",
    "GroupRole",
    "Member",
    "MemberEmergencyContact",
    "MemberPreferences",
    "MemberTag",
    "MembershipStatus",
    "PrivacyLevel",
    "SpiritualJourney",
    "Tag",
    "TagCategory",
]
