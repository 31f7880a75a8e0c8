"""Members Service schemas package.

Re-exports all schemas so router files use a single import namespace.

Schema files:
  - schemas/member.py  : member records and the member list/stats envelopes
  - schemas/group.py   : groups and group memberships
  - schemas/activity.py: events, attendance and pastoral care records
"""

from services.members_service.schemas.activity import (  # noqa: F401
    AttendanceListResponse,
    AttendanceRecordCreate,
    AttendanceRecordResponse,
    AttendanceStatsResponse,
    BulkAttendanceCreate,
    BulkAttendanceEntry,
    BulkAttendanceResponse,
    CareListResponse,
    CareRecordCreate,
    CareRecordResponse,
    CareRecordUpdate,
    CareStatsResponse,
    EventCreate,
    EventListResponse,
    EventResponse,
    EventStatsResponse,
    EventUpdate,
    MemberBrief,
)
from services.members_service.schemas.group import (  # noqa: F401
    GroupCreate,
    GroupListResponse,
    GroupMemberAdd,
    GroupMembershipResponse,
    GroupResponse,
)
from services.members_service.schemas.member import (  # noqa: F401
    Address,
    AttendanceSummary,
    CareRecordSummary,
    DeleteResponse,
    GroupMembershipSummary,
    MemberCreate,
    MemberDetailResponse,
    MemberEmergencyContactInput,
    MemberEmergencyContactResponse,
    MemberFiltersEcho,
    MemberListResponse,
    MemberPreferencesInput,
    MemberPreferencesResponse,
    MemberResponse,
    MemberStatsResponse,
    MemberUpdate,
    SpiritualJourneyInput,
    SpiritualJourneyResponse,
    TagCount,
)
