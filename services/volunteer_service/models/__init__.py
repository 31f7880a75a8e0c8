"""Volunteer Service models package."""

from services.volunteer_service.models.core import (
    Volunteer,
    VolunteerHour,
    VolunteerOpportunity,
    VolunteerSignup,
    members_table,
)
from services.volunteer_service.models.enums import (
    SEATED_STATUSES,
    URGENCY_RANK,
    BackgroundCheckStatus,
    OpportunityStatus,
    SignupStatus,
    Urgency,
)

__all__ = [
    "BackgroundCheckStatus",
    "OpportunityStatus",
    "SEATED_STATUSES",
    "SignupStatus",
    "URGENCY_RANK",
    "Urgency",
    "Volunteer",
    "VolunteerHour",
    "VolunteerOpportunity",
    "VolunteerSignup",
    "members_table",
]
