"""Volunteer Service business logic package."""

from services.volunteer_service.services.matching import (
    match_profile,
    match_volunteer_to_opportunity,
    skills_match,
)
from services.volunteer_service.services.signups import (
    create_signup,
    update_signup_status,
)

__all__ = [
    "create_signup",
    "match_profile",
    "match_volunteer_to_opportunity",
    "skills_match",
    "update_signup_status",
]
