"""Volunteer/opportunity matching.

Pure functions over plain values so they can be used by both the search
endpoints and tests without a database.
"""

from typing import Iterable, Optional, TypedDict

SKILL_POINTS = 30
MINISTRY_POINTS = 40
BACKGROUND_CHECK_POINTS = 20
MAX_SCORE = 100

APPROVED = "approved"


class MatchResult(TypedDict):
    match_score: int
    matching_skills: list[str]
    matching_ministries: list[str]


def skills_match(volunteer_skill: str, required_skill: str) -> bool:
    """Case-insensitive substring match in either direction."""
    a = volunteer_skill.strip().lower()
    b = required_skill.strip().lower()
    if not a or not b:
        return False
    return a in b or b in a


def _distinct(values: Iterable[str]) -> list[str]:
    seen = set()
    result = []
    for value in values:
        key = value.strip().lower()
        if key and key not in seen:
            seen.add(key)
            result.append(value)
    return result


def match_volunteer_to_opportunity(
    skills: Optional[Iterable[str]],
    preferred_ministries: Optional[Iterable[str]],
    background_check: Optional[str],
    skills_required: Optional[Iterable[str]],
    ministry: Optional[str],
    background_check_required: bool = False,
) -> MatchResult:
    """Score how well a volunteer fits an opportunity, from 0 to 100.

    Each distinct volunteer skill matching any requirement is worth 30, a
    preferred ministry equal to the opportunity's ministry is worth 40, and
    an approved background check on an opportunity that requires one adds 20.
    """
    required = [s for s in (skills_required or []) if s and s.strip()]
    matching_skills = [
        skill
        for skill in _distinct(skills or [])
        if any(skills_match(skill, req) for req in required)
    ]

    target = (ministry or "").strip().lower()
    matching_ministries = [
        m for m in _distinct(preferred_ministries or []) if target and m.strip().lower() == target
    ]

    score = SKILL_POINTS * len(matching_skills) + MINISTRY_POINTS * len(
        matching_ministries
    )
    check = getattr(background_check, "value", background_check)
    if background_check_required and check == APPROVED:
        score += BACKGROUND_CHECK_POINTS

    return MatchResult(
        match_score=min(score, MAX_SCORE),
        matching_skills=matching_skills,
        matching_ministries=matching_ministries,
    )


def match_profile(volunteer, opportunity) -> MatchResult:
    """``match_volunteer_to_opportunity`` for ORM rows."""
    return match_volunteer_to_opportunity(
        skills=volunteer.skills,
        preferred_ministries=volunteer.preferred_ministries,
        background_check=volunteer.background_check,
        skills_required=opportunity.skills_required,
        ministry=opportunity.ministry,
        background_check_required=opportunity.background_check_required,
    )
