"""Shared helpers for the volunteer service routers."""

from typing import Iterable, Sequence

from services.volunteer_service.models import (
    URGENCY_RANK,
    Volunteer,
    VolunteerOpportunity,
    VolunteerSignup,
)
from services.volunteer_service.services.lookups import fetch_member_summaries
from services.volunteer_service.services.matching import MatchResult, match_profile
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession


async def opportunity_payloads(
    db: AsyncSession, opportunities: Sequence[VolunteerOpportunity]
) -> list[dict]:
    """Column values plus coordinator summary and signup count, in input order."""
    if not opportunities:
        return []
    ids = [opp.id for opp in opportunities]
    counts = dict(
        (
            await db.execute(
                select(VolunteerSignup.opportunity_id, func.count(VolunteerSignup.id))
                .where(VolunteerSignup.opportunity_id.in_(ids))
                .group_by(VolunteerSignup.opportunity_id)
            )
        ).all()
    )
    coordinators = await fetch_member_summaries(
        db, [opp.coordinator_id for opp in opportunities]
    )

    payloads = []
    for opp in opportunities:
        data = {c.key: getattr(opp, c.key) for c in opp.__table__.columns}
        data["coordinator"] = coordinators.get(opp.coordinator_id)
        data["signup_count"] = counts.get(opp.id, 0)
        payloads.append(data)
    return payloads


def rank_matches(
    volunteer: Volunteer, opportunities: Iterable[VolunteerOpportunity]
) -> list[tuple[VolunteerOpportunity, MatchResult]]:
    """Opportunities sharing a skill or ministry with the volunteer, best first.

    A background check alone never makes an opportunity a match.

    Ties go to the more urgent, then the earlier starting opportunity.
    """
    scored = []
    for opp in opportunities:
        match = match_profile(volunteer, opp)
        if match["matching_skills"] or match["matching_ministries"]:
            scored.append((opp, match))
    scored.sort(
        key=lambda pair: (
            -pair[1]["match_score"],
            -URGENCY_RANK[pair[0].urgency],
            pair[0].start_date,
            str(pair[0].id),
        )
    )
    return scored
