"""Query helpers shared by the volunteer and opportunity routers."""

import json
import uuid
from typing import Iterable

from services.volunteer_service.models import URGENCY_RANK, VolunteerOpportunity, members_table
from sqlalchemy import String, case, cast, false, or_, select
from sqlalchemy.ext.asyncio import AsyncSession


async def member_exists(db: AsyncSession, member_id: uuid.UUID) -> bool:
    result = await db.execute(
        select(members_table.c.id).where(members_table.c.id == member_id)
    )
    return result.first() is not None


async def fetch_member_summaries(
    db: AsyncSession, member_ids: Iterable[uuid.UUID]
) -> dict[uuid.UUID, dict]:
    """Batch-load name/email/phone for the given members, keyed by id."""
    ids = list(set(member_ids))
    if not ids:
        return {}
    result = await db.execute(select(members_table).where(members_table.c.id.in_(ids)))
    return {row.id: dict(row._mapping) for row in result.all()}


def member_ids_matching(term: str):
    """Subquery of member ids whose name or email contains ``term``."""
    return select(members_table.c.id).where(
        or_(
            members_table.c.first_name.icontains(term, autoescape=True),
            members_table.c.last_name.icontains(term, autoescape=True),
            members_table.c.email.icontains(term, autoescape=True),
        )
    )


def json_list_contains_any(column, values: Iterable[str]):
    """True when the JSON string-list ``column`` holds any of ``values`` exactly.

    Matches on the serialized element (``"value"`` with quotes), which works the
    same on PostgreSQL and SQLite.
    """
    clauses = [
        cast(column, String).contains(json.dumps(value), autoescape=True)
        for value in values
    ]
    return or_(*clauses) if clauses else false()


def urgency_rank():
    """Sortable integer rank for ``VolunteerOpportunity.urgency``."""
    return case(
        {urgency: rank for urgency, rank in URGENCY_RANK.items()},
        value=VolunteerOpportunity.urgency,
        else_=0,
    )
