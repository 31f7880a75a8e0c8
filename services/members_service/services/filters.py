"""Member search filters.

``MemberFilter`` is parsed once at the HTTP boundary. ``build_member_query``
turns it into a ``MemberQuery``: a persistence-neutral predicate plus the
normalized sort and page window. Only ``apply_member_predicate`` knows about
SQLAlchemy.
"""

import enum
from dataclasses import dataclass
from datetime import date
from typing import Optional

from libs.common.datetime_utils import years_before
from libs.common.pagination import DEFAULT_LIMIT, MAX_LIMIT
from libs.common.schemas import CamelModel
from pydantic import Field, field_validator, model_validator
from services.members_service.models import Member, MemberTag, MembershipStatus, Tag
from sqlalchemy import Select, or_, select


class SortOrder(str, enum.Enum):
    ASC = "asc"
    DESC = "desc"


# Oldest age a search may ask for
MAX_AGE = 150

# Public sort key -> Member attribute name
SORTABLE_FIELDS = {
    "firstName": "first_name",
    "lastName": "last_name",
    "email": "email",
    "joinDate": "join_date",
    "dateOfBirth": "date_of_birth",
    "membershipStatus": "membership_status",
    "createdAt": "created_at",
}


class MemberFilter(CamelModel):
    query: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    membership_status: list[MembershipStatus] = Field(default_factory=list)
    age_min: Optional[int] = Field(None, ge=0, le=MAX_AGE)
    age_max: Optional[int] = Field(None, ge=0, le=MAX_AGE)
    join_start: Optional[date] = None
    join_end: Optional[date] = None
    sort_by: str = "firstName"
    sort_order: SortOrder = SortOrder.ASC
    limit: int = Field(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT)
    offset: int = Field(0, ge=0)

    @field_validator("query")
    @classmethod
    def blank_query_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None

    @field_validator("sort_by")
    @classmethod
    def known_sort_field(cls, v: str) -> str:
        if v not in SORTABLE_FIELDS:
            allowed = ", ".join(SORTABLE_FIELDS)
            raise ValueError(f"must be one of {allowed}")
        return v

    @model_validator(mode="after")
    def age_range_ordered(self):
        if (
            self.age_min is not None
            and self.age_max is not None
            and self.age_min > self.age_max
        ):
            raise ValueError("ageMin must not be greater than ageMax")
        return self


@dataclass(frozen=True)
class MemberPredicate:
    text: Optional[str] = None
    statuses: tuple[MembershipStatus, ...] = ()
    tag_names: tuple[str, ...] = ()
    born_on_or_before: Optional[date] = None
    born_on_or_after: Optional[date] = None
    joined_on_or_after: Optional[date] = None
    joined_on_or_before: Optional[date] = None


@dataclass(frozen=True)
class MemberQuery:
    predicate: MemberPredicate
    sort_field: str
    descending: bool
    limit: int
    offset: int


def max_birth_date_for_min_age(today: date, age_min: int) -> date:
    """Latest birth date of someone at least ``age_min`` years old today."""
    return years_before(today, age_min)


def min_birth_date_for_max_age(today: date, age_max: int) -> date:
    """Earliest birth date accepted for ``age_max``: today minus ``age_max`` years."""
    return years_before(today, age_max)


def build_member_query(filters: MemberFilter, today: date) -> MemberQuery:
    predicate = MemberPredicate(
        text=filters.query,
        statuses=tuple(dict.fromkeys(filters.membership_status)),
        tag_names=tuple(dict.fromkeys(filters.tags)),
        born_on_or_before=(
            max_birth_date_for_min_age(today, filters.age_min)
            if filters.age_min is not None
            else None
        ),
        born_on_or_after=(
            min_birth_date_for_max_age(today, filters.age_max)
            if filters.age_max is not None
            else None
        ),
        joined_on_or_after=filters.join_start,
        joined_on_or_before=filters.join_end,
    )
    return MemberQuery(
        predicate=predicate,
        sort_field=SORTABLE_FIELDS[filters.sort_by],
        descending=filters.sort_order == SortOrder.DESC,
        limit=filters.limit,
        offset=filters.offset,
    )


def apply_member_predicate(query: Select, predicate: MemberPredicate) -> Select:
    """Add the WHERE clauses for ``predicate`` to a select over ``Member``."""
    if predicate.text:
        term = predicate.text
        query = query.where(
            or_(
                Member.first_name.icontains(term, autoescape=True),
                Member.last_name.icontains(term, autoescape=True),
                Member.email.icontains(term, autoescape=True),
            )
        )
    if predicate.statuses:
        query = query.where(Member.membership_status.in_(predicate.statuses))
    if predicate.tag_names:
        tagged = (
            select(MemberTag.member_id)
            .join(Tag, Tag.id == MemberTag.tag_id)
            .where(Tag.name.in_(predicate.tag_names))
        )
        query = query.where(Member.id.in_(tagged))
    if predicate.born_on_or_before is not None:
        query = query.where(Member.date_of_birth <= predicate.born_on_or_before)
    if predicate.born_on_or_after is not None:
        query = query.where(Member.date_of_birth >= predicate.born_on_or_after)
    if predicate.joined_on_or_after is not None:
        query = query.where(Member.join_date >= predicate.joined_on_or_after)
    if predicate.joined_on_or_before is not None:
        query = query.where(Member.join_date <= predicate.joined_on_or_before)
    return query


def member_sort_column(member_query: MemberQuery):
    column = getattr(Member, member_query.sort_field)
    return column.desc() if member_query.descending else column.asc()
