"""Offset pagination with a stable sort order.

Every page query is ordered by the requested columns and then by a unique
tie-breaker (normally the primary key) so consecutive pages never repeat or
skip rows while the data is unchanged.
"""

from dataclasses import dataclass, field
from typing import Any, Generic, Sequence, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")

DEFAULT_LIMIT = 20
MAX_LIMIT = 100


@dataclass
class Page(Generic[T]):
    items: list[T] = field(default_factory=list)
    total: int = 0
    limit: int = DEFAULT_LIMIT
    offset: int = 0


async def count_rows(db: AsyncSession, query: Select) -> int:
    """Count rows matched by ``query`` ignoring ordering and pagination."""
    subquery = query.order_by(None).limit(None).offset(None).subquery()
    result = await db.execute(select(func.count()).select_from(subquery))
    return result.scalar_one()


async def paginate(
    db: AsyncSession,
    query: Select,
    *,
    order_by: Sequence[Any],
    tiebreaker: Any,
    limit: int = DEFAULT_LIMIT,
    offset: int = 0,
    options: Sequence[Any] = (),
) -> Page:
    """Execute ``query`` as one page plus the total match count."""
    total = await count_rows(db, query)

    page_query = (
        query.order_by(*order_by, tiebreaker).limit(limit).offset(offset)
    )
    if options:
        page_query = page_query.options(*options)

    result = await db.execute(page_query)
    items = list(result.scalars().unique().all())
    return Page(items=items, total=total, limit=limit, offset=offset)
