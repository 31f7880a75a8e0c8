"""Events router - services and gatherings that attendance is recorded against."""

import uuid
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from libs.common.datetime_utils import get_now
from libs.common.logging import get_logger
from libs.common.pagination import DEFAULT_LIMIT, MAX_LIMIT, paginate
from libs.db.session import get_async_db
from services.members_service.models import Attendance, Event
from services.members_service.schemas import (
    DeleteResponse,
    EventCreate,
    EventListResponse,
    EventResponse,
    EventStatsResponse,
    EventUpdate,
)
from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)
router = APIRouter(prefix="/events", tags=["events"])

NEXT_EVENTS_LIMIT = 5


def _day_start(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


async def _get_event_or_404(db: AsyncSession, event_id: uuid.UUID) -> Event:
    event = await db.get(Event, event_id)
    if not event:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Event not found",
        )
    return event


async def _attendance_counts(
    db: AsyncSession, event_ids: list[uuid.UUID]
) -> dict[uuid.UUID, int]:
    if not event_ids:
        return {}
    result = await db.execute(
        select(Attendance.event_id, func.count(Attendance.id))
        .where(Attendance.event_id.in_(event_ids), Attendance.attended.is_(True))
        .group_by(Attendance.event_id)
    )
    return dict(result.all())


async def event_responses(db: AsyncSession, events: list[Event]) -> list[EventResponse]:
    counts = await _attendance_counts(db, [e.id for e in events])
    responses = []
    for event in events:
        item = EventResponse.model_validate(event)
        item.attendance_count = counts.get(event.id, 0)
        responses.append(item)
    return responses


@router.get("/", response_model=EventListResponse)
async def list_events(
    search: Optional[str] = None,
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_async_db),
):
    """List events, most recent first. The date range is inclusive."""
    query = select(Event)
    term = (search or "").strip()
    if term:
        query = query.where(
            or_(
                Event.name.icontains(term, autoescape=True),
                Event.location.icontains(term, autoescape=True),
            )
        )
    if start_date is not None:
        query = query.where(Event.start_date >= _day_start(start_date))
    if end_date is not None:
        query = query.where(Event.start_date < _day_start(end_date + timedelta(days=1)))

    page = await paginate(
        db,
        query,
        order_by=[Event.start_date.desc().nulls_last()],
        tiebreaker=Event.id,
        limit=limit,
        offset=offset,
    )
    return EventListResponse(
        events=await event_responses(db, page.items),
        total=page.total,
        limit=page.limit,
        offset=page.offset,
    )


@router.get("/stats", response_model=EventStatsResponse)
async def event_stats(
    now: datetime = Depends(get_now),
    db: AsyncSession = Depends(get_async_db),
):
    total = (await db.execute(select(func.count(Event.id)))).scalar() or 0
    upcoming = (
        await db.execute(select(func.count(Event.id)).where(Event.start_date >= now))
    ).scalar() or 0
    past = (
        await db.execute(select(func.count(Event.id)).where(Event.start_date < now))
    ).scalar() or 0
    next_events = (
        await db.execute(
            select(Event)
            .where(Event.start_date >= now)
            .order_by(Event.start_date.asc(), Event.id)
            .limit(NEXT_EVENTS_LIMIT)
        )
    ).scalars().all()
    return EventStatsResponse(
        total_events=total,
        upcoming_events=upcoming,
        past_events=past,
        next_events=await event_responses(db, list(next_events)),
    )


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(
    event_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_db),
):
    event = await _get_event_or_404(db, event_id)
    return (await event_responses(db, [event]))[0]


@router.post("/", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    event_in: EventCreate,
    db: AsyncSession = Depends(get_async_db),
):
    event = Event(**event_in.model_dump())
    db.add(event)
    await db.commit()
    await db.refresh(event)
    logger.info("Created event %s (%s)", event.id, event.name)
    return EventResponse.model_validate(event)


@router.put("/{event_id}", response_model=EventResponse)
@router.patch("/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: uuid.UUID,
    event_in: EventUpdate,
    db: AsyncSession = Depends(get_async_db),
):
    event = await _get_event_or_404(db, event_id)
    for field, value in event_in.model_dump(exclude_unset=True).items():
        if field == "name" and not (value or "").strip():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="name: must not be blank",
            )
        setattr(event, field, value.strip() if field == "name" else value)
    await db.commit()
    await db.refresh(event)
    return (await event_responses(db, [event]))[0]


@router.delete("/{event_id}", response_model=DeleteResponse)
async def delete_event(
    event_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_db),
):
    """Delete an event together with its attendance records."""
    await _get_event_or_404(db, event_id)
    try:
        await db.execute(delete(Attendance).where(Attendance.event_id == event_id))
        await db.execute(delete(Event).where(Event.id == event_id))
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Failed to delete event %s", event_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete event",
        )
    return DeleteResponse(success=True, message="Event deleted successfully")
