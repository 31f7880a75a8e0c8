"""Attendance router - check-ins of members at events."""

import uuid
from datetime import date
from typing import Optional, Sequence

from fastapi import APIRouter, Depends, HTTPException, Query, status
from libs.common.datetime_utils import get_today
from libs.common.logging import get_logger
from libs.common.pagination import DEFAULT_LIMIT, MAX_LIMIT, paginate
from libs.db.session import get_async_db
from services.members_service.models import Attendance, Event, Member
from services.members_service.routers._helpers import ensure_member_exists, member_briefs
from services.members_service.schemas import (
    AttendanceListResponse,
    AttendanceRecordCreate,
    AttendanceRecordResponse,
    AttendanceStatsResponse,
    BulkAttendanceCreate,
    BulkAttendanceResponse,
)
from sqlalchemy import case, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)
router = APIRouter(prefix="/attendance", tags=["attendance"])


async def _get_event_or_404(db: AsyncSession, event_id: uuid.UUID) -> Event:
    event = await db.get(Event, event_id)
    if not event:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Event not found",
        )
    return event


def _record_day(event: Event, requested: Optional[date], today: date) -> date:
    if requested is not None:
        return requested
    if event.start_date is not None:
        return event.start_date.date()
    return today


async def _upsert(
    db: AsyncSession, event: Event, member_id: uuid.UUID, day: date, attended: bool
) -> Attendance:
    """One record per member, event and day. A repeat check-in overwrites it."""
    result = await db.execute(
        select(Attendance).where(
            Attendance.event_id == event.id,
            Attendance.member_id == member_id,
            Attendance.attendance_date == day,
        )
    )
    record = result.scalar_one_or_none()
    if record is None:
        record = Attendance(
            event_id=event.id, member_id=member_id, attendance_date=day, attended=attended
        )
        db.add(record)
    else:
        record.attended = attended
    return record


async def attendance_responses(
    db: AsyncSession, records: Sequence[Attendance]
) -> list[AttendanceRecordResponse]:
    members = await member_briefs(db, [r.member_id for r in records])
    return [
        AttendanceRecordResponse.model_validate(
            {
                "id": record.id,
                "event_id": record.event_id,
                "event_name": record.event.name if record.event else "",
                "member_id": record.member_id,
                "member": members.get(record.member_id),
                "attendance_date": record.attendance_date,
                "attended": record.attended,
            }
        )
        for record in records
    ]


async def _reload(db: AsyncSession, ids: list[uuid.UUID]) -> list[Attendance]:
    result = await db.execute(
        select(Attendance)
        .where(Attendance.id.in_(ids))
        .execution_options(populate_existing=True)
    )
    by_id = {record.id: record for record in result.scalars().all()}
    return [by_id[i] for i in ids]


@router.post("/record", response_model=AttendanceRecordResponse)
async def record_attendance(
    body: AttendanceRecordCreate,
    today: date = Depends(get_today),
    db: AsyncSession = Depends(get_async_db),
):
    event = await _get_event_or_404(db, body.event_id)
    await ensure_member_exists(db, body.member_id)

    day = _record_day(event, body.attendance_date, today)
    try:
        record = await _upsert(db, event, body.member_id, day, body.attended)
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Failed to record attendance for member %s", body.member_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to record attendance",
        )

    records = await _reload(db, [record.id])
    return (await attendance_responses(db, records))[0]


@router.post("/bulk", response_model=BulkAttendanceResponse)
async def record_bulk_attendance(
    body: BulkAttendanceCreate,
    today: date = Depends(get_today),
    db: AsyncSession = Depends(get_async_db),
):
    """Record a whole roll call for one event. Nothing is saved if any member is unknown."""
    event = await _get_event_or_404(db, body.event_id)

    member_ids = {entry.member_id for entry in body.attendances}
    result = await db.execute(select(Member.id).where(Member.id.in_(member_ids)))
    missing = member_ids - {row.id for row in result.all()}
    if missing:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Member not found: {', '.join(sorted(str(m) for m in missing))}",
        )

    day = _record_day(event, body.attendance_date, today)
    try:
        records = []
        for entry in body.attendances:
            record = await _upsert(db, event, entry.member_id, day, entry.attended)
            await db.flush()
            records.append(record)
        ids = list(dict.fromkeys(record.id for record in records))
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Failed to record bulk attendance for event %s", event.id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to record bulk attendance",
        )

    logger.info("Recorded %d attendance entries for event %s", len(ids), event.id)
    return BulkAttendanceResponse(
        attendances=await attendance_responses(db, await _reload(db, ids))
    )


@router.get("/stats", response_model=AttendanceStatsResponse)
async def attendance_stats(
    event_id: Optional[uuid.UUID] = Query(None, alias="eventId"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    db: AsyncSession = Depends(get_async_db),
):
    """Present/absent totals, optionally for one event and an inclusive date range."""
    present_count = func.sum(case((Attendance.attended.is_(True), 1), else_=0))
    query = select(func.count(Attendance.id), present_count)
    if event_id is not None:
        query = query.where(Attendance.event_id == event_id)
    if start_date is not None:
        query = query.where(Attendance.attendance_date >= start_date)
    if end_date is not None:
        query = query.where(Attendance.attendance_date <= end_date)

    total, present = (await db.execute(query)).one()
    total = total or 0
    present = present or 0
    return AttendanceStatsResponse(
        total_records=total,
        present=present,
        absent=total - present,
        attendance_rate=round(present * 100 / total) if total else 0,
    )


@router.get("/member/{member_id}", response_model=AttendanceListResponse)
async def member_attendance(
    member_id: uuid.UUID,
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_async_db),
):
    """A member's attendance, newest first."""
    await ensure_member_exists(db, member_id)
    page = await paginate(
        db,
        select(Attendance).where(Attendance.member_id == member_id),
        order_by=[Attendance.attendance_date.desc()],
        tiebreaker=Attendance.id,
        limit=limit,
        offset=offset,
    )
    return AttendanceListResponse(
        attendances=await attendance_responses(db, page.items),
        total=page.total,
        limit=page.limit,
        offset=page.offset,
    )
