"""Pastoral care router - visits, calls, prayer and counseling records."""

import uuid
from datetime import date
from typing import Optional, Sequence

from fastapi import APIRouter, Depends, HTTPException, Query, status
from libs.auth.dependencies import get_optional_user
from libs.auth.models import AuthUser
from libs.common.datetime_utils import get_today
from libs.common.logging import get_logger
from libs.common.pagination import DEFAULT_LIMIT, MAX_LIMIT, paginate
from libs.db.session import get_async_db
from services.members_service.models import CareRecord, CareType
from services.members_service.routers._helpers import ensure_member_exists, member_briefs
from services.members_service.schemas import (
    CareListResponse,
    CareRecordCreate,
    CareRecordResponse,
    CareRecordUpdate,
    CareStatsResponse,
    DeleteResponse,
)
from sqlalchemy import Select, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)
router = APIRouter(prefix="/care", tags=["care"])

RECENT_CARE_LIMIT = 5

# Columns that cannot be cleared through an update
REQUIRED_CARE_FIELDS = {"care_type", "care_date"}


def _newest_first(query: Select) -> Select:
    return query.order_by(
        CareRecord.care_date.desc(), CareRecord.created_at.desc(), CareRecord.id
    )


async def _get_record_or_404(db: AsyncSession, record_id: uuid.UUID) -> CareRecord:
    record = await db.get(CareRecord, record_id)
    if not record:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Care record not found",
        )
    return record


async def care_responses(
    db: AsyncSession, records: Sequence[CareRecord]
) -> list[CareRecordResponse]:
    members = await member_briefs(db, [r.member_id for r in records])
    return [
        CareRecordResponse.model_validate(
            {
                "id": record.id,
                "member_id": record.member_id,
                "member": members.get(record.member_id),
                "care_type": record.care_type,
                "care_date": record.care_date,
                "notes": record.notes,
                "care_giver": record.care_giver,
                "created_at": record.created_at,
            }
        )
        for record in records
    ]


async def _care_page(
    db: AsyncSession, query: Select, limit: int, offset: int
) -> CareListResponse:
    page = await paginate(
        db,
        query,
        order_by=[CareRecord.care_date.desc(), CareRecord.created_at.desc()],
        tiebreaker=CareRecord.id,
        limit=limit,
        offset=offset,
    )
    return CareListResponse(
        care_records=await care_responses(db, page.items),
        total=page.total,
        limit=page.limit,
        offset=page.offset,
    )


@router.get("/", response_model=CareListResponse)
async def list_care_records(
    member_id: Optional[uuid.UUID] = Query(None, alias="memberId"),
    care_type: Optional[CareType] = Query(None, alias="type"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_async_db),
):
    """Care records newest first. The date range is inclusive."""
    query = select(CareRecord)
    if member_id is not None:
        query = query.where(CareRecord.member_id == member_id)
    if care_type is not None:
        query = query.where(CareRecord.care_type == care_type)
    if start_date is not None:
        query = query.where(CareRecord.care_date >= start_date)
    if end_date is not None:
        query = query.where(CareRecord.care_date <= end_date)
    return await _care_page(db, query, limit, offset)


@router.get("/stats", response_model=CareStatsResponse)
async def care_stats(db: AsyncSession = Depends(get_async_db)):
    total = (await db.execute(select(func.count(CareRecord.id)))).scalar() or 0

    by_type = {care_type.value: 0 for care_type in CareType}
    rows = await db.execute(
        select(CareRecord.care_type, func.count(CareRecord.id)).group_by(
            CareRecord.care_type
        )
    )
    for care_type, count in rows.all():
        by_type[getattr(care_type, "value", care_type)] = count

    recent = (
        await db.execute(_newest_first(select(CareRecord)).limit(RECENT_CARE_LIMIT))
    ).scalars().all()
    return CareStatsResponse(
        total_records=total,
        by_type=by_type,
        recent=await care_responses(db, recent),
    )


@router.get("/member/{member_id}", response_model=CareListResponse)
async def member_care_records(
    member_id: uuid.UUID,
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_async_db),
):
    await ensure_member_exists(db, member_id)
    query = select(CareRecord).where(CareRecord.member_id == member_id)
    return await _care_page(db, query, limit, offset)


@router.get("/{record_id}", response_model=CareRecordResponse)
async def get_care_record(
    record_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_db),
):
    record = await _get_record_or_404(db, record_id)
    return (await care_responses(db, [record]))[0]


@router.post("/", response_model=CareRecordResponse, status_code=status.HTTP_201_CREATED)
async def create_care_record(
    body: CareRecordCreate,
    current_user: Optional[AuthUser] = Depends(get_optional_user),
    today: date = Depends(get_today),
    db: AsyncSession = Depends(get_async_db),
):
    """Log a care contact. The care giver defaults to the signed-in caller."""
    await ensure_member_exists(db, body.member_id)

    record = CareRecord(
        member_id=body.member_id,
        care_type=body.care_type,
        care_date=body.care_date or today,
        notes=body.notes,
        care_giver=body.care_giver or (current_user.actor if current_user else None),
    )
    db.add(record)
    await db.commit()
    await db.refresh(record)
    logger.info("Logged %s care for member %s", record.care_type.value, record.member_id)
    return (await care_responses(db, [record]))[0]


@router.put("/{record_id}", response_model=CareRecordResponse)
@router.patch("/{record_id}", response_model=CareRecordResponse)
async def update_care_record(
    record_id: uuid.UUID,
    body: CareRecordUpdate,
    db: AsyncSession = Depends(get_async_db),
):
    record = await _get_record_or_404(db, record_id)
    for field, value in body.model_dump(exclude_unset=True).items():
        if value is None and field in REQUIRED_CARE_FIELDS:
            continue
        setattr(record, field, value)
    await db.commit()
    await db.refresh(record)
    return (await care_responses(db, [record]))[0]


@router.delete("/{record_id}", response_model=DeleteResponse)
async def delete_care_record(
    record_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_db),
):
    await _get_record_or_404(db, record_id)
    await db.execute(delete(CareRecord).where(CareRecord.id == record_id))
    await db.commit()
    return DeleteResponse(success=True, message="Care record deleted successfully")
