"""Volunteer profile, hours and matching endpoints."""

import uuid
from collections import Counter
from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from libs.common.datetime_utils import get_now
from libs.common.logging import get_logger
from libs.common.pagination import DEFAULT_LIMIT, MAX_LIMIT, paginate
from libs.common.schemas import split_csv
from libs.db.session import get_async_db
from services.volunteer_service.models import (
    BackgroundCheckStatus,
    OpportunityStatus,
    Volunteer,
    VolunteerHour,
    VolunteerOpportunity,
)
from services.volunteer_service.routers._helpers import (
    opportunity_payloads,
    rank_matches,
)
from services.volunteer_service.schemas import (
    DeleteResponse,
    OpportunitySearchResponse,
    VolunteerCreate,
    VolunteerDetailResponse,
    VolunteerHourCreate,
    VolunteerHourListResponse,
    VolunteerHourResponse,
    VolunteerListResponse,
    VolunteerResponse,
    VolunteerStatsResponse,
    VolunteerUpdate,
)
from services.volunteer_service.services.lookups import (
    fetch_member_summaries,
    json_list_contains_any,
    member_exists,
    member_ids_matching,
)
from services.volunteer_service.services.signups import delete_volunteer_records
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)
router = APIRouter(prefix="/volunteers", tags=["volunteers"])


# ── Helpers ─────────────────────────────────────────────────────────


async def _get_volunteer_or_404(db: AsyncSession, volunteer_id: uuid.UUID) -> Volunteer:
    volunteer = (
        await db.execute(select(Volunteer).where(Volunteer.id == volunteer_id))
    ).scalar_one_or_none()
    if not volunteer:
        raise HTTPException(status_code=404, detail="Volunteer not found")
    return volunteer


def _volunteer_payload(volunteer: Volunteer, members: dict) -> dict:
    data = {c.key: getattr(volunteer, c.key) for c in volunteer.__table__.columns}
    data["member"] = members.get(volunteer.member_id)
    return data


async def _total_hours(db: AsyncSession, *where) -> float:
    query = select(func.coalesce(func.sum(VolunteerHour.hours_worked), 0)).where(*where)
    total = (await db.execute(query)).scalar()
    return float(total or 0)


# ── Profiles ────────────────────────────────────────────────────────


@router.get("/", response_model=VolunteerListResponse)
async def list_volunteers(
    skills: Optional[str] = None,
    ministry: Optional[str] = None,
    active: Optional[bool] = None,
    background_check: Optional[BackgroundCheckStatus] = Query(
        None, alias="backgroundCheck"
    ),
    search: Optional[str] = None,
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_async_db),
):
    """List volunteers. ``skills`` matches any listed skill exactly."""
    q = select(Volunteer)
    skill_list = split_csv(skills)
    if skill_list:
        q = q.where(json_list_contains_any(Volunteer.skills, skill_list))
    if ministry:
        q = q.where(json_list_contains_any(Volunteer.preferred_ministries, [ministry]))
    if active is not None:
        q = q.where(Volunteer.is_active.is_(active))
    if background_check is not None:
        q = q.where(Volunteer.background_check == background_check)
    if search and search.strip():
        q = q.where(Volunteer.member_id.in_(member_ids_matching(search.strip())))

    page = await paginate(
        db,
        q,
        order_by=[Volunteer.created_at.desc()],
        tiebreaker=Volunteer.id,
        limit=limit,
        offset=offset,
    )
    members = await fetch_member_summaries(db, [v.member_id for v in page.items])
    return {
        "volunteers": [_volunteer_payload(v, members) for v in page.items],
        "total": page.total,
        "limit": page.limit,
        "offset": page.offset,
    }


@router.post("/", response_model=VolunteerResponse, status_code=201)
async def create_volunteer(
    data: VolunteerCreate,
    db: AsyncSession = Depends(get_async_db),
):
    """Create a volunteer profile for an existing member."""
    if not await member_exists(db, data.member_id):
        raise HTTPException(status_code=404, detail="Member not found")

    existing = (
        await db.execute(select(Volunteer.id).where(Volunteer.member_id == data.member_id))
    ).first()
    if existing:
        raise HTTPException(
            status_code=400, detail="Volunteer profile already exists for this member"
        )

    volunteer = Volunteer(**data.model_dump())
    db.add(volunteer)
    await db.commit()
    await db.refresh(volunteer)
    logger.info("Created volunteer %s for member %s", volunteer.id, volunteer.member_id)

    members = await fetch_member_summaries(db, [volunteer.member_id])
    return _volunteer_payload(volunteer, members)


@router.get("/stats", response_model=VolunteerStatsResponse)
async def volunteer_stats(db: AsyncSession = Depends(get_async_db)):
    total = (await db.execute(select(func.count(Volunteer.id)))).scalar() or 0
    active = (
        await db.execute(
            select(func.count(Volunteer.id)).where(Volunteer.is_active.is_(True))
        )
    ).scalar() or 0
    total_opportunities = (
        await db.execute(select(func.count(VolunteerOpportunity.id)))
    ).scalar() or 0
    open_opportunities = (
        await db.execute(
            select(func.count(VolunteerOpportunity.id)).where(
                VolunteerOpportunity.is_active.is_(True),
                VolunteerOpportunity.status == OpportunityStatus.OPEN,
            )
        )
    ).scalar() or 0

    skill_counts: Counter = Counter()
    for skills in (await db.execute(select(Volunteer.skills))).scalars():
        skill_counts.update(dict.fromkeys(skills or [], 1))
    top_skills = sorted(skill_counts.items(), key=lambda kv: (-kv[1], kv[0]))[:10]

    return {
        "total_volunteers": total,
        "active_volunteers": active,
        "total_hours": await _total_hours(db),
        "total_opportunities": total_opportunities,
        "active_opportunities": open_opportunities,
        "top_skills": [{"skill": s, "count": c} for s, c in top_skills],
    }


@router.get("/member/{member_id}", response_model=VolunteerResponse)
async def get_volunteer_by_member(
    member_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_db),
):
    volunteer = (
        await db.execute(select(Volunteer).where(Volunteer.member_id == member_id))
    ).scalar_one_or_none()
    if not volunteer:
        raise HTTPException(status_code=404, detail="Volunteer profile not found")
    members = await fetch_member_summaries(db, [member_id])
    return _volunteer_payload(volunteer, members)


@router.get("/{volunteer_id}", response_model=VolunteerDetailResponse)
async def get_volunteer(
    volunteer_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_db),
):
    """Volunteer detail with total hours and the ten most recent entries."""
    volunteer = await _get_volunteer_or_404(db, volunteer_id)
    members = await fetch_member_summaries(db, [volunteer.member_id])

    recent = (
        await db.execute(
            select(VolunteerHour)
            .where(VolunteerHour.volunteer_id == volunteer_id)
            .order_by(VolunteerHour.work_date.desc(), VolunteerHour.id)
            .limit(10)
        )
    ).scalars().all()

    data = _volunteer_payload(volunteer, members)
    data["total_hours"] = await _total_hours(
        db, VolunteerHour.volunteer_id == volunteer_id
    )
    data["recent_hours"] = [VolunteerHourResponse.model_validate(h) for h in recent]
    return data


@router.put("/{volunteer_id}", response_model=VolunteerResponse)
@router.patch("/{volunteer_id}", response_model=VolunteerResponse)
async def update_volunteer(
    volunteer_id: uuid.UUID,
    data: VolunteerUpdate,
    db: AsyncSession = Depends(get_async_db),
):
    volunteer = await _get_volunteer_or_404(db, volunteer_id)
    for field, value in data.model_dump(exclude_unset=True).items():
        if value is None and field in {
            "skills",
            "interests",
            "preferred_ministries",
            "transportation_available",
            "willing_to_travel",
            "background_check",
            "is_active",
        }:
            continue
        setattr(volunteer, field, value)
    await db.commit()
    await db.refresh(volunteer)

    members = await fetch_member_summaries(db, [volunteer.member_id])
    return _volunteer_payload(volunteer, members)


@router.delete("/{volunteer_id}", response_model=DeleteResponse)
async def delete_volunteer(
    volunteer_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_db),
):
    await _get_volunteer_or_404(db, volunteer_id)
    await delete_volunteer_records(db, volunteer_id)
    return DeleteResponse(message="Volunteer profile deleted successfully")


# ── Hours ───────────────────────────────────────────────────────────


@router.get("/{volunteer_id}/hours", response_model=VolunteerHourListResponse)
async def list_volunteer_hours(
    volunteer_id: uuid.UUID,
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    verified: Optional[bool] = None,
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_async_db),
):
    """Logged hours, newest first, with the sum over every matching entry."""
    await _get_volunteer_or_404(db, volunteer_id)

    conditions = [VolunteerHour.volunteer_id == volunteer_id]
    if start_date is not None:
        conditions.append(VolunteerHour.work_date >= start_date)
    if end_date is not None:
        conditions.append(VolunteerHour.work_date <= end_date)
    if verified is not None:
        conditions.append(VolunteerHour.is_verified.is_(verified))

    page = await paginate(
        db,
        select(VolunteerHour).where(*conditions),
        order_by=[VolunteerHour.work_date.desc()],
        tiebreaker=VolunteerHour.id,
        limit=limit,
        offset=offset,
    )
    return VolunteerHourListResponse(
        hours=[VolunteerHourResponse.model_validate(h) for h in page.items],
        total_hours=await _total_hours(db, *conditions),
        total=page.total,
        limit=page.limit,
        offset=page.offset,
    )


@router.post("/{volunteer_id}/hours", response_model=VolunteerHourResponse, status_code=201)
async def log_volunteer_hours(
    volunteer_id: uuid.UUID,
    data: VolunteerHourCreate,
    db: AsyncSession = Depends(get_async_db),
):
    await _get_volunteer_or_404(db, volunteer_id)
    if data.opportunity_id is not None:
        opportunity = await db.get(VolunteerOpportunity, data.opportunity_id)
        if not opportunity:
            raise HTTPException(status_code=404, detail="Volunteer opportunity not found")

    hour = VolunteerHour(volunteer_id=volunteer_id, **data.model_dump())
    db.add(hour)
    await db.commit()
    await db.refresh(hour)
    logger.info("Logged %.2f hours for volunteer %s", hour.hours_worked, volunteer_id)
    return VolunteerHourResponse.model_validate(hour)


# ── Matching ────────────────────────────────────────────────────────


@router.get("/{volunteer_id}/matches", response_model=OpportunitySearchResponse)
async def volunteer_matches(
    volunteer_id: uuid.UUID,
    now: datetime = Depends(get_now),
    db: AsyncSession = Depends(get_async_db),
):
    """Open, upcoming opportunities ranked by how well they fit this volunteer."""
    volunteer = await _get_volunteer_or_404(db, volunteer_id)
    opportunities = (
        await db.execute(
            select(VolunteerOpportunity).where(
                VolunteerOpportunity.is_active.is_(True),
                VolunteerOpportunity.status == OpportunityStatus.OPEN,
                VolunteerOpportunity.start_date >= now,
            )
        )
    ).scalars().all()

    ranked = rank_matches(volunteer, opportunities)
    payloads = await opportunity_payloads(db, [opp for opp, _ in ranked])
    results = [{**payload, **match} for payload, (_, match) in zip(payloads, ranked)]
    return {"opportunities": results, "total": len(results)}
