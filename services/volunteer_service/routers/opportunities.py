"""Volunteer opportunity and signup endpoints."""

import uuid
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from libs.auth.dependencies import get_optional_user
from libs.auth.models import AuthUser, actor_for
from libs.common.datetime_utils import get_now
from libs.common.logging import get_logger
from libs.common.pagination import DEFAULT_LIMIT, MAX_LIMIT, paginate
from libs.common.schemas import split_csv
from libs.db.session import get_async_db
from services.volunteer_service.models import (
    OpportunityStatus,
    SignupStatus,
    Urgency,
    Volunteer,
    VolunteerHour,
    VolunteerOpportunity,
    VolunteerSignup,
)
from services.volunteer_service.routers._helpers import (
    opportunity_payloads,
    rank_matches,
)
from services.volunteer_service.schemas import (
    DeleteResponse,
    OpportunityCreate,
    OpportunityDetailResponse,
    OpportunityListResponse,
    OpportunityResponse,
    OpportunitySearchResponse,
    OpportunityStatsResponse,
    OpportunityUpdate,
    SignupCreate,
    SignupCreateResponse,
    SignupListResponse,
    SignupResponse,
    SignupUpdate,
)
from services.volunteer_service.services.lookups import (
    json_list_contains_any,
    member_exists,
    urgency_rank,
)
from services.volunteer_service.services.signups import (
    create_signup,
    lock_opportunity,
    update_signup_status,
)
from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)
router = APIRouter(prefix="/volunteer-opportunities", tags=["volunteer-opportunities"])

ALL_STATUSES = "all"
NON_NULLABLE_FIELDS = {
    "title",
    "ministry",
    "skills_required",
    "background_check_required",
    "training_required",
    "start_date",
    "is_recurring",
    "current_volunteers",
    "urgency",
    "status",
    "coordinator_id",
    "is_active",
}


# ── Helpers ─────────────────────────────────────────────────────────


def _parse_statuses(raw: Optional[str]) -> list[OpportunityStatus]:
    values = split_csv(raw)
    if any(v.lower() == ALL_STATUSES for v in values):
        return []
    try:
        return [OpportunityStatus(v.lower()) for v in values]
    except ValueError:
        allowed = ", ".join(s.value for s in OpportunityStatus)
        raise HTTPException(
            status_code=400, detail=f"status: must be one of {allowed} or all"
        )


def _check_capacity(opportunity: VolunteerOpportunity) -> None:
    if (
        opportunity.max_volunteers is not None
        and opportunity.current_volunteers > opportunity.max_volunteers
    ):
        raise HTTPException(
            status_code=400,
            detail="currentVolunteers cannot exceed maxVolunteers",
        )


async def _get_opportunity_or_404(
    db: AsyncSession, opportunity_id: uuid.UUID
) -> VolunteerOpportunity:
    opportunity = (
        await db.execute(
            select(VolunteerOpportunity).where(VolunteerOpportunity.id == opportunity_id)
        )
    ).scalar_one_or_none()
    if not opportunity:
        raise HTTPException(status_code=404, detail="Volunteer opportunity not found")
    return opportunity


def _open_upcoming(now: datetime) -> list:
    return [
        VolunteerOpportunity.is_active.is_(True),
        VolunteerOpportunity.status == OpportunityStatus.OPEN,
        VolunteerOpportunity.start_date >= now,
    ]


# ── Opportunities ───────────────────────────────────────────────────


@router.get("/", response_model=OpportunityListResponse)
async def list_opportunities(
    ministry: Optional[str] = None,
    urgency: Optional[Urgency] = None,
    status: Optional[str] = OpportunityStatus.OPEN.value,
    upcoming: bool = False,
    skills: Optional[str] = None,
    search: Optional[str] = None,
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    offset: int = Query(0, ge=0),
    now: datetime = Depends(get_now),
    db: AsyncSession = Depends(get_async_db),
):
    """
    List opportunities, most urgent first and then by start date.

    ``status`` defaults to ``open``; pass ``all`` to include every status.
    """
    q = select(VolunteerOpportunity)
    if ministry and ministry.strip():
        q = q.where(VolunteerOpportunity.ministry.icontains(ministry.strip(), autoescape=True))
    if urgency is not None:
        q = q.where(VolunteerOpportunity.urgency == urgency)
    statuses = _parse_statuses(status)
    if statuses:
        q = q.where(VolunteerOpportunity.status.in_(statuses))
    if upcoming:
        q = q.where(VolunteerOpportunity.start_date >= now)
    skill_list = split_csv(skills)
    if skill_list:
        q = q.where(json_list_contains_any(VolunteerOpportunity.skills_required, skill_list))
    if search and search.strip():
        term = search.strip()
        q = q.where(
            or_(
                VolunteerOpportunity.title.icontains(term, autoescape=True),
                VolunteerOpportunity.description.icontains(term, autoescape=True),
            )
        )

    page = await paginate(
        db,
        q,
        order_by=[urgency_rank().desc(), VolunteerOpportunity.start_date.asc()],
        tiebreaker=VolunteerOpportunity.id,
        limit=limit,
        offset=offset,
    )
    return {
        "opportunities": await opportunity_payloads(db, page.items),
        "total": page.total,
        "limit": page.limit,
        "offset": page.offset,
    }


@router.post("/", response_model=OpportunityResponse, status_code=201)
async def create_opportunity(
    data: OpportunityCreate,
    db: AsyncSession = Depends(get_async_db),
):
    if not await member_exists(db, data.coordinator_id):
        raise HTTPException(status_code=404, detail="Coordinator not found")

    opportunity = VolunteerOpportunity(**data.model_dump())
    _check_capacity(opportunity)
    db.add(opportunity)
    await db.commit()
    await db.refresh(opportunity)
    logger.info("Created opportunity %s (%s)", opportunity.id, opportunity.ministry)

    return (await opportunity_payloads(db, [opportunity]))[0]


@router.get("/search", response_model=OpportunitySearchResponse)
async def search_opportunities(
    volunteer_id: Optional[uuid.UUID] = Query(None, alias="volunteerId"),
    ministry: Optional[str] = None,
    urgent: bool = False,
    now: datetime = Depends(get_now),
    db: AsyncSession = Depends(get_async_db),
):
    """
    Search active, open and upcoming opportunities.

    With ``volunteerId`` each result carries its match score and only
    opportunities that score above zero are returned, best match first.
    """
    q = select(VolunteerOpportunity).where(*_open_upcoming(now))
    if ministry and ministry.strip():
        q = q.where(VolunteerOpportunity.ministry.icontains(ministry.strip(), autoescape=True))
    if urgent:
        q = q.where(VolunteerOpportunity.urgency.in_([Urgency.HIGH, Urgency.URGENT]))

    if volunteer_id is None:
        q = q.order_by(
            urgency_rank().desc(),
            VolunteerOpportunity.start_date.asc(),
            VolunteerOpportunity.id,
        )
        opportunities = (await db.execute(q)).scalars().all()
        results = await opportunity_payloads(db, opportunities)
        return {"opportunities": results, "total": len(results)}

    volunteer = await db.get(Volunteer, volunteer_id)
    if not volunteer:
        return {"opportunities": [], "total": 0}

    ranked = rank_matches(volunteer, (await db.execute(q)).scalars().all())
    payloads = await opportunity_payloads(db, [opp for opp, _ in ranked])
    results = [{**payload, **match} for payload, (_, match) in zip(payloads, ranked)]
    return {"opportunities": results, "total": len(results)}


@router.get("/stats", response_model=OpportunityStatsResponse)
async def opportunity_stats(db: AsyncSession = Depends(get_async_db)):
    count = func.count(VolunteerOpportunity.id)
    total = (await db.execute(select(count))).scalar() or 0
    active = (
        await db.execute(select(count).where(VolunteerOpportunity.is_active.is_(True)))
    ).scalar() or 0
    open_count = (
        await db.execute(
            select(count).where(VolunteerOpportunity.status == OpportunityStatus.OPEN)
        )
    ).scalar() or 0
    urgent = (
        await db.execute(
            select(count).where(
                VolunteerOpportunity.urgency == Urgency.URGENT,
                VolunteerOpportunity.status == OpportunityStatus.OPEN,
            )
        )
    ).scalar() or 0

    ministries = (
        await db.execute(
            select(VolunteerOpportunity.ministry, count)
            .where(VolunteerOpportunity.is_active.is_(True))
            .group_by(VolunteerOpportunity.ministry)
            .order_by(count.desc(), VolunteerOpportunity.ministry)
        )
    ).all()
    statuses = (
        await db.execute(
            select(VolunteerOpportunity.status, count)
            .group_by(VolunteerOpportunity.status)
            .order_by(VolunteerOpportunity.status)
        )
    ).all()

    return {
        "total_opportunities": total,
        "active_opportunities": active,
        "open_opportunities": open_count,
        "urgent_opportunities": urgent,
        "ministry_breakdown": [{"ministry": m, "count": c} for m, c in ministries],
        "status_breakdown": [{"status": s, "count": c} for s, c in statuses],
    }


@router.get("/{opportunity_id}", response_model=OpportunityDetailResponse)
async def get_opportunity(
    opportunity_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_db),
):
    """Opportunity detail with its signups, newest first."""
    opportunity = await _get_opportunity_or_404(db, opportunity_id)
    signups = (
        await db.execute(
            select(VolunteerSignup)
            .where(VolunteerSignup.opportunity_id == opportunity_id)
            .order_by(VolunteerSignup.created_at.desc(), VolunteerSignup.id)
        )
    ).scalars().all()

    data = (await opportunity_payloads(db, [opportunity]))[0]
    data["signups"] = [SignupResponse.model_validate(s) for s in signups]
    return data


@router.put("/{opportunity_id}", response_model=OpportunityResponse)
@router.patch("/{opportunity_id}", response_model=OpportunityResponse)
async def update_opportunity(
    opportunity_id: uuid.UUID,
    data: OpportunityUpdate,
    db: AsyncSession = Depends(get_async_db),
):
    opportunity = await lock_opportunity(db, opportunity_id)
    changes = data.model_dump(exclude_unset=True)

    coordinator_id = changes.get("coordinator_id")
    if coordinator_id is not None and not await member_exists(db, coordinator_id):
        raise HTTPException(status_code=404, detail="Coordinator not found")

    for field, value in changes.items():
        if value is None and field in NON_NULLABLE_FIELDS:
            continue
        setattr(opportunity, field, value)

    if (
        opportunity.min_age is not None
        and opportunity.max_age is not None
        and opportunity.min_age > opportunity.max_age
    ):
        await db.rollback()
        raise HTTPException(
            status_code=400, detail="minAge must not be greater than maxAge"
        )
    try:
        _check_capacity(opportunity)
    except HTTPException:
        await db.rollback()
        raise

    await db.commit()
    await db.refresh(opportunity)
    return (await opportunity_payloads(db, [opportunity]))[0]


@router.delete("/{opportunity_id}", response_model=DeleteResponse)
async def delete_opportunity(
    opportunity_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_db),
):
    """Delete an opportunity and its signups. Logged hours are kept, unlinked."""
    await _get_opportunity_or_404(db, opportunity_id)

    await db.execute(
        update(VolunteerHour)
        .where(VolunteerHour.opportunity_id == opportunity_id)
        .values(opportunity_id=None)
    )
    await db.execute(
        delete(VolunteerSignup).where(VolunteerSignup.opportunity_id == opportunity_id)
    )
    await db.execute(
        delete(VolunteerOpportunity).where(VolunteerOpportunity.id == opportunity_id)
    )
    await db.commit()
    logger.info("Deleted opportunity %s", opportunity_id)
    return DeleteResponse(message="Volunteer opportunity deleted successfully")


# ── Signups ─────────────────────────────────────────────────────────


@router.get("/{opportunity_id}/signups", response_model=SignupListResponse)
async def list_signups(
    opportunity_id: uuid.UUID,
    status: Optional[SignupStatus] = None,
    db: AsyncSession = Depends(get_async_db),
):
    await _get_opportunity_or_404(db, opportunity_id)
    q = select(VolunteerSignup).where(VolunteerSignup.opportunity_id == opportunity_id)
    if status is not None:
        q = q.where(VolunteerSignup.status == status)
    q = q.order_by(VolunteerSignup.created_at.desc(), VolunteerSignup.id)

    signups = (await db.execute(q)).scalars().all()
    return {
        "signups": [SignupResponse.model_validate(s) for s in signups],
        "total": len(signups),
    }


@router.post(
    "/{opportunity_id}/signup", response_model=SignupCreateResponse, status_code=201
)
async def sign_up(
    opportunity_id: uuid.UUID,
    data: SignupCreate,
    db: AsyncSession = Depends(get_async_db),
):
    """Sign a volunteer up. A full opportunity puts the signup on the waitlist."""
    signup, notice = await create_signup(db, opportunity_id, data)
    return SignupCreateResponse(
        signup=SignupResponse.model_validate(signup), message=notice
    )


@router.put("/{opportunity_id}/signups/{signup_id}", response_model=SignupResponse)
@router.patch("/{opportunity_id}/signups/{signup_id}", response_model=SignupResponse)
async def change_signup_status(
    opportunity_id: uuid.UUID,
    signup_id: uuid.UUID,
    data: SignupUpdate,
    now: datetime = Depends(get_now),
    current_user: Optional[AuthUser] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_async_db),
):
    signup = await update_signup_status(
        db,
        opportunity_id,
        signup_id,
        data,
        now=now,
        actor=actor_for(current_user),
    )
    return SignupResponse.model_validate(signup)
