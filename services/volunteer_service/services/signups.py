"""Signup lifecycle and opportunity seat accounting.

``current_volunteers`` counts seated signups (confirmed or completed). Seats
are only taken or released here, with the opportunity row locked, so the
count never exceeds ``max_volunteers``.
"""

import uuid
from datetime import datetime
from typing import Optional

from fastapi import HTTPException, status
from libs.common.logging import get_logger
from services.volunteer_service.models import (
    SEATED_STATUSES,
    OpportunityStatus,
    SignupStatus,
    Volunteer,
    VolunteerHour,
    VolunteerOpportunity,
    VolunteerSignup,
)
from services.volunteer_service.schemas import SignupCreate, SignupUpdate
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

WAITLIST_MESSAGE = "Added to waitlist - opportunity is at capacity"

# A filled opportunity still takes signups, onto the waitlist
ACCEPTING_STATUSES = (OpportunityStatus.OPEN, OpportunityStatus.FILLED)


async def lock_opportunity(
    db: AsyncSession, opportunity_id: uuid.UUID
) -> VolunteerOpportunity:
    """Load an opportunity with a row lock (no-op on SQLite). 404 if missing."""
    result = await db.execute(
        select(VolunteerOpportunity)
        .where(VolunteerOpportunity.id == opportunity_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    opportunity = result.scalar_one_or_none()
    if not opportunity:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Volunteer opportunity not found",
        )
    return opportunity


def take_seat(opportunity: VolunteerOpportunity) -> None:
    if not opportunity.has_capacity:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Opportunity is at capacity",
        )
    opportunity.current_volunteers += 1
    if (
        opportunity.max_volunteers is not None
        and opportunity.current_volunteers >= opportunity.max_volunteers
        and opportunity.status == OpportunityStatus.OPEN
    ):
        opportunity.status = OpportunityStatus.FILLED


def release_seat(opportunity: VolunteerOpportunity) -> None:
    opportunity.current_volunteers = max(0, opportunity.current_volunteers - 1)
    if opportunity.status == OpportunityStatus.FILLED and opportunity.has_capacity:
        opportunity.status = OpportunityStatus.OPEN


async def create_signup(
    db: AsyncSession, opportunity_id: uuid.UUID, body: SignupCreate
) -> tuple[VolunteerSignup, Optional[str]]:
    """Sign a volunteer up. Returns the signup and an optional notice."""
    opportunity = await lock_opportunity(db, opportunity_id)
    if opportunity.status not in ACCEPTING_STATUSES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="This opportunity is no longer accepting signups",
        )

    volunteer = await db.get(Volunteer, body.volunteer_id)
    if not volunteer:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Volunteer not found",
        )

    duplicate = select(VolunteerSignup.id).where(
        VolunteerSignup.volunteer_id == body.volunteer_id,
        VolunteerSignup.opportunity_id == opportunity_id,
    )
    if body.scheduled_date is None:
        duplicate = duplicate.where(VolunteerSignup.scheduled_date.is_(None))
    else:
        duplicate = duplicate.where(
            VolunteerSignup.scheduled_date == body.scheduled_date
        )
    if (await db.execute(duplicate)).first() is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Volunteer already signed up for this opportunity",
        )

    notice = None
    signup_status = SignupStatus.PENDING
    if not opportunity.has_capacity:
        signup_status = SignupStatus.WAITLISTED
        notice = WAITLIST_MESSAGE

    signup = VolunteerSignup(
        opportunity_id=opportunity_id,
        status=signup_status,
        **body.model_dump(),
    )
    db.add(signup)
    await db.commit()
    await db.refresh(signup)

    logger.info(
        "Volunteer %s signed up for %s (%s)",
        body.volunteer_id,
        opportunity_id,
        signup.status.value,
    )
    return signup, notice


async def _promote_waitlisted(db: AsyncSession, opportunity_id: uuid.UUID) -> None:
    result = await db.execute(
        select(VolunteerSignup)
        .where(
            VolunteerSignup.opportunity_id == opportunity_id,
            VolunteerSignup.status == SignupStatus.WAITLISTED,
        )
        .order_by(VolunteerSignup.created_at, VolunteerSignup.id)
        .limit(1)
    )
    next_up = result.scalar_one_or_none()
    if next_up:
        next_up.status = SignupStatus.PENDING
        logger.info("Promoted waitlisted signup %s", next_up.id)


async def update_signup_status(
    db: AsyncSession,
    opportunity_id: uuid.UUID,
    signup_id: uuid.UUID,
    body: SignupUpdate,
    *,
    now: datetime,
    actor: str,
) -> VolunteerSignup:
    opportunity = await lock_opportunity(db, opportunity_id)

    result = await db.execute(
        select(VolunteerSignup).where(
            VolunteerSignup.id == signup_id,
            VolunteerSignup.opportunity_id == opportunity_id,
        )
    )
    signup = result.scalar_one_or_none()
    if not signup:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Signup not found",
        )

    was_seated = signup.status in SEATED_STATUSES
    will_be_seated = body.status in SEATED_STATUSES

    if will_be_seated and not was_seated:
        take_seat(opportunity)
    elif was_seated and not will_be_seated:
        release_seat(opportunity)

    signup.status = body.status
    if body.status == SignupStatus.CONFIRMED:
        signup.confirmed_at = now
        signup.confirmed_by = body.confirmed_by or actor
    elif body.status == SignupStatus.DECLINED:
        signup.declined_at = now
        signup.declined_reason = body.declined_reason
    elif body.status == SignupStatus.COMPLETED:
        signup.completed_at = now
        signup.actual_hours = body.actual_hours
        signup.feedback = body.feedback
        signup.rating = body.rating

    if body.status == SignupStatus.DECLINED:
        await db.flush()
        await _promote_waitlisted(db, opportunity_id)

    await db.commit()
    await db.refresh(signup)
    logger.info(
        "Signup %s is now %s (opportunity %s has %d volunteers)",
        signup_id,
        signup.status.value,
        opportunity_id,
        opportunity.current_volunteers,
    )
    return signup


async def delete_volunteer_records(db: AsyncSession, volunteer_id: uuid.UUID) -> None:
    """Delete a volunteer with its signups and hours, freeing any seats held."""
    seated = (
        await db.execute(
            select(VolunteerSignup.opportunity_id).where(
                VolunteerSignup.volunteer_id == volunteer_id,
                VolunteerSignup.status.in_(SEATED_STATUSES),
            )
        )
    ).scalars().all()
    for opportunity_id in seated:
        release_seat(await lock_opportunity(db, opportunity_id))

    await db.execute(
        delete(VolunteerSignup).where(VolunteerSignup.volunteer_id == volunteer_id)
    )
    await db.execute(
        delete(VolunteerHour).where(VolunteerHour.volunteer_id == volunteer_id)
    )
    await db.execute(delete(Volunteer).where(Volunteer.id == volunteer_id))
    await db.commit()
    logger.info("Deleted volunteer %s (%d seats released)", volunteer_id, len(seated))
