"""Member persistence: creates, updates and deletes in one transaction each.

Sub-records (emergency contact, preferences, spiritual journey) are upserted
keyed by member id. Tags live in a shared lookup table and are found or
created by name.
"""

import uuid
from typing import Any, Iterable, Optional

from fastapi import HTTPException, status
from libs.common.datetime_utils import start_of_month
from libs.common.logging import get_logger
from libs.common.pagination import Page, paginate
from services.members_service.models import (
    Attendance,
    CareRecord,
    CommunicationMethod,
    GroupMembership,
    Member,
    MemberEmergencyContact,
    MemberPreferences,
    MembershipStatus,
    MemberTag,
    PrivacyLevel,
    SpiritualJourney,
    Tag,
)
from services.members_service.schemas import MemberCreate, MemberUpdate
from services.members_service.services.filters import (
    MemberQuery,
    apply_member_predicate,
    member_sort_column,
)
from services.members_service.services.transform import split_member_payload
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

logger = get_logger(__name__)

DUPLICATE_EMAIL = "Member with this email already exists"

# Rows owned by a member, deleted in this order before the member itself.
MEMBER_CLEANUP_ORDER = (
    MemberTag,
    MemberEmergencyContact,
    MemberPreferences,
    SpiritualJourney,
    GroupMembership,
    Attendance,
    CareRecord,
)

# Columns that cannot be cleared through an update
NON_NULLABLE_FIELDS = {"first_name", "last_name", "email", "membership_status", "is_active"}

PREFERENCE_DEFAULTS = {
    "communication_method": CommunicationMethod.EMAIL,
    "newsletter": True,
    "event_notifications": True,
    "privacy_level": PrivacyLevel.MEMBERS,
}


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


async def get_member_or_404(
    db: AsyncSession, member_id: uuid.UUID, include_history: bool = False
) -> Member:
    query = (
        select(Member)
        .where(Member.id == member_id)
        .execution_options(populate_existing=True)
    )
    if include_history:
        query = query.options(
            selectinload(Member.attendance).selectinload(Attendance.event),
            selectinload(Member.care_history),
        )
    result = await db.execute(query)
    member = result.scalar_one_or_none()
    if not member:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Member not found",
        )
    return member


async def list_members(db: AsyncSession, member_query: MemberQuery) -> Page:
    query = apply_member_predicate(select(Member), member_query.predicate)
    return await paginate(
        db,
        query,
        order_by=[member_sort_column(member_query)],
        tiebreaker=Member.id,
        limit=member_query.limit,
        offset=member_query.offset,
    )


async def member_stats(db: AsyncSession, today) -> dict[str, Any]:
    total = await db.scalar(select(func.count(Member.id)))
    active = await db.scalar(
        select(func.count(Member.id)).where(
            Member.membership_status == MembershipStatus.ACTIVE
        )
    )
    new_this_month = await db.scalar(
        select(func.count(Member.id)).where(
            Member.join_date >= start_of_month(today)
        )
    )

    by_status_rows = await db.execute(
        select(Member.membership_status, func.count(Member.id)).group_by(
            Member.membership_status
        )
    )
    members_by_status = {choice.value: 0 for choice in MembershipStatus}
    for membership_status, count in by_status_rows.all():
        members_by_status[MembershipStatus(membership_status).value] = count

    tag_count = func.count(MemberTag.id).label("count")
    top_tag_rows = await db.execute(
        select(Tag.name, tag_count)
        .join(MemberTag, MemberTag.tag_id == Tag.id)
        .group_by(Tag.id, Tag.name)
        .order_by(tag_count.desc(), Tag.name)
        .limit(5)
    )

    return {
        "total_members": total or 0,
        "active_members": active or 0,
        "new_members_this_month": new_this_month or 0,
        "members_by_status": members_by_status,
        "top_tags": [{"name": name, "count": count} for name, count in top_tag_rows.all()],
    }


async def email_taken(
    db: AsyncSession, email: str, exclude_id: Optional[uuid.UUID] = None
) -> bool:
    query = select(Member.id).where(func.lower(Member.email) == email.lower())
    if exclude_id is not None:
        query = query.where(Member.id != exclude_id)
    result = await db.execute(query)
    return result.first() is not None


def is_email_conflict(exc: IntegrityError) -> bool:
    """True when the violated constraint is the unique index on members.email."""
    return "email" in str(exc.orig).lower()


# ---------------------------------------------------------------------------
# Sub-record upserts
# ---------------------------------------------------------------------------


async def _get_owned(db: AsyncSession, model, member_id: uuid.UUID):
    result = await db.execute(select(model).where(model.member_id == member_id))
    return result.scalar_one_or_none()


async def upsert_emergency_contact(
    db: AsyncSession, member_id: uuid.UUID, data: dict[str, Any]
) -> MemberEmergencyContact:
    contact = await _get_owned(db, MemberEmergencyContact, member_id)
    if contact is None:
        contact = MemberEmergencyContact(member_id=member_id)
        db.add(contact)
    for field in ("name", "contact_relationship", "phone", "email"):
        if field in data:
            setattr(contact, field, data[field])
    await db.flush()
    return contact


async def upsert_preferences(
    db: AsyncSession, member_id: uuid.UUID, data: dict[str, Any]
) -> MemberPreferences:
    """Create with defaults for missing values; on update, unset values are kept."""
    prefs = await _get_owned(db, MemberPreferences, member_id)
    if prefs is None:
        values = {
            field: data.get(field) if data.get(field) is not None else default
            for field, default in PREFERENCE_DEFAULTS.items()
        }
        prefs = MemberPreferences(member_id=member_id, **values)
        db.add(prefs)
    else:
        for field in PREFERENCE_DEFAULTS:
            if data.get(field) is not None:
                setattr(prefs, field, data[field])
    await db.flush()
    return prefs


async def upsert_spiritual_journey(
    db: AsyncSession, member_id: uuid.UUID, data: dict[str, Any]
) -> SpiritualJourney:
    journey = await _get_owned(db, SpiritualJourney, member_id)
    if journey is None:
        journey = SpiritualJourney(member_id=member_id)
        db.add(journey)
    for field in ("current_stage", "salvation_date", "baptism_date", "notes"):
        if field in data:
            setattr(journey, field, data[field])
    await db.flush()
    return journey


async def get_or_create_tag(db: AsyncSession, name: str, *, actor: str) -> Tag:
    result = await db.execute(select(Tag).where(Tag.name == name))
    tag = result.scalar_one_or_none()
    if tag is None:
        tag = Tag(name=name, created_by=actor)
        db.add(tag)
        await db.flush()
    return tag


async def link_member_tags(
    db: AsyncSession,
    member_id: uuid.UUID,
    names: Iterable[str],
    *,
    actor: str,
    replace: bool = False,
) -> None:
    """Link the named tags to a member, creating unknown tags.

    With ``replace`` the member ends up with exactly ``names``.
    """
    wanted: dict[uuid.UUID, Tag] = {}
    for name in dict.fromkeys(names):
        tag = await get_or_create_tag(db, name, actor=actor)
        wanted[tag.id] = tag

    result = await db.execute(
        select(MemberTag.tag_id).where(MemberTag.member_id == member_id)
    )
    linked = set(result.scalars().all())

    if replace:
        stale = linked - set(wanted)
        if stale:
            await db.execute(
                delete(MemberTag).where(
                    MemberTag.member_id == member_id, MemberTag.tag_id.in_(stale)
                )
            )

    for tag_id in wanted:
        if tag_id not in linked:
            db.add(MemberTag(member_id=member_id, tag_id=tag_id))
    await db.flush()


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


async def create_member(db: AsyncSession, member_in: MemberCreate, *, actor: str) -> Member:
    if await email_taken(db, member_in.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=DUPLICATE_EMAIL
        )

    payload = split_member_payload(member_in.model_dump())
    try:
        member = Member(**payload.base, created_by=actor, updated_by=actor)
        db.add(member)
        await db.flush()

        if payload.emergency_contact and payload.emergency_contact.get("name"):
            await upsert_emergency_contact(db, member.id, payload.emergency_contact)
        if payload.preferences is not None:
            await upsert_preferences(db, member.id, payload.preferences)
        if payload.spiritual_journey is not None:
            await upsert_spiritual_journey(db, member.id, payload.spiritual_journey)
        if payload.tags:
            await link_member_tags(db, member.id, payload.tags, actor=actor)

        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        if is_email_conflict(exc):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=DUPLICATE_EMAIL
            )
        logger.exception("Constraint violation creating member %s", member_in.email)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create member",
        )
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Failed to create member %s", member_in.email)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create member",
        )

    logger.info("Created member %s", member.id)
    return await get_member_or_404(db, member.id)


async def update_member(
    db: AsyncSession, member_id: uuid.UUID, member_in: MemberUpdate, *, actor: str
) -> Member:
    member = await get_member_or_404(db, member_id)

    if member_in.email is not None and await email_taken(
        db, member_in.email, exclude_id=member_id
    ):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=DUPLICATE_EMAIL
        )

    payload = split_member_payload(member_in.model_dump(exclude_unset=True))
    try:
        for field, value in payload.base.items():
            if value is None and field in NON_NULLABLE_FIELDS:
                continue
            setattr(member, field, value)
        member.updated_by = actor

        if payload.emergency_contact is not None:
            await upsert_emergency_contact(db, member_id, payload.emergency_contact)
        if payload.preferences is not None:
            await upsert_preferences(db, member_id, payload.preferences)
        if payload.spiritual_journey is not None:
            await upsert_spiritual_journey(db, member_id, payload.spiritual_journey)
        if payload.tags is not None:
            await link_member_tags(
                db, member_id, payload.tags, actor=actor, replace=True
            )

        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        if is_email_conflict(exc):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=DUPLICATE_EMAIL
            )
        logger.exception("Constraint violation updating member %s", member_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update member",
        )
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Failed to update member %s", member_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update member",
        )

    logger.info("Updated member %s", member_id)
    return await get_member_or_404(db, member_id)


async def delete_member(db: AsyncSession, member_id: uuid.UUID) -> None:
    """Delete a member and everything it owns."""
    result = await db.execute(select(Member.id).where(Member.id == member_id))
    if result.first() is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Member not found",
        )

    try:
        for model in MEMBER_CLEANUP_ORDER:
            await db.execute(delete(model).where(model.member_id == member_id))
        await db.execute(delete(Member).where(Member.id == member_id))
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Failed to delete member %s", member_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete member",
        )

    logger.info("Deleted member %s", member_id)
