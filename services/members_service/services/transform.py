"""Translate between the stored member shape and the flat frontend shape.

Reads go through ``member_to_flat``; writes go through
``split_member_payload``, which separates the member's own columns from the
sub-records upserted alongside it.
"""

import json
from dataclasses import dataclass
from typing import Any, Optional

from libs.common.logging import get_logger
from pydantic import ValidationError
from services.members_service.models import Member
from services.members_service.schemas.member import Address

logger = get_logger(__name__)


def encode_address(address: Optional[dict]) -> Optional[str]:
    if address is None:
        return None
    return json.dumps(address, sort_keys=True)


def decode_address(raw: Optional[str]) -> Optional[dict]:
    """Decode the stored address.

    Missing, unparseable or wrongly shaped values give None so one bad row
    never breaks a read.
    """
    if not raw:
        return None
    try:
        value = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Ignoring unreadable member address")
        return None
    if not isinstance(value, dict):
        return None
    try:
        return Address.model_validate(value).model_dump(exclude_unset=True)
    except ValidationError:
        logger.warning("Ignoring malformed member address")
        return None


def _emergency_contact(member: Member) -> Optional[dict]:
    contact = member.emergency_contact
    if contact is None:
        return None
    return {
        "name": contact.name,
        "relationship": contact.contact_relationship,
        "phone": contact.phone,
        "email": contact.email,
    }


def _preferences(member: Member) -> Optional[dict]:
    prefs = member.preferences
    if prefs is None:
        return None
    return {
        "communication_method": prefs.communication_method,
        "newsletter": prefs.newsletter,
        "event_notifications": prefs.event_notifications,
        "privacy_level": prefs.privacy_level,
    }


def _spiritual_journey(member: Member) -> Optional[dict]:
    journey = member.spiritual_journey
    if journey is None:
        return None
    return {
        "current_stage": journey.current_stage,
        "salvation_date": journey.salvation_date,
        "baptism_date": journey.baptism_date,
        "notes": journey.notes,
    }


def member_to_flat(member: Member, include_history: bool = False) -> dict[str, Any]:
    """Flatten a loaded ``Member`` into the response dict.

    Attendance and care history are only read when ``include_history`` is set;
    the caller must have eager-loaded them.
    """
    flat = {
        "id": member.id,
        "first_name": member.first_name,
        "last_name": member.last_name,
        "email": member.email,
        "phone": member.phone,
        "date_of_birth": member.date_of_birth,
        "address": decode_address(member.address),
        "profile_photo": member.profile_photo,
        "membership_status": member.membership_status,
        "join_date": member.join_date,
        "tags": [tag.name for tag in member.tags],
        "notes": member.notes,
        "gender": member.gender,
        "marital_status": member.marital_status,
        "is_active": member.is_active,
        "emergency_contact": _emergency_contact(member),
        "spiritual_journey": _spiritual_journey(member),
        "preferences": _preferences(member),
        "group_memberships": [
            {
                "group_id": gm.group_id,
                "group_name": gm.group.name if gm.group else "",
                "role": gm.role,
                "join_date": gm.join_date,
            }
            for gm in member.group_memberships
        ],
        "created_at": member.created_at,
        "updated_at": member.updated_at,
        "created_by": member.created_by,
        "updated_by": member.updated_by,
    }

    if include_history:
        flat["attendance"] = [
            {
                "event_id": record.event_id,
                "event_name": record.event.name if record.event else "",
                "date": record.attendance_date,
                "attended": record.attended,
            }
            for record in sorted(
                member.attendance, key=lambda r: r.attendance_date, reverse=True
            )
        ]
        flat["care_history"] = [
            {
                "date": record.care_date,
                "type": record.care_type,
                "notes": record.notes,
                "care_giver": record.care_giver,
            }
            for record in sorted(
                member.care_history, key=lambda r: r.care_date, reverse=True
            )
        ]

    return flat


@dataclass
class MemberPayload:
    """A create/update body split into the member row and its sub-records.

    ``None`` on a sub-record or on ``tags`` means "not supplied".
    """

    base: dict[str, Any]
    emergency_contact: Optional[dict[str, Any]] = None
    preferences: Optional[dict[str, Any]] = None
    spiritual_journey: Optional[dict[str, Any]] = None
    tags: Optional[list[str]] = None


def split_member_payload(payload: dict[str, Any]) -> MemberPayload:
    """Split a ``model_dump()`` of ``MemberCreate``/``MemberUpdate``."""
    data = dict(payload)
    emergency_contact = data.pop("emergency_contact", None)
    preferences = data.pop("preferences", None)
    spiritual_journey = data.pop("spiritual_journey", None)
    tags = data.pop("tags", None)

    if "address" in data:
        data["address"] = encode_address(data["address"])

    if emergency_contact is not None and "relationship" in emergency_contact:
        emergency_contact = dict(emergency_contact)
        emergency_contact["contact_relationship"] = emergency_contact.pop(
            "relationship"
        )

    if tags is not None:
        tags = list(dict.fromkeys(t.strip() for t in tags if t and t.strip()))

    return MemberPayload(
        base=data,
        emergency_contact=emergency_contact,
        preferences=preferences,
        spiritual_journey=spiritual_journey,
        tags=tags,
    )
