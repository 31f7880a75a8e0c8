"""Enum definitions for volunteer service models."""

import enum


def enum_values(enum_cls):
    """Return persistent DB values for SAEnum mappings."""
    return [member.value for member in enum_cls]


class BackgroundCheckStatus(str, enum.Enum):
    NOT_REQUIRED = "not_required"
    REQUIRED = "required"
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    APPROVED = "approved"
    EXPIRED = "expired"
    REJECTED = "rejected"


class Urgency(str, enum.Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


# Sort rank, higher is more urgent
URGENCY_RANK = {
    Urgency.LOW: 0,
    Urgency.NORMAL: 1,
    Urgency.HIGH: 2,
    Urgency.URGENT: 3,
}


class OpportunityStatus(str, enum.Enum):
    DRAFT = "draft"
    OPEN = "open"
    FILLED = "filled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    ON_HOLD = "on_hold"


class SignupStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    DECLINED = "declined"
    COMPLETED = "completed"
    WAITLISTED = "waitlisted"
    CANCELLED = "cancelled"


# Signups that hold one of the opportunity's seats
SEATED_STATUSES = (SignupStatus.CONFIRMED, SignupStatus.COMPLETED)
