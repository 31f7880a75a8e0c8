"""Enum definitions for members service models."""

import enum


def enum_values(enum_cls):
    """Return persistent DB values for SAEnum mappings."""
    return [member.value for member in enum_cls]


class MembershipStatus(str, enum.Enum):
    PENDING = "pending"
    ACTIVE = "active"
    INACTIVE = "inactive"


class TagCategory(str, enum.Enum):
    DEMOGRAPHIC = "demographic"
    SPIRITUAL = "spiritual"
    INTEREST = "interest"
    SKILL = "skill"
    ROLE = "role"
    OTHER = "other"


class CommunicationMethod(str, enum.Enum):
    EMAIL = "email"
    PHONE = "phone"
    TEXT = "text"
    APP = "app"


class PrivacyLevel(str, enum.Enum):
    PUBLIC = "public"
    MEMBERS = "members"
    LEADERS = "leaders"
    PRIVATE = "private"


class GroupRole(str, enum.Enum):
    MEMBER = "member"
    LEADER = "leader"
    ASSISTANT = "assistant"


class CareType(str, enum.Enum):
    VISIT = "visit"
    CALL = "call"
    PRAYER = "prayer"
    COUNSELING = "counseling"
    OTHER = "other"
