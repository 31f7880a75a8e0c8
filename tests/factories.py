"""
Model factories for creating valid test data.

Every factory produces a valid, insertable SQLAlchemy model instance.
Override any field via kwargs.

Usage:
    member = MemberFactory.create(email="custom@test.com")
    db_session.add(member)
    await db_session.commit()
"""

import uuid
from datetime import date, datetime, timezone

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _uuid() -> uuid.UUID:
    return uuid.uuid4()


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _unique_email() -> str:
    return f"test-{uuid.uuid4().hex[:8]}@test.com"


# ---------------------------------------------------------------------------
# Members Service
# ---------------------------------------------------------------------------


class MemberFactory:
    @staticmethod
    def create(**overrides):
        from services.members_service.models import Member, MembershipStatus

        defaults = {
            "id": _uuid(),
            "email": _unique_email(),
            "first_name": "Test",
            "last_name": "Member",
            "membership_status": MembershipStatus.ACTIVE,
            "join_date": date(2024, 1, 7),
            "is_active": True,
            "created_at": _now(),
            "updated_at": _now(),
        }
        defaults.update(overrides)
        return Member(**defaults)


class TagFactory:
    @staticmethod
    def create(**overrides):
        from services.members_service.models import Tag

        defaults = {
            "id": _uuid(),
            "name": f"tag-{uuid.uuid4().hex[:6]}",
        }
        defaults.update(overrides)
        return Tag(**defaults)


class GroupFactory:
    @staticmethod
    def create(**overrides):
        from services.members_service.models import Group

        defaults = {
            "id": _uuid(),
            "name": f"Group {uuid.uuid4().hex[:6]}",
            "group_type": "small_group",
            "is_active": True,
        }
        defaults.update(overrides)
        return Group(**defaults)


class EventFactory:
    @staticmethod
    def create(**overrides):
        from services.members_service.models import Event

        defaults = {
            "id": _uuid(),
            "name": "Sunday Service",
            "start_date": _now(),
            "location": "Main Hall",
        }
        defaults.update(overrides)
        return Event(**defaults)


# ---------------------------------------------------------------------------
# Volunteer Service
# ---------------------------------------------------------------------------


class VolunteerFactory:
    @staticmethod
    def create(**overrides):
        from services.volunteer_service.models import BackgroundCheckStatus, Volunteer

        defaults = {
            "id": _uuid(),
            "member_id": _uuid(),
            "skills": [],
            "interests": [],
            "preferred_ministries": [],
            "background_check": BackgroundCheckStatus.NOT_REQUIRED,
            "is_active": True,
        }
        defaults.update(overrides)
        return Volunteer(**defaults)


class OpportunityFactory:
    @staticmethod
    def create(**overrides):
        from services.volunteer_service.models import (
            OpportunityStatus,
            Urgency,
            VolunteerOpportunity,
        )

        defaults = {
            "id": _uuid(),
            "title": "Greeter",
            "ministry": "Hospitality",
            "skills_required": [],
            "training_required": [],
            "start_date": datetime(2026, 7, 5, 9, 0, tzinfo=timezone.utc),
            "max_volunteers": None,
            "current_volunteers": 0,
            "urgency": Urgency.NORMAL,
            "status": OpportunityStatus.OPEN,
            "coordinator_id": _uuid(),
            "is_active": True,
        }
        defaults.update(overrides)
        return VolunteerOpportunity(**defaults)


class SignupFactory:
    @staticmethod
    def create(**overrides):
        from services.volunteer_service.models import SignupStatus, VolunteerSignup

        defaults = {
            "id": _uuid(),
            "status": SignupStatus.PENDING,
            "created_at": _now(),
        }
        defaults.update(overrides)
        return VolunteerSignup(**defaults)
