"""Integration tests for volunteer profiles, hours and matching."""

import uuid
from datetime import date, datetime, timezone

import pytest
from services.volunteer_service.models import (
    BackgroundCheckStatus,
    OpportunityStatus,
    SignupStatus,
    Urgency,
    VolunteerHour,
    VolunteerSignup,
)
from sqlalchemy import func, select
from tests.factories import (
    MemberFactory,
    OpportunityFactory,
    SignupFactory,
    VolunteerFactory,
)


async def _seed(db_session, *rows):
    db_session.add_all(rows)
    await db_session.commit()
    return rows


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_volunteer_for_existing_member(volunteer_client, db_session):
    member = MemberFactory.create(first_name="Maya", last_name="Lin", email="maya@example.com")
    await _seed(db_session, member)

    response = await volunteer_client.post(
        "/volunteers/",
        json={
            "memberId": str(member.id),
            "skills": ["Music", "Teaching"],
            "preferredMinistries": ["Worship"],
            "availability": {"sunday": ["morning"]},
        },
    )
    assert response.status_code == 201
    body = response.json()
    assert body["memberId"] == str(member.id)
    assert body["skills"] == ["Music", "Teaching"]
    assert body["backgroundCheck"] == "not_required"
    assert body["isActive"] is True
    assert body["member"]["firstName"] == "Maya"
    assert body["member"]["email"] == "maya@example.com"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_volunteer_unknown_member_is_404(volunteer_client):
    response = await volunteer_client.post(
        "/volunteers/", json={"memberId": str(uuid.uuid4())}
    )
    assert response.status_code == 404
    assert response.json() == {"error": "Member not found"}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_second_profile_for_member_is_rejected(volunteer_client, db_session):
    member = MemberFactory.create()
    await _seed(db_session, member, VolunteerFactory.create(member_id=member.id))

    response = await volunteer_client.post("/volunteers/", json={"memberId": str(member.id)})
    assert response.status_code == 400
    assert response.json() == {"error": "Volunteer profile already exists for this member"}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_volunteers_filters(volunteer_client, db_session):
    grace = MemberFactory.create(first_name="Grace", last_name="Park")
    omar = MemberFactory.create(first_name="Omar", last_name="Haddad")
    await _seed(
        db_session,
        grace,
        omar,
        VolunteerFactory.create(
            member_id=grace.id,
            skills=["Music"],
            preferred_ministries=["Worship"],
            background_check=BackgroundCheckStatus.APPROVED,
        ),
        VolunteerFactory.create(
            member_id=omar.id,
            skills=["Cooking", "Driving"],
            preferred_ministries=["Hospitality"],
            is_active=False,
        ),
    )

    async def names(params):
        response = await volunteer_client.get("/volunteers/", params=params)
        assert response.status_code == 200
        return sorted(v["member"]["firstName"] for v in response.json()["volunteers"])

    assert await names({}) == ["Grace", "Omar"]
    assert await names({"skills": "Driving,Painting"}) == ["Omar"]
    assert await names({"ministry": "Worship"}) == ["Grace"]
    assert await names({"active": "false"}) == ["Omar"]
    assert await names({"backgroundCheck": "approved"}) == ["Grace"]
    assert await names({"search": "hadd"}) == ["Omar"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_get_volunteer_by_member(volunteer_client, db_session):
    member = MemberFactory.create()
    volunteer = VolunteerFactory.create(member_id=member.id)
    await _seed(db_session, member, volunteer)

    response = await volunteer_client.get(f"/volunteers/member/{member.id}")
    assert response.status_code == 200
    assert response.json()["id"] == str(volunteer.id)

    missing = await volunteer_client.get(f"/volunteers/member/{uuid.uuid4()}")
    assert missing.status_code == 404
    assert missing.json() == {"error": "Volunteer profile not found"}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_volunteer_keeps_unsent_fields(volunteer_client, db_session):
    volunteer = VolunteerFactory.create(skills=["Music"], notes="Prefers mornings")
    await _seed(db_session, volunteer)

    response = await volunteer_client.patch(
        f"/volunteers/{volunteer.id}",
        json={"backgroundCheck": "approved", "skills": None, "maxHoursPerWeek": 5},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["backgroundCheck"] == "approved"
    assert body["skills"] == ["Music"]
    assert body["maxHoursPerWeek"] == 5
    assert body["notes"] == "Prefers mornings"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_unknown_volunteer_is_404(volunteer_client):
    response = await volunteer_client.get(f"/volunteers/{uuid.uuid4()}")
    assert response.status_code == 404
    assert response.json() == {"error": "Volunteer not found"}


# ---------------------------------------------------------------------------
# Hours
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_log_and_list_hours_with_total(volunteer_client, db_session):
    volunteer = VolunteerFactory.create()
    opportunity = OpportunityFactory.create()
    await _seed(db_session, volunteer, opportunity)

    for day, hours, opportunity_id in [
        ("2026-05-03", 2.5, str(opportunity.id)),
        ("2026-05-10", 3, None),
        ("2026-06-01", 1.5, None),
    ]:
        response = await volunteer_client.post(
            f"/volunteers/{volunteer.id}/hours",
            json={"date": day, "hoursWorked": hours, "opportunityId": opportunity_id},
        )
        assert response.status_code == 201

    body = (await volunteer_client.get(f"/volunteers/{volunteer.id}/hours")).json()
    assert body["total"] == 3
    assert body["totalHours"] == 7.0
    assert [h["date"] for h in body["hours"]] == ["2026-06-01", "2026-05-10", "2026-05-03"]
    assert body["hours"][2]["opportunityId"] == str(opportunity.id)

    ranged = (
        await volunteer_client.get(
            f"/volunteers/{volunteer.id}/hours",
            params={"startDate": "2026-05-04", "endDate": "2026-06-01", "limit": 1},
        )
    ).json()
    assert ranged["total"] == 2
    assert ranged["totalHours"] == 4.5
    assert [h["date"] for h in ranged["hours"]] == ["2026-06-01"]


@pytest.mark.asyncio
@pytest.mark.integration
@pytest.mark.parametrize("hours", [0, -1, 25])
async def test_log_hours_rejects_out_of_range(volunteer_client, db_session, hours):
    volunteer = VolunteerFactory.create()
    await _seed(db_session, volunteer)

    response = await volunteer_client.post(
        f"/volunteers/{volunteer.id}/hours", json={"date": "2026-05-03", "hoursWorked": hours}
    )
    assert response.status_code == 400


@pytest.mark.asyncio
@pytest.mark.integration
async def test_log_hours_unknown_opportunity_is_404(volunteer_client, db_session):
    volunteer = VolunteerFactory.create()
    await _seed(db_session, volunteer)

    response = await volunteer_client.post(
        f"/volunteers/{volunteer.id}/hours",
        json={"date": "2026-05-03", "hoursWorked": 2, "opportunityId": str(uuid.uuid4())},
    )
    assert response.status_code == 404
    assert response.json() == {"error": "Volunteer opportunity not found"}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_volunteer_detail_totals_and_recent_hours(volunteer_client, db_session):
    volunteer = VolunteerFactory.create()
    await _seed(db_session, volunteer)
    db_session.add_all(
        [
            VolunteerHour(volunteer_id=volunteer.id, work_date=date(2026, 1, day), hours_worked=1)
            for day in range(1, 13)
        ]
    )
    await db_session.commit()

    body = (await volunteer_client.get(f"/volunteers/{volunteer.id}")).json()
    assert body["totalHours"] == 12.0
    assert len(body["recentHours"]) == 10
    assert body["recentHours"][0]["date"] == "2026-01-12"


# ---------------------------------------------------------------------------
# Stats and delete
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_volunteer_stats(volunteer_client, db_session):
    first = VolunteerFactory.create(skills=["Music", "Teaching"])
    second = VolunteerFactory.create(skills=["Music"], is_active=False)
    await _seed(
        db_session,
        first,
        second,
        OpportunityFactory.create(),
        OpportunityFactory.create(status=OpportunityStatus.COMPLETED),
    )
    db_session.add(VolunteerHour(volunteer_id=first.id, work_date=date(2026, 5, 1), hours_worked=4))
    await db_session.commit()

    body = (await volunteer_client.get("/volunteers/stats")).json()
    assert body["totalVolunteers"] == 2
    assert body["activeVolunteers"] == 1
    assert body["totalHours"] == 4.0
    assert body["totalOpportunities"] == 2
    assert body["activeOpportunities"] == 1
    assert body["topSkills"] == [
        {"skill": "Music", "count": 2},
        {"skill": "Teaching", "count": 1},
    ]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_delete_volunteer_releases_seats(volunteer_client, db_session, session_factory):
    volunteer = VolunteerFactory.create()
    opportunity = OpportunityFactory.create(
        max_volunteers=1, current_volunteers=1, status=OpportunityStatus.FILLED
    )
    await _seed(db_session, volunteer, opportunity)
    db_session.add_all(
        [
            SignupFactory.create(
                volunteer_id=volunteer.id,
                opportunity_id=opportunity.id,
                status=SignupStatus.CONFIRMED,
            ),
            VolunteerHour(volunteer_id=volunteer.id, work_date=date(2026, 5, 1), hours_worked=2),
        ]
    )
    await db_session.commit()

    response = await volunteer_client.delete(f"/volunteers/{volunteer.id}")
    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "Volunteer profile deleted successfully",
    }

    opp = (await volunteer_client.get(f"/volunteer-opportunities/{opportunity.id}")).json()
    assert opp["currentVolunteers"] == 0
    assert opp["status"] == "open"
    assert opp["signups"] == []

    async with session_factory() as session:
        assert await session.scalar(select(func.count(VolunteerHour.id))) == 0
        assert await session.scalar(select(func.count(VolunteerSignup.id))) == 0


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_matches_rank_open_upcoming_opportunities(volunteer_client, db_session):
    volunteer = VolunteerFactory.create(
        skills=["Music", "Sound"],
        preferred_ministries=["Worship"],
        background_check=BackgroundCheckStatus.APPROVED,
    )
    best = OpportunityFactory.create(
        title="Worship band",
        ministry="Worship",
        skills_required=["Music"],
        background_check_required=True,
    )
    skills_only = OpportunityFactory.create(
        title="Sound desk", ministry="Media", skills_required=["Sound engineering"]
    )
    urgent_tie = OpportunityFactory.create(
        title="Urgent sound desk",
        ministry="Media",
        skills_required=["sound"],
        urgency=Urgency.URGENT,
    )
    no_match = OpportunityFactory.create(title="Parking", ministry="Hospitality")
    check_only = OpportunityFactory.create(
        title="Security", ministry="Operations", background_check_required=True
    )
    past = OpportunityFactory.create(
        title="Last month",
        ministry="Worship",
        start_date=datetime(2026, 5, 1, 9, 0, tzinfo=timezone.utc),
    )
    closed = OpportunityFactory.create(
        title="Closed", ministry="Worship", status=OpportunityStatus.CANCELLED
    )
    await _seed(
        db_session, volunteer, best, skills_only, urgent_tie, no_match, check_only, past, closed
    )

    response = await volunteer_client.get(f"/volunteers/{volunteer.id}/matches")
    assert response.status_code == 200
    body = response.json()
    assert [o["title"] for o in body["opportunities"]] == [
        "Worship band",
        "Urgent sound desk",
        "Sound desk",
    ]
    assert body["total"] == 3
    top = body["opportunities"][0]
    assert top["matchScore"] == 90
    assert top["matchingSkills"] == ["Music"]
    assert top["matchingMinistries"] == ["Worship"]
    assert body["opportunities"][2]["matchScore"] == 30
