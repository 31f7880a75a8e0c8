"""Integration tests for volunteer opportunities and the signup lifecycle."""

import uuid
from datetime import date, datetime, timezone

import pytest
from services.volunteer_service.models import (
    BackgroundCheckStatus,
    OpportunityStatus,
    SignupStatus,
    Urgency,
    VolunteerHour,
    VolunteerOpportunity,
)
from services.volunteer_service.services.signups import WAITLIST_MESSAGE
from sqlalchemy import select
from tests.factories import (
    MemberFactory,
    OpportunityFactory,
    SignupFactory,
    VolunteerFactory,
)


def _at(month: int, day: int) -> datetime:
    return datetime(2026, month, day, 9, 0, tzinfo=timezone.utc)


async def _seed(db_session, *rows):
    db_session.add_all(rows)
    await db_session.commit()
    return rows


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_orders_by_urgency_then_start(volunteer_client, db_session):
    await _seed(
        db_session,
        OpportunityFactory.create(title="Normal", start_date=_at(7, 5)),
        OpportunityFactory.create(title="Urgent later", urgency=Urgency.URGENT, start_date=_at(7, 10)),
        OpportunityFactory.create(title="Urgent sooner", urgency=Urgency.URGENT, start_date=_at(7, 1)),
        OpportunityFactory.create(title="Low", urgency=Urgency.LOW, start_date=_at(6, 20)),
        OpportunityFactory.create(
            title="Cancelled high",
            urgency=Urgency.HIGH,
            status=OpportunityStatus.CANCELLED,
        ),
    )

    body = (await volunteer_client.get("/volunteer-opportunities/")).json()
    assert body["total"] == 4
    assert [o["title"] for o in body["opportunities"]] == [
        "Urgent sooner",
        "Urgent later",
        "Normal",
        "Low",
    ]

    everything = (
        await volunteer_client.get("/volunteer-opportunities/", params={"status": "all"})
    ).json()
    assert [o["title"] for o in everything["opportunities"]] == [
        "Urgent sooner",
        "Urgent later",
        "Cancelled high",
        "Normal",
        "Low",
    ]

    cancelled = (
        await volunteer_client.get(
            "/volunteer-opportunities/", params={"status": "cancelled,draft"}
        )
    ).json()
    assert [o["title"] for o in cancelled["opportunities"]] == ["Cancelled high"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_filters(volunteer_client, db_session):
    await _seed(
        db_session,
        OpportunityFactory.create(
            title="Choir stand-in",
            ministry="Worship Arts",
            skills_required=["Singing"],
            urgency=Urgency.HIGH,
        ),
        OpportunityFactory.create(
            title="Coffee bar",
            description="Serve coffee after the choir rehearsal",
            ministry="Hospitality",
            skills_required=["Barista", "Cash handling"],
        ),
        OpportunityFactory.create(
            title="Past cleanup", ministry="Facilities", start_date=_at(6, 1)
        ),
    )

    async def titles(params):
        response = await volunteer_client.get("/volunteer-opportunities/", params=params)
        assert response.status_code == 200
        return sorted(o["title"] for o in response.json()["opportunities"])

    assert await titles({"ministry": "worship"}) == ["Choir stand-in"]
    assert await titles({"urgency": "high"}) == ["Choir stand-in"]
    assert await titles({"skills": "Barista,Welding"}) == ["Coffee bar"]
    assert await titles({"search": "choir"}) == ["Choir stand-in", "Coffee bar"]
    assert await titles({"upcoming": "true"}) == ["Choir stand-in", "Coffee bar"]


@pytest.mark.asyncio
@pytest.mark.integration
@pytest.mark.parametrize("params", [{"status": "closed"}, {"urgency": "extreme"}, {"limit": 0}])
async def test_list_rejects_bad_filters(volunteer_client, params):
    response = await volunteer_client.get("/volunteer-opportunities/", params=params)
    assert response.status_code == 400
    assert "error" in response.json()


# ---------------------------------------------------------------------------
# Create, update, delete
# ---------------------------------------------------------------------------


def _new_opportunity(coordinator_id, **overrides):
    payload = {
        "title": "Greeter",
        "ministry": "Hospitality",
        "startDate": "2026-07-05T09:00:00Z",
        "coordinatorId": str(coordinator_id),
        "skillsRequired": ["Friendly"],
        "maxVolunteers": 2,
    }
    payload.update(overrides)
    return payload


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_opportunity(volunteer_client, db_session):
    coordinator = MemberFactory.create(first_name="Ruth", last_name="Cole")
    await _seed(db_session, coordinator)

    response = await volunteer_client.post(
        "/volunteer-opportunities/", json=_new_opportunity(coordinator.id)
    )
    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "open"
    assert body["urgency"] == "normal"
    assert body["currentVolunteers"] == 0
    assert body["signupCount"] == 0
    assert body["coordinator"]["firstName"] == "Ruth"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_opportunity_unknown_coordinator(volunteer_client):
    response = await volunteer_client.post(
        "/volunteer-opportunities/", json=_new_opportunity(uuid.uuid4())
    )
    assert response.status_code == 404
    assert response.json() == {"error": "Coordinator not found"}


@pytest.mark.asyncio
@pytest.mark.integration
@pytest.mark.parametrize(
    "overrides",
    [
        {"currentVolunteers": 3},
        {"minAge": 30, "maxAge": 18},
        {"endDate": "2026-07-04T09:00:00Z"},
        {"title": ""},
        {"status": "closed"},
    ],
)
async def test_create_opportunity_rejects_invalid(volunteer_client, db_session, overrides):
    coordinator = MemberFactory.create()
    await _seed(db_session, coordinator)

    response = await volunteer_client.post(
        "/volunteer-opportunities/", json=_new_opportunity(coordinator.id, **overrides)
    )
    assert response.status_code == 400
    assert "error" in response.json()


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_cannot_shrink_below_seated(volunteer_client, db_session, session_factory):
    opportunity = OpportunityFactory.create(max_volunteers=3, current_volunteers=2)
    await _seed(db_session, opportunity)

    response = await volunteer_client.patch(
        f"/volunteer-opportunities/{opportunity.id}",
        json={"maxVolunteers": 1, "title": "Renamed"},
    )
    assert response.status_code == 400
    assert response.json() == {"error": "currentVolunteers cannot exceed maxVolunteers"}

    async with session_factory() as session:
        stored = await session.get(VolunteerOpportunity, opportunity.id)
        assert stored.max_volunteers == 3
        assert stored.title == "Greeter"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_opportunity_fields(volunteer_client, db_session):
    opportunity = OpportunityFactory.create(min_age=16)
    await _seed(db_session, opportunity)

    response = await volunteer_client.put(
        f"/volunteer-opportunities/{opportunity.id}",
        json={"urgency": "urgent", "status": None, "description": "Bring a name tag"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["urgency"] == "urgent"
    assert body["status"] == "open"
    assert body["description"] == "Bring a name tag"

    bad_ages = await volunteer_client.patch(
        f"/volunteer-opportunities/{opportunity.id}", json={"maxAge": 12}
    )
    assert bad_ages.status_code == 400
    assert bad_ages.json() == {"error": "minAge must not be greater than maxAge"}

    missing = await volunteer_client.patch(
        f"/volunteer-opportunities/{uuid.uuid4()}", json={"title": "x"}
    )
    assert missing.status_code == 404
    assert missing.json() == {"error": "Volunteer opportunity not found"}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_delete_opportunity_keeps_hours(volunteer_client, db_session, session_factory):
    volunteer = VolunteerFactory.create()
    opportunity = OpportunityFactory.create()
    await _seed(db_session, volunteer, opportunity)
    hour = VolunteerHour(
        volunteer_id=volunteer.id,
        opportunity_id=opportunity.id,
        work_date=date(2026, 5, 1),
        hours_worked=2,
    )
    db_session.add_all(
        [hour, SignupFactory.create(volunteer_id=volunteer.id, opportunity_id=opportunity.id)]
    )
    await db_session.commit()

    response = await volunteer_client.delete(f"/volunteer-opportunities/{opportunity.id}")
    assert response.status_code == 200
    assert response.json()["message"] == "Volunteer opportunity deleted successfully"

    assert (
        await volunteer_client.get(f"/volunteer-opportunities/{opportunity.id}")
    ).status_code == 404
    async with session_factory() as session:
        kept = (await session.execute(select(VolunteerHour))).scalar_one()
        assert kept.id == hour.id
        assert kept.opportunity_id is None


# ---------------------------------------------------------------------------
# Search and stats
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_search_without_volunteer(volunteer_client, db_session):
    await _seed(
        db_session,
        OpportunityFactory.create(title="Normal", ministry="Kids"),
        OpportunityFactory.create(title="High", ministry="Kids", urgency=Urgency.HIGH),
        OpportunityFactory.create(title="Urgent", ministry="Media", urgency=Urgency.URGENT),
        OpportunityFactory.create(title="Past", urgency=Urgency.URGENT, start_date=_at(6, 1)),
        OpportunityFactory.create(title="Inactive", urgency=Urgency.URGENT, is_active=False),
    )

    body = (await volunteer_client.get("/volunteer-opportunities/search")).json()
    assert [o["title"] for o in body["opportunities"]] == ["Urgent", "High", "Normal"]
    assert body["total"] == 3

    urgent = (
        await volunteer_client.get("/volunteer-opportunities/search", params={"urgent": "true"})
    ).json()
    assert [o["title"] for o in urgent["opportunities"]] == ["Urgent", "High"]

    kids = (
        await volunteer_client.get("/volunteer-opportunities/search", params={"ministry": "kid"})
    ).json()
    assert [o["title"] for o in kids["opportunities"]] == ["High", "Normal"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_search_with_volunteer_scores_results(volunteer_client, db_session):
    volunteer = VolunteerFactory.create(
        skills=["Teaching"],
        preferred_ministries=["Kids"],
        background_check=BackgroundCheckStatus.APPROVED,
    )
    await _seed(
        db_session,
        volunteer,
        OpportunityFactory.create(
            title="Sunday school",
            ministry="Kids",
            skills_required=["teaching"],
            background_check_required=True,
        ),
        OpportunityFactory.create(title="Nursery", ministry="Kids"),
        OpportunityFactory.create(title="Parking", ministry="Hospitality"),
        OpportunityFactory.create(
            title="Security", ministry="Operations", background_check_required=True
        ),
    )

    body = (
        await volunteer_client.get(
            "/volunteer-opportunities/search", params={"volunteerId": str(volunteer.id)}
        )
    ).json()
    assert [(o["title"], o["matchScore"]) for o in body["opportunities"]] == [
        ("Sunday school", 90),
        ("Nursery", 40),
    ]

    unknown = (
        await volunteer_client.get(
            "/volunteer-opportunities/search", params={"volunteerId": str(uuid.uuid4())}
        )
    ).json()
    assert unknown == {"opportunities": [], "total": 0}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_opportunity_stats(volunteer_client, db_session):
    await _seed(
        db_session,
        OpportunityFactory.create(ministry="Kids", urgency=Urgency.URGENT),
        OpportunityFactory.create(ministry="Kids"),
        OpportunityFactory.create(ministry="Media", status=OpportunityStatus.FILLED),
        OpportunityFactory.create(
            ministry="Media", urgency=Urgency.URGENT, status=OpportunityStatus.CANCELLED
        ),
        OpportunityFactory.create(ministry="Facilities", is_active=False),
    )

    body = (await volunteer_client.get("/volunteer-opportunities/stats")).json()
    assert body["totalOpportunities"] == 5
    assert body["activeOpportunities"] == 4
    assert body["openOpportunities"] == 3
    assert body["urgentOpportunities"] == 1
    assert body["ministryBreakdown"] == [
        {"ministry": "Kids", "count": 2},
        {"ministry": "Media", "count": 2},
    ]
    assert body["statusBreakdown"] == [
        {"status": "cancelled", "count": 1},
        {"status": "filled", "count": 1},
        {"status": "open", "count": 3},
    ]


# ---------------------------------------------------------------------------
# Signups
# ---------------------------------------------------------------------------


async def _sign_up(client, opportunity_id, volunteer_id, **extra):
    return await client.post(
        f"/volunteer-opportunities/{opportunity_id}/signup",
        json={"volunteerId": str(volunteer_id), **extra},
    )


async def _set_status(client, opportunity_id, signup_id, status, **extra):
    return await client.patch(
        f"/volunteer-opportunities/{opportunity_id}/signups/{signup_id}",
        json={"status": status, **extra},
    )


@pytest.mark.asyncio
@pytest.mark.integration
async def test_signup_lifecycle_with_capacity_and_waitlist(volunteer_client, db_session):
    opportunity = OpportunityFactory.create(max_volunteers=2)
    volunteers = [VolunteerFactory.create() for _ in range(4)]
    await _seed(db_session, opportunity, *volunteers)
    opp_id = opportunity.id

    signup_ids = []
    for volunteer in volunteers[:2]:
        response = await _sign_up(volunteer_client, opp_id, volunteer.id)
        assert response.status_code == 201
        assert response.json()["signup"]["status"] == "pending"
        assert response.json()["message"] is None
        signup_ids.append(response.json()["signup"]["id"])

    first = await _set_status(volunteer_client, opp_id, signup_ids[0], "confirmed")
    assert first.status_code == 200
    assert first.json()["confirmedBy"] == "system"
    assert first.json()["confirmedAt"] is not None
    await _set_status(volunteer_client, opp_id, signup_ids[1], "confirmed")

    detail = (await volunteer_client.get(f"/volunteer-opportunities/{opp_id}")).json()
    assert detail["currentVolunteers"] == 2
    assert detail["status"] == "filled"
    assert detail["signupCount"] == 2

    for volunteer in volunteers[2:]:
        response = await _sign_up(volunteer_client, opp_id, volunteer.id)
        assert response.status_code == 201
        assert response.json()["signup"]["status"] == "waitlisted"
        assert response.json()["message"] == WAITLIST_MESSAGE
        signup_ids.append(response.json()["signup"]["id"])

    over = await _set_status(volunteer_client, opp_id, signup_ids[2], "confirmed")
    assert over.status_code == 400
    assert over.json() == {"error": "Opportunity is at capacity"}

    declined = await _set_status(
        volunteer_client, opp_id, signup_ids[0], "declined", declinedReason="Travelling"
    )
    assert declined.status_code == 200
    assert declined.json()["declinedReason"] == "Travelling"

    detail = (await volunteer_client.get(f"/volunteer-opportunities/{opp_id}")).json()
    assert detail["currentVolunteers"] == 1
    assert detail["status"] == "open"
    statuses = {s["id"]: s["status"] for s in detail["signups"]}
    assert statuses[signup_ids[2]] == "pending"
    assert statuses[signup_ids[3]] == "waitlisted"

    cancelled = await _set_status(volunteer_client, opp_id, signup_ids[1], "cancelled")
    assert cancelled.status_code == 200
    detail = (await volunteer_client.get(f"/volunteer-opportunities/{opp_id}")).json()
    assert detail["currentVolunteers"] == 0


@pytest.mark.asyncio
@pytest.mark.integration
async def test_complete_signup_records_feedback(volunteer_client, db_session):
    opportunity = OpportunityFactory.create(max_volunteers=5, current_volunteers=1)
    volunteer = VolunteerFactory.create()
    await _seed(db_session, opportunity, volunteer)
    signup = SignupFactory.create(
        volunteer_id=volunteer.id,
        opportunity_id=opportunity.id,
        status=SignupStatus.CONFIRMED,
    )
    await _seed(db_session, signup)

    response = await _set_status(
        volunteer_client,
        opportunity.id,
        signup.id,
        "completed",
        actualHours=3.5,
        feedback="Great morning",
        rating=5,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "completed"
    assert body["actualHours"] == 3.5
    assert body["rating"] == 5
    assert body["completedAt"] is not None

    detail = (await volunteer_client.get(f"/volunteer-opportunities/{opportunity.id}")).json()
    assert detail["currentVolunteers"] == 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_signup_rejections(volunteer_client, db_session):
    opportunity = OpportunityFactory.create()
    cancelled = OpportunityFactory.create(status=OpportunityStatus.CANCELLED)
    volunteer = VolunteerFactory.create()
    await _seed(db_session, opportunity, cancelled, volunteer)

    closed = await _sign_up(volunteer_client, cancelled.id, volunteer.id)
    assert closed.status_code == 400
    assert closed.json() == {"error": "This opportunity is no longer accepting signups"}

    unknown_volunteer = await _sign_up(volunteer_client, opportunity.id, uuid.uuid4())
    assert unknown_volunteer.status_code == 404
    assert unknown_volunteer.json() == {"error": "Volunteer not found"}

    unknown_opportunity = await _sign_up(volunteer_client, uuid.uuid4(), volunteer.id)
    assert unknown_opportunity.status_code == 404

    assert (await _sign_up(volunteer_client, opportunity.id, volunteer.id)).status_code == 201
    duplicate = await _sign_up(volunteer_client, opportunity.id, volunteer.id)
    assert duplicate.status_code == 400
    assert duplicate.json() == {"error": "Volunteer already signed up for this opportunity"}

    other_day = await _sign_up(
        volunteer_client, opportunity.id, volunteer.id, scheduledDate="2026-07-12"
    )
    assert other_day.status_code == 201

    missing_signup = await _set_status(
        volunteer_client, opportunity.id, uuid.uuid4(), "confirmed"
    )
    assert missing_signup.status_code == 404
    assert missing_signup.json() == {"error": "Signup not found"}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_signups_by_status(volunteer_client, db_session):
    opportunity = OpportunityFactory.create()
    first = VolunteerFactory.create()
    second = VolunteerFactory.create()
    await _seed(db_session, opportunity, first, second)
    await _seed(
        db_session,
        SignupFactory.create(
            volunteer_id=first.id, opportunity_id=opportunity.id, status=SignupStatus.PENDING
        ),
        SignupFactory.create(
            volunteer_id=second.id,
            opportunity_id=opportunity.id,
            status=SignupStatus.WAITLISTED,
        ),
    )

    body = (
        await volunteer_client.get(f"/volunteer-opportunities/{opportunity.id}/signups")
    ).json()
    assert body["total"] == 2

    waitlisted = (
        await volunteer_client.get(
            f"/volunteer-opportunities/{opportunity.id}/signups",
            params={"status": "waitlisted"},
        )
    ).json()
    assert [s["volunteerId"] for s in waitlisted["signups"]] == [str(second.id)]
