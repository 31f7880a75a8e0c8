"""Integration tests for group and group membership endpoints."""

import uuid

import pytest
from tests.factories import GroupFactory, MemberFactory


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_group_and_reject_duplicate_name(members_client):
    response = await members_client.post(
        "/groups/", json={"name": "Worship Team", "groupType": "ministry"}
    )
    assert response.status_code == 201
    body = response.json()
    assert body["name"] == "Worship Team"
    assert body["groupType"] == "ministry"
    assert body["isActive"] is True
    assert body["memberCount"] == 0

    duplicate = await members_client.post("/groups/", json={"name": "Worship Team"})
    assert duplicate.status_code == 400
    assert duplicate.json() == {"error": "Group with this name already exists"}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_groups_with_member_counts(members_client, db_session):
    alpha = GroupFactory.create(name="Alpha")
    beta = GroupFactory.create(name="Beta", is_active=False)
    member = MemberFactory.create()
    db_session.add_all([alpha, beta, member])
    await db_session.commit()

    added = await members_client.post(
        f"/groups/{alpha.id}/members", json={"memberId": str(member.id)}
    )
    assert added.status_code == 201

    body = (await members_client.get("/groups/")).json()
    assert body["total"] == 2
    assert [(g["name"], g["memberCount"]) for g in body["groups"]] == [
        ("Alpha", 1),
        ("Beta", 0),
    ]

    active_only = (await members_client.get("/groups/", params={"active": "true"})).json()
    assert [g["name"] for g in active_only["groups"]] == ["Alpha"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_add_member_defaults_role_and_join_date(members_client, db_session):
    group = GroupFactory.create(name="Youth")
    member = MemberFactory.create()
    db_session.add_all([group, member])
    await db_session.commit()

    response = await members_client.post(
        f"/groups/{group.id}/members", json={"memberId": str(member.id)}
    )
    assert response.status_code == 201
    body = response.json()
    assert body["role"] == "member"
    assert body["joinDate"] == "2026-06-15"

    detail = (await members_client.get(f"/members/{member.id}")).json()
    assert detail["groupMemberships"] == [
        {
            "groupId": str(group.id),
            "groupName": "Youth",
            "role": "member",
            "joinDate": "2026-06-15",
        }
    ]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_add_member_twice_is_rejected(members_client, db_session):
    group = GroupFactory.create()
    member = MemberFactory.create()
    db_session.add_all([group, member])
    await db_session.commit()

    payload = {"memberId": str(member.id), "role": "leader", "joinDate": "2025-09-01"}
    first = await members_client.post(f"/groups/{group.id}/members", json=payload)
    assert first.status_code == 201
    assert first.json()["role"] == "leader"
    assert first.json()["joinDate"] == "2025-09-01"

    second = await members_client.post(f"/groups/{group.id}/members", json=payload)
    assert second.status_code == 400
    assert second.json() == {"error": "Member is already in this group"}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_add_member_unknown_group_or_member(members_client, db_session):
    group = GroupFactory.create()
    db_session.add(group)
    await db_session.commit()

    response = await members_client.post(
        f"/groups/{uuid.uuid4()}/members", json={"memberId": str(uuid.uuid4())}
    )
    assert response.status_code == 404
    assert response.json() == {"error": "Group not found"}

    response = await members_client.post(
        f"/groups/{group.id}/members", json={"memberId": str(uuid.uuid4())}
    )
    assert response.status_code == 404
    assert response.json() == {"error": "Member not found"}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_remove_member_from_group(members_client, db_session):
    group = GroupFactory.create()
    member = MemberFactory.create()
    db_session.add_all([group, member])
    await db_session.commit()
    await members_client.post(f"/groups/{group.id}/members", json={"memberId": str(member.id)})

    response = await members_client.delete(f"/groups/{group.id}/members/{member.id}")
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Member removed from group"}

    again = await members_client.delete(f"/groups/{group.id}/members/{member.id}")
    assert again.status_code == 404
    assert again.json() == {"error": "Member is not in this group"}
