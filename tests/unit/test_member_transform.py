"""Unit tests for the member record transformer."""

import json
import uuid
from datetime import date
from types import SimpleNamespace

import pytest
from services.members_service.models import CareType, GroupRole, MembershipStatus
from services.members_service.services.transform import (
    decode_address,
    encode_address,
    member_to_flat,
    split_member_payload,
)


def _member(**overrides):
    defaults = dict(
        id=uuid.uuid4(),
        first_name="Ana",
        last_name="Ruiz",
        email="ana@example.com",
        phone=None,
        date_of_birth=date(1990, 4, 2),
        address=None,
        profile_photo=None,
        membership_status=MembershipStatus.ACTIVE,
        join_date=date(2024, 1, 7),
        tags=[],
        notes=None,
        gender=None,
        marital_status=None,
        is_active=True,
        emergency_contact=None,
        spiritual_journey=None,
        preferences=None,
        group_memberships=[],
        attendance=[],
        care_history=[],
        created_at=None,
        updated_at=None,
        created_by="system",
        updated_by="system",
    )
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


@pytest.mark.unit
class TestAddressCodec:
    def test_encode_then_decode(self):
        address = {"street": "1 Main St", "city": "Springfield"}
        assert decode_address(encode_address(address)) == address

    def test_encode_none(self):
        assert encode_address(None) is None

    @pytest.mark.parametrize("raw", [None, "", "{not json", "[1, 2]", '"just text"', "42"])
    def test_decode_bad_values_give_none(self, raw):
        assert decode_address(raw) is None

    @pytest.mark.parametrize(
        "raw",
        ['{"street": 5, "city": ["x"]}', '{"city": {"name": "Springfield"}}'],
    )
    def test_decode_wrongly_typed_fields_give_none(self, raw):
        assert decode_address(raw) is None

    def test_decode_accepts_camel_case_keys(self):
        assert decode_address('{"zipCode": "12345"}') == {"zip_code": "12345"}


@pytest.mark.unit
class TestMemberToFlat:
    def test_minimal_member(self):
        flat = member_to_flat(_member())
        assert flat["tags"] == []
        assert flat["emergency_contact"] is None
        assert flat["address"] is None
        assert "attendance" not in flat

    def test_sub_records_are_flattened(self):
        member = _member(
            tags=[SimpleNamespace(name="choir"), SimpleNamespace(name="youth")],
            address=json.dumps({"city": "Springfield"}),
            emergency_contact=SimpleNamespace(
                name="Luis Ruiz", contact_relationship="Brother", phone="555-0101", email=None
            ),
            group_memberships=[
                SimpleNamespace(
                    group_id=uuid.uuid4(),
                    group=SimpleNamespace(name="Worship Team"),
                    role=GroupRole.LEADER,
                    join_date=date(2025, 3, 1),
                )
            ],
        )
        flat = member_to_flat(member)
        assert flat["tags"] == ["choir", "youth"]
        assert flat["address"] == {"city": "Springfield"}
        assert flat["emergency_contact"] == {
            "name": "Luis Ruiz",
            "relationship": "Brother",
            "phone": "555-0101",
            "email": None,
        }
        assert flat["group_memberships"][0]["group_name"] == "Worship Team"
        assert flat["group_memberships"][0]["role"] == GroupRole.LEADER

    def test_history_is_newest_first(self):
        event_id = uuid.uuid4()
        member = _member(
            attendance=[
                SimpleNamespace(
                    event_id=event_id,
                    event=SimpleNamespace(name="Sunday Service"),
                    attendance_date=date(2026, 1, 4),
                    attended=True,
                ),
                SimpleNamespace(
                    event_id=event_id,
                    event=SimpleNamespace(name="Sunday Service"),
                    attendance_date=date(2026, 1, 11),
                    attended=False,
                ),
            ],
            care_history=[
                SimpleNamespace(
                    care_date=date(2025, 12, 1),
                    care_type=CareType.VISIT,
                    notes="Hospital visit",
                    care_giver="Pastor Kim",
                )
            ],
        )
        flat = member_to_flat(member, include_history=True)
        assert [a["date"] for a in flat["attendance"]] == [
            date(2026, 1, 11),
            date(2026, 1, 4),
        ]
        assert flat["care_history"] == [
            {
                "date": date(2025, 12, 1),
                "type": CareType.VISIT,
                "notes": "Hospital visit",
                "care_giver": "Pastor Kim",
            }
        ]


@pytest.mark.unit
class TestSplitMemberPayload:
    def test_separates_sub_records_and_tags(self):
        payload = split_member_payload(
            {
                "first_name": "Ana",
                "email": "ana@example.com",
                "address": {"city": "Springfield"},
                "tags": [" youth ", "choir", "youth", ""],
                "emergency_contact": {"name": "Luis", "relationship": "Brother"},
                "preferences": {"newsletter": False},
                "spiritual_journey": None,
            }
        )
        assert payload.base == {
            "first_name": "Ana",
            "email": "ana@example.com",
            "address": json.dumps({"city": "Springfield"}, sort_keys=True),
        }
        assert payload.tags == ["youth", "choir"]
        assert payload.emergency_contact == {
            "name": "Luis",
            "contact_relationship": "Brother",
        }
        assert payload.preferences == {"newsletter": False}
        assert payload.spiritual_journey is None

    def test_missing_tags_means_not_supplied(self):
        payload = split_member_payload({"first_name": "Ana"})
        assert payload.tags is None
        assert "address" not in payload.base
