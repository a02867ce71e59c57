import json
from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from planner.events import aggregate
from planner.events.export import build_user_export
from planner.functions import invitations
from planner.guests import party
from planner.guests.dtos import RSVPStatus

EXPORT_DATE = datetime(2030, 1, 2, 3, 4, 5, 678000, tzinfo=UTC)


@pytest.fixture
def user_id():
    return uuid4()


@pytest.fixture
def hosted(user_id, starts_at):
    event = aggregate.create_event(
        "Summer Wedding",
        starts_at,
        ends_at=starts_at + timedelta(hours=6),
        location_name="Lakeside Gardens",
        host_id=user_id,
    )
    event.created_at = datetime(2029, 12, 1, 8, 30, tzinfo=UTC)
    invitations.add_function(event, "Mehndi", starts_at - timedelta(days=1))
    party.add_guest(event, "Alice Smith")
    return event


@pytest.fixture
def attending(user_id, starts_at):
    event = aggregate.create_event("Office Party", starts_at + timedelta(days=30))
    guest = party.add_guest(event, "Pat Lee", user_id=user_id)
    party.set_rsvp(guest, RSVPStatus.ATTENDING)
    guest.responded_at = datetime(2030, 1, 1, 12, 0, 0, 123456, tzinfo=UTC)
    return event


def test_export_document(user_id, hosted, attending):
    unrelated = aggregate.create_event("Someone Else's", hosted.starts_at)

    export = build_user_export(
        user_id, "Pat Lee", None, [hosted, attending, unrelated], export_date=EXPORT_DATE
    )
    data = json.loads(export.to_json())

    assert data["exportDate"] == "2030-01-02T03:04:05Z"
    assert data["appVersion"] == "0.1.0"
    assert data["profile"] == {"id": str(user_id), "name": "Pat Lee"}
    assert data["tickets"] == []

    [hosted_data] = data["hostedEvents"]
    assert hosted_data == {
        "id": str(hosted.uuid),
        "title": "Summer Wedding",
        "category": "party",
        "startDate": "2030-06-15T19:00:00Z",
        "endDate": "2030-06-16T01:00:00Z",
        "location": "Lakeside Gardens",
        "privacy": "inviteOnly",
        "createdAt": "2029-12-01T08:30:00Z",
        "guestCount": 1,
        "functions": [{"name": "Mehndi", "date": "2030-06-14T19:00:00Z"}],
    }

    [attending_data] = data["attendingEvents"]
    assert attending_data == {
        "eventTitle": "Office Party",
        "eventDate": "2030-07-15T19:00:00Z",
        "rsvpStatus": "attending",
        "respondedAt": "2030-01-01T12:00:00Z",
    }


def test_export_keys_are_sorted(user_id, hosted):
    text = build_user_export(user_id, "Pat Lee", "pat@example.com", [hosted], EXPORT_DATE).to_json()

    top_level = list(json.loads(text))
    assert top_level == sorted(top_level)
    assert '"email": "pat@example.com"' in text


def test_export_for_user_without_events(user_id):
    data = json.loads(build_user_export(user_id, "Pat Lee", None, []).to_json())

    assert data["hostedEvents"] == []
    assert data["attendingEvents"] == []
    assert data["exportDate"].endswith("Z")


def test_naive_datetimes_are_treated_as_utc(user_id, hosted):
    hosted.starts_at = datetime(2030, 6, 15, 19, 0)

    export = build_user_export(user_id, "Pat Lee", None, [hosted], EXPORT_DATE)

    assert json.loads(export.to_json())["hostedEvents"][0]["startDate"] == "2030-06-15T19:00:00Z"
