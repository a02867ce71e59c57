from datetime import timedelta

import pytest

from planner.errors import NotFoundError, ValidationError
from planner.events import aggregate
from planner.events.dtos import EventCategory, EventFeature
from planner.guests import party
from planner.guests.dtos import RSVPStatus


def test_create_event_applies_category_features(starts_at):
    event = aggregate.create_event("Launch", starts_at, category=EventCategory.CONCERT)

    assert event.title == "Launch"
    assert aggregate.has_feature(event, EventFeature.TICKETING)
    assert not aggregate.has_feature(event, EventFeature.SEATING)
    assert event.guests == []
    assert event.budget is None


def test_create_event_with_explicit_features(starts_at):
    event = aggregate.create_event(
        "Launch", starts_at, enabled_features=[EventFeature.BUDGET, EventFeature.SEATING]
    )

    assert event.enabled_features == ["budget", "seating"]


@pytest.mark.parametrize("title", ["", "   ", None])
def test_create_event_requires_title(starts_at, title):
    with pytest.raises(ValidationError) as exc_info:
        aggregate.create_event(title, starts_at)

    assert exc_info.value.operation == "create_event"
    assert exc_info.value.entity == "Event"


def test_create_event_rejects_end_before_start(starts_at):
    with pytest.raises(ValidationError):
        aggregate.create_event("Launch", starts_at, ends_at=starts_at - timedelta(hours=1))


@pytest.mark.parametrize("capacity", [0, -5])
def test_create_event_rejects_non_positive_capacity(starts_at, capacity):
    with pytest.raises(ValidationError):
        aggregate.create_event("Launch", starts_at, capacity=capacity)


def test_update_event_details_keeps_omitted_fields(event):
    aggregate.update_event_details(event, title="Autumn Wedding", capacity=80)

    assert event.title == "Autumn Wedding"
    assert event.capacity == 80
    assert event.location_name == "Lakeside Gardens"


def test_update_event_details_clears_optional_field(event):
    aggregate.update_event_details(event, location_name=None)

    assert event.location_name is None


def test_update_event_details_rejects_invalid_change_without_mutating(event):
    with pytest.raises(ValidationError):
        aggregate.update_event_details(event, title="Renamed", ends_at=event.starts_at - timedelta(days=1))

    assert event.title == "Summer Wedding"
    assert event.ends_at is None


def test_summary_counts_every_status(event):
    statuses = [
        RSVPStatus.ATTENDING,
        RSVPStatus.ATTENDING,
        RSVPStatus.MAYBE,
        RSVPStatus.DECLINED,
        RSVPStatus.WAITLISTED,
        RSVPStatus.PENDING,
    ]
    for index, status in enumerate(statuses):
        guest = party.add_guest(event, f"Guest {index}", plus_one_count=1 if index == 0 else 0)
        party.set_rsvp(guest, status)

    summary = aggregate.summarize(event)

    assert summary.guest_count == 6
    assert summary.attending_count == 2
    assert summary.maybe_count == 1
    assert summary.declined_count == 1
    assert summary.waitlisted_count == 1
    # Waitlisted guests still owe an answer
    assert summary.pending_count == 2
    assert summary.total_guest_headcount == 7
    assert summary.attending_headcount == 3
    assert summary.spots_remaining is None
    assert summary.is_full is False


def test_capacity_is_advisory(event):
    event.capacity = 1
    for name in ("Ann", "Ben"):
        party.set_rsvp(party.add_guest(event, name), RSVPStatus.ATTENDING)

    summary = aggregate.summarize(event)

    assert summary.guest_count == 2
    assert summary.spots_remaining == 0
    assert summary.is_full is True


def test_lookups_raise_not_found(event):
    with pytest.raises(NotFoundError) as exc_info:
        aggregate.get_guest(event, event.uuid, "set_rsvp")

    assert exc_info.value.entity == "Guest"
    assert exc_info.value.operation == "set_rsvp"

    with pytest.raises(NotFoundError):
        aggregate.get_budget(event)
