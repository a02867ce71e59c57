from datetime import UTC, datetime, timedelta

import pytest

from planner.functions import invitations
from planner.functions.dtos import RSVPResponse
from planner.guests import party
from planner.guests.dtos import RSVPStatus
from planner.notifications import (
    LoggingNotificationPublisher,
    reminder_triggers,
    rsvp_received,
)


@pytest.fixture
def guest(event):
    return party.add_guest(event, "Alice Smith")


@pytest.mark.parametrize(
    "status, body",
    [
        (RSVPStatus.ATTENDING, "Alice Smith is coming to Summer Wedding"),
        (RSVPStatus.DECLINED, "Alice Smith can't make it to Summer Wedding"),
        (RSVPStatus.MAYBE, "Alice Smith might come to Summer Wedding"),
    ],
)
def test_event_rsvp_notification(event, guest, status, body):
    notification = rsvp_received(event, guest, status)

    assert notification.event_type == "rsvp.received"
    assert notification.title == "New RSVP"
    assert notification.body == body
    assert notification.function_id is None


@pytest.mark.parametrize("status", [RSVPStatus.PENDING, RSVPStatus.WAITLISTED])
def test_no_notification_without_an_answer(event, guest, status):
    assert rsvp_received(event, guest, status) is None


def test_function_rsvp_notification(event, guest, starts_at):
    mehndi = invitations.add_function(event, "Mehndi", starts_at)

    notification = rsvp_received(event, guest, RSVPResponse.YES, mehndi)

    assert notification.title == "RSVP for Mehndi"
    assert notification.body == "Alice Smith is coming to Mehndi at Summer Wedding"
    assert notification.function_id == mehndi.uuid


def test_reminders_for_event_and_functions(event, starts_at):
    mehndi = invitations.add_function(event, "Mehndi", starts_at - timedelta(days=1))
    now = datetime(2030, 6, 1, tzinfo=UTC)

    reminders = reminder_triggers(event, now=now)

    assert len(reminders) == 6
    week_before = reminders[0]
    assert week_before.function_id is None
    assert week_before.days_before == 7
    assert week_before.fire_at == datetime(2030, 6, 8, 9, 0, tzinfo=UTC)
    assert week_before.title == "Summer Wedding in 7 days"
    assert week_before.body == "Coming up: Summer Wedding"
    assert week_before.identifier == f"event_reminder_{event.uuid}_main_7"

    day_of = [r for r in reminders if r.function_id == mehndi.uuid and r.days_before == 0][0]
    assert day_of.title == "Mehndi is today!"
    assert day_of.body == "Don't forget about Mehndi at 7:00 PM"
    assert day_of.identifier == f"event_reminder_{event.uuid}_{mehndi.uuid}_0"

    tomorrow = [r for r in reminders if r.function_id is None and r.days_before == 1][0]
    assert tomorrow.title == "Summer Wedding is tomorrow"
    assert tomorrow.body == "Get ready for Summer Wedding"


def test_past_reminders_are_skipped(event):
    now = datetime(2030, 6, 14, 12, 0, tzinfo=UTC)

    reminders = reminder_triggers(event, now=now)

    assert [r.days_before for r in reminders] == [0]


def test_custom_reminder_days(event):
    reminders = reminder_triggers(event, days_before=[1, 3, 3], now=datetime(2030, 1, 1, tzinfo=UTC))

    assert [r.days_before for r in reminders] == [3, 1]


@pytest.mark.asyncio
async def test_logging_publisher(event, guest, caplog):
    caplog.set_level("INFO", logger="planner.notifications")

    await LoggingNotificationPublisher().publish(rsvp_received(event, guest, RSVPStatus.ATTENDING))

    assert "rsvp.received" in caplog.text
