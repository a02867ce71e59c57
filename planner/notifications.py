"""
Domain events handed to the notification scheduler.

Two trigger points exist:
- an RSVP was received (event level or for one function)
- an event or function is N days away

Delivery and scheduling happen outside this service; a publisher only
forwards the events.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from uuid import UUID

from planner.dates import as_utc, format_time
from planner.events.repository.orm_models import Event, EventFunction, Guest
from planner.functions.dtos import RSVPResponse
from planner.guests.dtos import RSVPStatus
from planner.models.base import utcnow

logger = logging.getLogger(__name__)

DEFAULT_REMINDER_DAYS = (7, 1, 0)
REMINDER_HOUR = 9

_RESPONSE_TEXT = {
    RSVPResponse.YES: "is coming",
    RSVPResponse.NO: "can't make it",
    RSVPResponse.MAYBE: "might come",
}

_STATUS_RESPONSES = {
    RSVPStatus.ATTENDING: RSVPResponse.YES,
    RSVPStatus.DECLINED: RSVPResponse.NO,
    RSVPStatus.MAYBE: RSVPResponse.MAYBE,
}


@dataclass(kw_only=True)
class DomainEvent:
    """Base domain event."""

    timestamp: datetime = field(default_factory=utcnow)
    event_type: str = ""


@dataclass(kw_only=True)
class RSVPReceivedEvent(DomainEvent):
    """Fired when a guest answers for the event or one of its functions."""

    event_id: UUID
    event_title: str
    guest_id: UUID
    guest_name: str
    response: RSVPResponse
    function_id: UUID | None = None
    function_name: str | None = None

    def __post_init__(self):
        self.event_type = "rsvp.received"

    @property
    def title(self) -> str:
        if self.function_name:
            return f"RSVP for {self.function_name}"
        return "New RSVP"

    @property
    def body(self) -> str:
        text = _RESPONSE_TEXT[self.response]
        if self.function_name:
            return f"{self.guest_name} {text} to {self.function_name} at {self.event_title}"
        return f"{self.guest_name} {text} to {self.event_title}"


@dataclass(kw_only=True)
class EventReminderEvent(DomainEvent):
    """An N-days-before reminder for an event or one of its functions."""

    event_id: UUID
    function_id: UUID | None
    name: str
    starts_at: datetime
    days_before: int
    fire_at: datetime

    def __post_init__(self):
        self.event_type = "event.reminder"

    @property
    def identifier(self) -> str:
        return f"event_reminder_{self.event_id}_{self.function_id or 'main'}_{self.days_before}"

    @property
    def title(self) -> str:
        if self.days_before == 0:
            return f"{self.name} is today!"
        if self.days_before == 1:
            return f"{self.name} is tomorrow"
        return f"{self.name} in {self.days_before} days"

    @property
    def body(self) -> str:
        if self.days_before == 0:
            return f"Don't forget about {self.name} at {format_time(self.starts_at)}"
        if self.days_before == 1:
            return f"Get ready for {self.name}"
        return f"Coming up: {self.name}"


def rsvp_received(
    event: Event,
    guest: Guest,
    response: RSVPResponse | RSVPStatus,
    function: EventFunction | None = None,
) -> RSVPReceivedEvent | None:
    """Build the notification for an answer; ``pending`` and ``waitlisted`` produce none."""
    if isinstance(response, RSVPStatus):
        response = _STATUS_RESPONSES.get(response)
        if response is None:
            return None
    return RSVPReceivedEvent(
        event_id=event.uuid,
        event_title=event.title,
        guest_id=guest.uuid,
        guest_name=guest.name,
        response=RSVPResponse(response),
        function_id=function.uuid if function else None,
        function_name=function.name if function else None,
    )


def reminder_triggers(
    event: Event,
    days_before: Iterable[int] = DEFAULT_REMINDER_DAYS,
    now: datetime | None = None,
) -> list[EventReminderEvent]:
    """Reminders for the event and each function that still lie in the future."""
    now = now or utcnow()
    days_before = sorted(set(days_before), reverse=True)
    targets = [(None, event.title, as_utc(event.starts_at))]
    targets += [(f.uuid, f.name, as_utc(f.starts_at)) for f in event.functions]

    reminders = []
    for function_id, name, starts_at in targets:
        for days in days_before:
            fire_at = (starts_at - timedelta(days=days)).replace(
                hour=REMINDER_HOUR, minute=0, second=0, microsecond=0
            )
            if fire_at <= now:
                continue
            reminders.append(
                EventReminderEvent(
                    event_id=event.uuid,
                    function_id=function_id,
                    name=name,
                    starts_at=starts_at,
                    days_before=days,
                    fire_at=fire_at,
                )
            )
    return reminders


class NotificationPublisher(ABC):
    @abstractmethod
    async def publish(self, event: DomainEvent) -> None:
        raise NotImplementedError


class LoggingNotificationPublisher(NotificationPublisher):
    async def publish(self, event: DomainEvent) -> None:
        logger.info("Notification %s: %s", event.event_type, event)
