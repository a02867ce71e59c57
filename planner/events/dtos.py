from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from planner.events.repository.orm_models import Event


class EventPrivacy(str, Enum):
    PUBLIC = "public"
    UNLISTED = "unlisted"
    INVITE_ONLY = "inviteOnly"


class EventCategory(str, Enum):
    WEDDING = "wedding"
    PARTY = "party"
    OFFICE = "office"
    CONFERENCE = "conference"
    CONCERT = "concert"
    MEETUP = "meetup"
    CUSTOM = "custom"


class EventFeature(str, Enum):
    FUNCTIONS = "functions"
    GUEST_MANAGEMENT = "guestManagement"
    TICKETING = "ticketing"
    BUDGET = "budget"
    SEATING = "seating"
    SCHEDULE = "schedule"
    ACTIVITY = "activity"
    PHOTOS = "photos"


DEFAULT_FEATURES: dict[EventCategory, frozenset[EventFeature]] = {
    EventCategory.WEDDING: frozenset(
        {
            EventFeature.FUNCTIONS,
            EventFeature.GUEST_MANAGEMENT,
            EventFeature.BUDGET,
            EventFeature.SEATING,
            EventFeature.ACTIVITY,
            EventFeature.PHOTOS,
        }
    ),
    EventCategory.PARTY: frozenset(
        {EventFeature.GUEST_MANAGEMENT, EventFeature.BUDGET, EventFeature.ACTIVITY, EventFeature.PHOTOS}
    ),
    EventCategory.OFFICE: frozenset(
        {EventFeature.GUEST_MANAGEMENT, EventFeature.BUDGET, EventFeature.SCHEDULE, EventFeature.ACTIVITY}
    ),
    EventCategory.CONFERENCE: frozenset(
        {EventFeature.TICKETING, EventFeature.SCHEDULE, EventFeature.ACTIVITY}
    ),
    EventCategory.CONCERT: frozenset({EventFeature.TICKETING, EventFeature.ACTIVITY}),
    EventCategory.MEETUP: frozenset({EventFeature.GUEST_MANAGEMENT, EventFeature.ACTIVITY}),
    EventCategory.CUSTOM: frozenset({EventFeature.GUEST_MANAGEMENT, EventFeature.ACTIVITY}),
}


@dataclass(frozen=True)
class EventSummaryDTO:
    """Guest and RSVP counters, computed from the guest list on every read."""

    guest_count: int
    attending_count: int
    maybe_count: int
    pending_count: int
    declined_count: int
    waitlisted_count: int
    total_guest_headcount: int
    attending_headcount: int
    capacity: int | None = None
    spots_remaining: int | None = None
    is_full: bool = False


@dataclass(frozen=True)
class EventDTO:
    """DTO for event data."""

    id: UUID
    title: str
    starts_at: datetime
    privacy: EventPrivacy
    category: EventCategory
    version: int | None
    enabled_features: list[str] = field(default_factory=list)
    description: str | None = None
    ends_at: datetime | None = None
    location_name: str | None = None
    capacity: int | None = None
    host_id: UUID | None = None
    share_link: str | None = None

    @classmethod
    def from_event(cls, event: "Event", share_link: str | None = None) -> "EventDTO":
        return cls(
            id=event.uuid,
            title=event.title,
            starts_at=event.starts_at,
            privacy=EventPrivacy(event.privacy),
            category=EventCategory(event.category),
            version=event.version,
            enabled_features=sorted(event.enabled_features or []),
            description=event.description,
            ends_at=event.ends_at,
            location_name=event.location_name,
            capacity=event.capacity,
            host_id=event.host_id,
            share_link=share_link,
        )
