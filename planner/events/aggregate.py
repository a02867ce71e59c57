"""Event aggregate operations.

The Event row and the collections hanging off it are one consistency
boundary. Functions here mutate that object graph in memory and never touch a
session; a write model loads the graph, calls them, and commits once.

Summary counts are recomputed from the guest list on every call.
"""

from collections.abc import Iterable
from datetime import datetime
from uuid import UUID, uuid4

from planner.dates import as_utc
from planner.errors import NotFoundError, ValidationError
from planner.events.dtos import (
    DEFAULT_FEATURES,
    EventCategory,
    EventFeature,
    EventPrivacy,
    EventSummaryDTO,
)
from planner.events.repository.orm_models import (
    Budget,
    BudgetCategory,
    Event,
    EventFunction,
    EventMember,
    Expense,
    Guest,
    PaymentSplit,
    SeatingTable,
)
from planner.guests.dtos import RSVPStatus
from planner.models.base import utcnow


def require_text(value: str | None, field: str, operation: str, entity: str) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(f"{field} is required", operation=operation, entity=entity)
    return cleaned


def check_schedule(
    starts_at: datetime, ends_at: datetime | None, operation: str, entity: str
) -> None:
    if ends_at is not None and as_utc(ends_at) < as_utc(starts_at):
        raise ValidationError(
            "End time cannot be before start time", operation=operation, entity=entity
        )


def _check_capacity(capacity: int | None, operation: str) -> None:
    if capacity is not None and capacity <= 0:
        raise ValidationError(
            "Capacity must be a positive number", operation=operation, entity="Event"
        )


def create_event(
    title: str,
    starts_at: datetime,
    ends_at: datetime | None = None,
    description: str | None = None,
    category: EventCategory = EventCategory.PARTY,
    privacy: EventPrivacy = EventPrivacy.INVITE_ONLY,
    capacity: int | None = None,
    location_name: str | None = None,
    location_address: str | None = None,
    location_city: str | None = None,
    timezone: str = "UTC",
    host_id: UUID | None = None,
    enabled_features: Iterable[EventFeature] | None = None,
    is_draft: bool = False,
) -> Event:
    operation = "create_event"
    title = require_text(title, "Title", operation, "Event")
    check_schedule(starts_at, ends_at, operation, "Event")
    _check_capacity(capacity, operation)

    if enabled_features is None:
        enabled_features = DEFAULT_FEATURES[EventCategory(category)]
    now = utcnow()
    return Event(
        uuid=uuid4(),
        title=title,
        description=description,
        starts_at=starts_at,
        ends_at=ends_at,
        timezone=timezone,
        category=EventCategory(category),
        privacy=EventPrivacy(privacy),
        capacity=capacity,
        location_name=location_name,
        location_address=location_address,
        location_city=location_city,
        host_id=host_id,
        enabled_features=sorted(EventFeature(f).value for f in enabled_features),
        is_draft=is_draft,
        created_at=now,
        updated_at=now,
        guests=[],
        functions=[],
        seating_tables=[],
        members=[],
        budget=None,
    )


_UNSET = object()


def update_event_details(
    event: Event,
    title: str | None = None,
    description=_UNSET,
    starts_at: datetime | None = None,
    ends_at=_UNSET,
    capacity=_UNSET,
    privacy: EventPrivacy | None = None,
    location_name=_UNSET,
    enabled_features: Iterable[EventFeature] | None = None,
) -> Event:
    """Apply the given fields; omitted fields keep their value, ``None`` clears optional ones."""
    operation = "update_event_details"
    new_title = require_text(title, "Title", operation, "Event") if title is not None else event.title
    new_start = starts_at or event.starts_at
    new_end = event.ends_at if ends_at is _UNSET else ends_at
    new_capacity = event.capacity if capacity is _UNSET else capacity
    check_schedule(new_start, new_end, operation, "Event")
    _check_capacity(new_capacity, operation)

    event.title = new_title
    event.starts_at = new_start
    event.ends_at = new_end
    event.capacity = new_capacity
    if description is not _UNSET:
        event.description = description
    if location_name is not _UNSET:
        event.location_name = location_name
    if privacy is not None:
        event.privacy = EventPrivacy(privacy)
    if enabled_features is not None:
        event.enabled_features = sorted(EventFeature(f).value for f in enabled_features)
    return event


def has_feature(event: Event, feature: EventFeature) -> bool:
    return EventFeature(feature).value in (event.enabled_features or [])


# Summary queries


def _count(event: Event, *statuses: RSVPStatus) -> int:
    return sum(1 for g in event.guests if g.status in statuses)


def attending_count(event: Event) -> int:
    return _count(event, RSVPStatus.ATTENDING)


def maybe_count(event: Event) -> int:
    return _count(event, RSVPStatus.MAYBE)


def pending_count(event: Event) -> int:
    # Waitlisted guests have no answer yet, so they count as pending
    return _count(event, RSVPStatus.PENDING, RSVPStatus.WAITLISTED)


def declined_count(event: Event) -> int:
    return _count(event, RSVPStatus.DECLINED)


def waitlisted_count(event: Event) -> int:
    return _count(event, RSVPStatus.WAITLISTED)


def total_guest_headcount(event: Event) -> int:
    return sum(g.total_headcount for g in event.guests)


def attending_headcount(event: Event) -> int:
    return sum(g.total_headcount for g in event.guests if g.status == RSVPStatus.ATTENDING)


def spots_remaining(event: Event) -> int | None:
    """Advisory only: nothing rejects guests once this reaches zero."""
    if event.capacity is None:
        return None
    return max(0, event.capacity - attending_count(event))


def is_full(event: Event) -> bool:
    remaining = spots_remaining(event)
    return remaining is not None and remaining == 0


def summarize(event: Event) -> EventSummaryDTO:
    return EventSummaryDTO(
        guest_count=len(event.guests),
        attending_count=attending_count(event),
        maybe_count=maybe_count(event),
        pending_count=pending_count(event),
        declined_count=declined_count(event),
        waitlisted_count=waitlisted_count(event),
        total_guest_headcount=total_guest_headcount(event),
        attending_headcount=attending_headcount(event),
        capacity=event.capacity,
        spots_remaining=spots_remaining(event),
        is_full=is_full(event),
    )


# Lookups inside the aggregate


def get_guest(event: Event, guest_id: UUID, operation: str | None = None) -> Guest:
    for guest in event.guests:
        if guest.uuid == guest_id:
            return guest
    raise NotFoundError("Guest", guest_id, operation)


def get_function(event: Event, function_id: UUID, operation: str | None = None) -> EventFunction:
    for function in event.functions:
        if function.uuid == function_id:
            return function
    raise NotFoundError("EventFunction", function_id, operation)


def get_table(event: Event, table_id: UUID, operation: str | None = None) -> SeatingTable:
    for table in event.seating_tables:
        if table.uuid == table_id:
            return table
    raise NotFoundError("SeatingTable", table_id, operation)


def get_member(event: Event, member_id: UUID, operation: str | None = None) -> EventMember:
    for member in event.members:
        if member.uuid == member_id:
            return member
    raise NotFoundError("EventMember", member_id, operation)


def get_budget(event: Event, operation: str | None = None) -> Budget:
    if event.budget is None:
        raise NotFoundError("Budget", event.uuid, operation)
    return event.budget


def get_category(event: Event, category_id: UUID, operation: str | None = None) -> BudgetCategory:
    for category in get_budget(event, operation).categories:
        if category.uuid == category_id:
            return category
    raise NotFoundError("BudgetCategory", category_id, operation)


def get_expense(event: Event, expense_id: UUID, operation: str | None = None) -> Expense:
    for expense in get_budget(event, operation).expenses:
        if expense.uuid == expense_id:
            return expense
    raise NotFoundError("Expense", expense_id, operation)


def get_split(event: Event, split_id: UUID, operation: str | None = None) -> PaymentSplit:
    for split in get_budget(event, operation).splits:
        if split.uuid == split_id:
            return split
    raise NotFoundError("PaymentSplit", split_id, operation)
