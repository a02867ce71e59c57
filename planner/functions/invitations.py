"""Functions (sub-events) and the per-guest invitation state machine.

An invite moves ``notSent -> sent -> responded``. There is at most one invite
per (guest, function): creation returns the existing record and a repeated
response overwrites the existing record in place.
"""

from collections.abc import Iterable
from datetime import datetime
from uuid import UUID, uuid4

from planner.errors import ValidationError
from planner.events.aggregate import check_schedule, get_function, require_text
from planner.events.repository.orm_models import Event, EventFunction, FunctionInvite, Guest
from planner.functions.dtos import (
    DressCode,
    FunctionSummaryDTO,
    InviteChannel,
    InviteStatus,
    RSVPResponse,
)
from planner.models.base import utcnow


def add_function(
    event: Event,
    name: str,
    starts_at: datetime,
    ends_at: datetime | None = None,
    description: str | None = None,
    location_name: str | None = None,
    location_address: str | None = None,
    dress_code: DressCode | None = None,
    custom_dress_code: str | None = None,
    sort_order: int | None = None,
) -> EventFunction:
    operation = "add_function"
    name = require_text(name, "Function name", operation, "EventFunction")
    check_schedule(starts_at, ends_at, operation, "EventFunction")

    now = utcnow()
    function = EventFunction(
        uuid=uuid4(),
        event_id=event.uuid,
        name=name,
        description=description,
        starts_at=starts_at,
        ends_at=ends_at,
        location_name=location_name,
        location_address=location_address,
        dress_code=DressCode(dress_code) if dress_code else None,
        custom_dress_code=custom_dress_code if dress_code == DressCode.CUSTOM else None,
        sort_order=len(event.functions) if sort_order is None else sort_order,
        created_at=now,
        updated_at=now,
        invites=[],
    )
    event.functions.append(function)
    return function


def remove_function(event: Event, function_id: UUID) -> EventFunction:
    function = get_function(event, function_id, "remove_function")
    # Invites go with the function through the delete cascade
    event.functions.remove(function)
    return function


def find_invite(function: EventFunction, guest_id: UUID) -> FunctionInvite | None:
    for invite in function.invites:
        if invite.guest_id == guest_id:
            return invite
    return None


def create_invite(guest: Guest, function: EventFunction) -> FunctionInvite:
    """Return the guest's invite to the function, creating it if needed."""
    existing = find_invite(function, guest.uuid)
    if existing is not None:
        return existing

    now = utcnow()
    invite = FunctionInvite(
        uuid=uuid4(),
        guest_id=guest.uuid,
        function_id=function.uuid,
        status=InviteStatus.NOT_SENT,
        response=None,
        party_size=guest.total_headcount,
        created_at=now,
        updated_at=now,
    )
    function.invites.append(invite)
    guest.invites.append(invite)
    return invite


def create_invites(
    guests: Iterable[Guest], functions: Iterable[EventFunction]
) -> list[FunctionInvite]:
    """Invite every guest to every function; returns only the invites that are new."""
    functions = list(functions)
    created = []
    for guest in guests:
        for function in functions:
            if find_invite(function, guest.uuid) is None:
                created.append(create_invite(guest, function))
    return created


def mark_sent(
    invite: FunctionInvite, channel: InviteChannel, sent_at: datetime | None = None
) -> FunctionInvite:
    """Record delivery; later calls overwrite channel and time.

    A responded invite keeps its response and stays ``responded``.
    """
    invite.sent_via = InviteChannel(channel)
    invite.sent_at = sent_at or utcnow()
    if invite.status != InviteStatus.RESPONDED:
        invite.status = InviteStatus.SENT
    return invite


def record_response(
    invite: FunctionInvite,
    response: RSVPResponse,
    party_size: int | None = None,
    note: str | None = None,
    default_party_size: int = 1,
) -> FunctionInvite:
    """Upsert the guest's answer on the existing invite record.

    A yes or maybe without ``party_size`` keeps the stored size, unless an
    earlier decline zeroed it; then ``default_party_size`` applies.
    """
    if party_size is not None and party_size < 0:
        raise ValidationError(
            "Party size cannot be negative",
            operation="record_response",
            entity="FunctionInvite",
            entity_id=invite.uuid,
        )

    response = RSVPResponse(response)
    invite.response = response
    invite.status = InviteStatus.RESPONDED
    invite.responded_at = utcnow()
    if response == RSVPResponse.NO:
        invite.party_size = 0
    elif party_size is not None:
        invite.party_size = party_size
    elif invite.party_size == 0:
        invite.party_size = default_party_size
    if note is not None:
        invite.note = note
    return invite


def reopen_invite(invite: FunctionInvite) -> FunctionInvite:
    invite.response = None
    invite.responded_at = None
    invite.status = InviteStatus.SENT if invite.sent_at else InviteStatus.NOT_SENT
    return invite


def function_summary(function: EventFunction) -> FunctionSummaryDTO:
    invites = function.invites
    responded = [i for i in invites if i.status == InviteStatus.RESPONDED]
    return FunctionSummaryDTO(
        invited_count=len(invites),
        attending_headcount=sum(i.party_size for i in responded if i.response == RSVPResponse.YES),
        maybe_count=sum(1 for i in responded if i.response == RSVPResponse.MAYBE),
        declined_count=sum(1 for i in responded if i.response == RSVPResponse.NO),
        pending_count=len(invites) - len(responded),
        sent_count=sum(1 for i in invites if i.status == InviteStatus.SENT),
        not_sent_count=sum(1 for i in invites if i.status == InviteStatus.NOT_SENT),
    )


def available_channels(guest: Guest) -> list[InviteChannel]:
    channels = []
    for channel in InviteChannel:
        if channel.needs_phone and not guest.phone:
            continue
        if channel.needs_email and not guest.email:
            continue
        channels.append(channel)
    return channels


def contact_for(guest: Guest, channel: InviteChannel) -> str | None:
    channel = InviteChannel(channel)
    if channel.needs_phone:
        return guest.phone
    if channel.needs_email:
        return guest.email
    return None
