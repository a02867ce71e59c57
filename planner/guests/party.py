"""Party composition: a guest, their named companions and the derived headcount.

``plus_one_count`` is the number of companions the guest declared; the named
``party_members`` list may be longer once the guest fills in names. Headcount
is always ``1 + max(plus_one_count, len(party_members))`` and is never stored.
"""

from uuid import UUID, uuid4

from planner.errors import NotFoundError, ValidationError
from planner.events.aggregate import get_guest, require_text
from planner.events.repository.orm_models import Event, Guest, PartyMember
from planner.guests.dtos import GuestRole, PartyRelationship, RSVPStatus
from planner.models.base import utcnow


def _check_plus_ones(plus_one_count: int, operation: str, guest_id: UUID | None = None) -> None:
    if plus_one_count < 0:
        raise ValidationError(
            "Plus-one count cannot be negative",
            operation=operation,
            entity="Guest",
            entity_id=guest_id,
        )


def add_guest(
    event: Event,
    name: str,
    email: str | None = None,
    phone: str | None = None,
    role: GuestRole = GuestRole.GUEST,
    plus_one_count: int = 0,
    user_id: UUID | None = None,
    meal_choice: str | None = None,
    dietary_restrictions: str | None = None,
    notes: str | None = None,
) -> Guest:
    operation = "add_guest"
    name = require_text(name, "Guest name", operation, "Guest")
    _check_plus_ones(plus_one_count, operation)

    now = utcnow()
    guest = Guest(
        uuid=uuid4(),
        event_id=event.uuid,
        user_id=user_id,
        name=name,
        email=(email or "").strip() or None,
        phone=(phone or "").strip() or None,
        role=GuestRole(role),
        status=RSVPStatus.PENDING,
        plus_one_count=plus_one_count,
        meal_choice=meal_choice,
        dietary_restrictions=dietary_restrictions,
        notes=notes,
        assigned_tasks=[],
        invited_at=now,
        responded_at=None,
        created_at=now,
        updated_at=now,
        party_members=[],
        invites=[],
        seat_assignments=[],
    )
    event.guests.append(guest)
    return guest


_UNSET = object()


def update_guest_details(
    guest: Guest,
    name: str | None = None,
    email=_UNSET,
    phone=_UNSET,
    role: GuestRole | None = None,
    meal_choice=_UNSET,
    dietary_restrictions=_UNSET,
    notes=_UNSET,
) -> Guest:
    if name is not None:
        guest.name = require_text(name, "Guest name", "update_guest_details", "Guest")
    if role is not None:
        guest.role = GuestRole(role)
    for field, value in (
        ("email", email),
        ("phone", phone),
        ("meal_choice", meal_choice),
        ("dietary_restrictions", dietary_restrictions),
        ("notes", notes),
    ):
        if value is not _UNSET:
            setattr(guest, field, value)
    return guest


def set_rsvp(guest: Guest, status: RSVPStatus, plus_one_count: int | None = None) -> Guest:
    """Record the guest's event-level answer.

    Any answer other than ``pending`` stamps ``responded_at``; repeating the
    same call only moves that stamp. Going back to ``pending`` clears it.
    """
    if plus_one_count is not None:
        _check_plus_ones(plus_one_count, "set_rsvp", guest.uuid)

    status = RSVPStatus(status)
    guest.status = status
    if plus_one_count is not None:
        guest.plus_one_count = plus_one_count
    guest.responded_at = None if status == RSVPStatus.PENDING else utcnow()
    return guest


def add_party_member(
    guest: Guest,
    name: str,
    relation: PartyRelationship | None = None,
    dietary_restrictions: str | None = None,
) -> PartyMember:
    name = require_text(name, "Party member name", "add_party_member", "PartyMember")
    now = utcnow()
    member = PartyMember(
        uuid=uuid4(),
        guest_id=guest.uuid,
        name=name,
        relation=PartyRelationship(relation) if relation else None,
        dietary_restrictions=dietary_restrictions,
        created_at=now,
        updated_at=now,
    )
    guest.party_members.append(member)
    return member


def remove_party_member(guest: Guest, member_id: UUID) -> None:
    for member in guest.party_members:
        if member.uuid == member_id:
            guest.party_members.remove(member)
            return
    raise NotFoundError("PartyMember", member_id, "remove_party_member")


def remove_guest(event: Event, guest_id: UUID) -> Guest:
    """Remove a guest with every invite and seat keyed to them."""
    guest = get_guest(event, guest_id, "remove_guest")

    for function in event.functions:
        for invite in [i for i in function.invites if i.guest_id == guest.uuid]:
            function.invites.remove(invite)
    for table in event.seating_tables:
        for assignment in [a for a in table.assignments if a.guest_id == guest.uuid]:
            table.assignments.remove(assignment)

    event.guests.remove(guest)
    return guest
