"""Collaborators who help run an event.

Roles can change in any invite status. A pending invite carries a short code
the invitee types in to accept; the code is dropped once the invite is answered.
"""

import secrets
from uuid import UUID, uuid4

from planner.errors import NotFoundError, ValidationError
from planner.events.aggregate import get_member, require_text
from planner.events.repository.orm_models import Event, EventMember
from planner.models.base import utcnow
from planner.team.dtos import MemberInviteStatus, MemberRole, Permission

INVITE_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
INVITE_CODE_LENGTH = 6


def generate_invite_code(length: int = INVITE_CODE_LENGTH) -> str:
    return "".join(secrets.choice(INVITE_CODE_ALPHABET) for _ in range(length))


def invite_member(
    event: Event,
    name: str,
    email: str | None = None,
    phone: str | None = None,
    role: MemberRole = MemberRole.VIEWER,
    user_id: UUID | None = None,
) -> EventMember:
    name = require_text(name, "Member name", "invite_member", "EventMember")

    taken = {m.invite_code for m in event.members if m.invite_code}
    code = generate_invite_code()
    while code in taken:
        code = generate_invite_code()

    now = utcnow()
    member = EventMember(
        uuid=uuid4(),
        event_id=event.uuid,
        user_id=user_id,
        name=name,
        email=(email or "").strip() or None,
        phone=(phone or "").strip() or None,
        role=MemberRole(role),
        invite_status=MemberInviteStatus.PENDING,
        invite_code=code,
        invited_at=now,
        responded_at=None,
        created_at=now,
        updated_at=now,
    )
    event.members.append(member)
    return member


def accept_invite(member: EventMember, user_id: UUID | None = None) -> EventMember:
    if member.invite_status == MemberInviteStatus.ACCEPTED:
        return member
    if member.invite_status == MemberInviteStatus.DECLINED:
        raise ValidationError(
            "A declined invite cannot be accepted",
            operation="accept_invite",
            entity="EventMember",
            entity_id=member.uuid,
        )
    member.invite_status = MemberInviteStatus.ACCEPTED
    member.responded_at = utcnow()
    member.invite_code = None
    if user_id is not None:
        member.user_id = user_id
    return member


def accept_invite_by_code(event: Event, code: str, user_id: UUID | None = None) -> EventMember:
    normalized = (code or "").strip().upper()
    for member in event.members:
        if member.invite_code and member.invite_code == normalized:
            return accept_invite(member, user_id)
    raise NotFoundError("EventMember invite code", normalized, "accept_invite_by_code")


def decline_invite(member: EventMember) -> EventMember:
    if member.invite_status != MemberInviteStatus.PENDING:
        raise ValidationError(
            "Only a pending invite can be declined",
            operation="decline_invite",
            entity="EventMember",
            entity_id=member.uuid,
        )
    member.invite_status = MemberInviteStatus.DECLINED
    member.responded_at = utcnow()
    member.invite_code = None
    return member


def change_role(member: EventMember, role: MemberRole) -> EventMember:
    member.role = MemberRole(role)
    return member


def remove_member(event: Event, member_id: UUID) -> EventMember:
    member = get_member(event, member_id, "remove_member")
    event.members.remove(member)
    return member


def has_permission(member: EventMember, permission: Permission) -> bool:
    """Only accepted members act on the event."""
    if member.invite_status != MemberInviteStatus.ACCEPTED:
        return False
    return Permission(permission) in MemberRole(member.role).permissions
