from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from planner.events.repository.orm_models import EventMember


class MemberRole(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    VIEWER = "viewer"

    @property
    def description(self) -> str:
        return ROLE_DESCRIPTIONS[self]

    @property
    def permissions(self) -> frozenset["Permission"]:
        return ROLE_PERMISSIONS[self]


class MemberInviteStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class Permission(str, Enum):
    EDIT_EVENT = "editEvent"
    MANAGE_GUESTS = "manageGuests"
    MANAGE_BUDGET = "manageBudget"
    SEND_INVITES = "sendInvites"
    VIEW_DETAILS = "viewDetails"


ROLE_DESCRIPTIONS = {
    MemberRole.ADMIN: "Can edit event, manage guests & budget",
    MemberRole.MANAGER: "Can manage guests and send invites",
    MemberRole.VIEWER: "Can view event details only",
}

ROLE_PERMISSIONS = {
    MemberRole.ADMIN: frozenset(Permission),
    MemberRole.MANAGER: frozenset(
        {Permission.MANAGE_GUESTS, Permission.SEND_INVITES, Permission.VIEW_DETAILS}
    ),
    MemberRole.VIEWER: frozenset({Permission.VIEW_DETAILS}),
}


@dataclass(frozen=True)
class EventMemberDTO:
    id: UUID
    name: str
    role: MemberRole
    invite_status: MemberInviteStatus
    role_description: str
    email: str | None = None
    phone: str | None = None
    invite_code: str | None = None
    invited_at: datetime | None = None
    responded_at: datetime | None = None

    @classmethod
    def from_member(cls, member: "EventMember") -> "EventMemberDTO":
        role = MemberRole(member.role)
        return cls(
            id=member.uuid,
            name=member.name,
            role=role,
            invite_status=MemberInviteStatus(member.invite_status),
            role_description=role.description,
            email=member.email,
            phone=member.phone,
            invite_code=member.invite_code,
            invited_at=member.invited_at,
            responded_at=member.responded_at,
        )
