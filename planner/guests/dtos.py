from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from planner.events.repository.orm_models import Guest, PartyMember


class RSVPStatus(str, Enum):
    PENDING = "pending"
    ATTENDING = "attending"
    MAYBE = "maybe"
    DECLINED = "declined"
    WAITLISTED = "waitlisted"


class GuestRole(str, Enum):
    GUEST = "guest"
    VIP = "vip"
    COHOST = "cohost"
    VENDOR = "vendor"


class PartyRelationship(str, Enum):
    SPOUSE = "spouse"
    PARTNER = "partner"
    CHILD = "child"
    PARENT = "parent"
    SIBLING = "sibling"
    FRIEND = "friend"
    OTHER = "other"


@dataclass(frozen=True)
class PartyMemberDTO:
    """DTO for a named companion of a guest."""

    id: UUID
    name: str
    relation: PartyRelationship | None = None
    dietary_restrictions: str | None = None

    @classmethod
    def from_member(cls, member: "PartyMember") -> "PartyMemberDTO":
        return cls(
            id=member.uuid,
            name=member.name,
            relation=member.relation,
            dietary_restrictions=member.dietary_restrictions,
        )


@dataclass(frozen=True)
class GuestDTO:
    """DTO for guest data."""

    id: UUID
    name: str
    status: RSVPStatus
    role: GuestRole
    plus_one_count: int
    total_headcount: int
    email: str | None = None
    phone: str | None = None
    responded_at: datetime | None = None
    party_members: list[PartyMemberDTO] = field(default_factory=list)
    meal_choice: str | None = None
    dietary_restrictions: str | None = None
    notes: str | None = None
    rsvp_link: str | None = None

    @classmethod
    def from_guest(cls, guest: "Guest", rsvp_link: str | None = None) -> "GuestDTO":
        return cls(
            id=guest.uuid,
            name=guest.name,
            status=RSVPStatus(guest.status),
            role=GuestRole(guest.role),
            plus_one_count=guest.plus_one_count,
            total_headcount=guest.total_headcount,
            email=guest.email,
            phone=guest.phone,
            responded_at=guest.responded_at,
            party_members=[PartyMemberDTO.from_member(m) for m in guest.party_members],
            meal_choice=guest.meal_choice,
            dietary_restrictions=guest.dietary_restrictions,
            notes=guest.notes,
            rsvp_link=rsvp_link,
        )
