from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from planner.events.repository.orm_models import EventFunction, FunctionInvite


class InviteStatus(str, Enum):
    NOT_SENT = "notSent"
    SENT = "sent"
    RESPONDED = "responded"


class RSVPResponse(str, Enum):
    YES = "yes"
    NO = "no"
    MAYBE = "maybe"


class InviteChannel(str, Enum):
    WHATSAPP = "whatsapp"
    SMS = "sms"
    EMAIL = "email"
    IN_APP_LINK = "inAppLink"
    COPIED = "copied"

    @property
    def needs_phone(self) -> bool:
        return self in (InviteChannel.WHATSAPP, InviteChannel.SMS)

    @property
    def needs_email(self) -> bool:
        return self is InviteChannel.EMAIL


class DressCode(str, Enum):
    CASUAL = "casual"
    SMART_CASUAL = "smartCasual"
    COCKTAIL = "cocktail"
    FORMAL = "formal"
    BLACK_TIE = "blackTie"
    TRADITIONAL = "traditional"
    CUSTOM = "custom"


DRESS_CODE_LABELS = {
    DressCode.CASUAL: "Casual",
    DressCode.SMART_CASUAL: "Smart Casual",
    DressCode.COCKTAIL: "Cocktail",
    DressCode.FORMAL: "Formal",
    DressCode.BLACK_TIE: "Black Tie",
    DressCode.TRADITIONAL: "Traditional",
    DressCode.CUSTOM: "Custom",
}


@dataclass(frozen=True)
class FunctionInviteDTO:
    """DTO for one guest's invitation to one function."""

    id: UUID
    guest_id: UUID
    function_id: UUID
    status: InviteStatus
    party_size: int
    response: RSVPResponse | None = None
    note: str | None = None
    sent_at: datetime | None = None
    sent_via: InviteChannel | None = None
    responded_at: datetime | None = None

    @classmethod
    def from_invite(cls, invite: "FunctionInvite") -> "FunctionInviteDTO":
        return cls(
            id=invite.uuid,
            guest_id=invite.guest_id,
            function_id=invite.function_id,
            status=InviteStatus(invite.status),
            party_size=invite.party_size,
            response=RSVPResponse(invite.response) if invite.response else None,
            note=invite.note,
            sent_at=invite.sent_at,
            sent_via=InviteChannel(invite.sent_via) if invite.sent_via else None,
            responded_at=invite.responded_at,
        )


@dataclass(frozen=True)
class FunctionSummaryDTO:
    """Per-function response counters."""

    invited_count: int
    attending_headcount: int
    maybe_count: int
    declined_count: int
    pending_count: int
    sent_count: int
    not_sent_count: int


@dataclass(frozen=True)
class FunctionDTO:
    """DTO for a function (sub-event)."""

    id: UUID
    name: str
    starts_at: datetime
    summary: FunctionSummaryDTO
    ends_at: datetime | None = None
    description: str | None = None
    location_name: str | None = None
    dress_code: str | None = None
    sort_order: int = 0

    @classmethod
    def from_function(cls, function: "EventFunction") -> "FunctionDTO":
        from planner.functions.invitations import function_summary

        return cls(
            id=function.uuid,
            name=function.name,
            starts_at=function.starts_at,
            ends_at=function.ends_at,
            description=function.description,
            location_name=function.location_name,
            dress_code=function.display_dress_code,
            sort_order=function.sort_order,
            summary=function_summary(function),
        )


@dataclass(frozen=True)
class BulkSendResultDTO:
    """Outcome of sending invites to a batch of guests."""

    sent_count: int
    failed_count: int
    created_invites: int
    failed_guest_ids: list[UUID]


@dataclass(frozen=True)
class InviteMessageDTO:
    """Rendered invite text plus the URL that opens each channel the guest can receive."""

    guest_id: UUID
    subject: str
    body: str
    channel_urls: dict[InviteChannel, str]
