from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, EmailStr

from planner.events.repository.read_models import EventReadModel
from planner.events.router import get_event_read_model
from planner.guests.dtos import GuestDTO, GuestRole, PartyMemberDTO, PartyRelationship, RSVPStatus
from planner.guests.write_model import GuestWriteModel, SqlGuestWriteModel

router = APIRouter()

GUESTS_URL = "/api/v1/events/{event_id}/guests"
GUEST_URL = "/api/v1/events/{event_id}/guests/{guest_id}"
GUEST_RSVP_URL = "/api/v1/events/{event_id}/guests/{guest_id}/rsvp"
PARTY_MEMBERS_URL = "/api/v1/events/{event_id}/guests/{guest_id}/party-members"
PARTY_MEMBER_URL = "/api/v1/events/{event_id}/guests/{guest_id}/party-members/{member_id}"


class GuestCreate(BaseModel):
    name: str
    email: EmailStr | None = None
    phone: str | None = None
    role: GuestRole = GuestRole.GUEST
    plus_one_count: int = 0


class GuestUpdate(BaseModel):
    """Only the fields present in the request body are changed."""

    name: str | None = None
    email: EmailStr | None = None
    phone: str | None = None
    role: GuestRole | None = None
    meal_choice: str | None = None
    dietary_restrictions: str | None = None
    notes: str | None = None


class RSVPSubmit(BaseModel):
    status: RSVPStatus
    plus_one_count: int | None = None


class PartyMemberCreate(BaseModel):
    name: str
    relation: PartyRelationship | None = None
    dietary_restrictions: str | None = None


def get_guest_write_model() -> GuestWriteModel:
    """Dependency to get guest write model instance."""
    return SqlGuestWriteModel()


@router.get(GUESTS_URL)
async def list_guests(
    event_id: UUID,
    read_model: EventReadModel = Depends(get_event_read_model),
) -> list[GuestDTO]:
    return await read_model.list_guests(event_id)


@router.post(GUESTS_URL, status_code=status.HTTP_201_CREATED)
async def add_guest(
    event_id: UUID,
    request: GuestCreate,
    expected_version: int | None = None,
    write_model: GuestWriteModel = Depends(get_guest_write_model),
) -> GuestDTO:
    return await write_model.add_guest(
        event_id, expected_version=expected_version, **request.model_dump()
    )


@router.patch(GUEST_URL)
async def update_guest(
    event_id: UUID,
    guest_id: UUID,
    request: GuestUpdate,
    expected_version: int | None = None,
    write_model: GuestWriteModel = Depends(get_guest_write_model),
) -> GuestDTO:
    return await write_model.update_guest(
        event_id,
        guest_id,
        expected_version=expected_version,
        **request.model_dump(exclude_unset=True),
    )


@router.delete(GUEST_URL, status_code=status.HTTP_204_NO_CONTENT)
async def remove_guest(
    event_id: UUID,
    guest_id: UUID,
    expected_version: int | None = None,
    write_model: GuestWriteModel = Depends(get_guest_write_model),
) -> Response:
    """Remove a guest together with their function invites and seat."""
    await write_model.remove_guest(event_id, guest_id, expected_version=expected_version)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put(GUEST_RSVP_URL)
async def set_rsvp(
    event_id: UUID,
    guest_id: UUID,
    request: RSVPSubmit,
    expected_version: int | None = None,
    write_model: GuestWriteModel = Depends(get_guest_write_model),
) -> GuestDTO:
    """
    Set the guest's event-level RSVP.
    Submitting the same answer again only refreshes the response time.
    """
    return await write_model.set_rsvp(
        event_id,
        guest_id,
        request.status,
        plus_one_count=request.plus_one_count,
        expected_version=expected_version,
    )


@router.post(PARTY_MEMBERS_URL, status_code=status.HTTP_201_CREATED)
async def add_party_member(
    event_id: UUID,
    guest_id: UUID,
    request: PartyMemberCreate,
    write_model: GuestWriteModel = Depends(get_guest_write_model),
) -> PartyMemberDTO:
    return await write_model.add_party_member(
        event_id,
        guest_id,
        request.name,
        relation=request.relation,
        dietary_restrictions=request.dietary_restrictions,
    )


@router.delete(PARTY_MEMBER_URL, status_code=status.HTTP_204_NO_CONTENT)
async def remove_party_member(
    event_id: UUID,
    guest_id: UUID,
    member_id: UUID,
    write_model: GuestWriteModel = Depends(get_guest_write_model),
) -> Response:
    await write_model.remove_party_member(event_id, guest_id, member_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
