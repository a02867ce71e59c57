from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel

from planner.events.repository.read_models import EventReadModel
from planner.events.router import get_event_read_model
from planner.functions.dtos import (
    BulkSendResultDTO,
    DressCode,
    FunctionDTO,
    FunctionInviteDTO,
    InviteChannel,
    InviteMessageDTO,
    RSVPResponse,
)
from planner.functions.sender import SMTPInviteDispatcher
from planner.functions.write_model import FunctionWriteModel, SqlFunctionWriteModel

router = APIRouter()

FUNCTIONS_URL = "/api/v1/events/{event_id}/functions"
FUNCTION_URL = "/api/v1/events/{event_id}/functions/{function_id}"
INVITES_URL = "/api/v1/events/{event_id}/invites"
SEND_INVITES_URL = "/api/v1/events/{event_id}/invites/send"
INVITE_SENT_URL = "/api/v1/events/{event_id}/functions/{function_id}/invites/{guest_id}/sent"
INVITE_RESPONSE_URL = (
    "/api/v1/events/{event_id}/functions/{function_id}/invites/{guest_id}/response"
)
INVITE_MESSAGE_URL = "/api/v1/events/{event_id}/guests/{guest_id}/invite-message"


class FunctionCreate(BaseModel):
    name: str
    starts_at: datetime
    ends_at: datetime | None = None
    description: str | None = None
    location_name: str | None = None
    dress_code: DressCode | None = None
    custom_dress_code: str | None = None


class InvitesCreate(BaseModel):
    guest_ids: list[UUID]
    function_ids: list[UUID]


class InvitesSend(InvitesCreate):
    channel: InviteChannel


class InviteSentSubmit(BaseModel):
    channel: InviteChannel


class InviteResponseSubmit(BaseModel):
    response: RSVPResponse
    party_size: int | None = None
    note: str | None = None


def get_function_write_model() -> FunctionWriteModel:
    """Dependency to get function write model instance."""
    return SqlFunctionWriteModel(dispatcher=SMTPInviteDispatcher())


@router.get(FUNCTIONS_URL)
async def list_functions(
    event_id: UUID,
    read_model: EventReadModel = Depends(get_event_read_model),
) -> list[FunctionDTO]:
    return await read_model.list_functions(event_id)


@router.post(FUNCTIONS_URL, status_code=status.HTTP_201_CREATED)
async def add_function(
    event_id: UUID,
    request: FunctionCreate,
    write_model: FunctionWriteModel = Depends(get_function_write_model),
) -> FunctionDTO:
    return await write_model.add_function(event_id, **request.model_dump())


@router.delete(FUNCTION_URL, status_code=status.HTTP_204_NO_CONTENT)
async def remove_function(
    event_id: UUID,
    function_id: UUID,
    write_model: FunctionWriteModel = Depends(get_function_write_model),
) -> Response:
    await write_model.remove_function(event_id, function_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(INVITES_URL, status_code=status.HTTP_201_CREATED)
async def create_invites(
    event_id: UUID,
    request: InvitesCreate,
    write_model: FunctionWriteModel = Depends(get_function_write_model),
) -> list[FunctionInviteDTO]:
    """Invite guests to functions. Only invites that did not exist yet are returned."""
    return await write_model.create_invites(event_id, request.guest_ids, request.function_ids)


@router.post(SEND_INVITES_URL)
async def send_invites(
    event_id: UUID,
    request: InvitesSend,
    write_model: FunctionWriteModel = Depends(get_function_write_model),
) -> BulkSendResultDTO:
    """
    Send invites guest by guest over one channel.
    Guests that cannot be reached are counted as failed; the rest still go out.
    """
    return await write_model.send_invites(
        event_id, request.guest_ids, request.function_ids, request.channel
    )


@router.post(INVITE_SENT_URL)
async def mark_invite_sent(
    event_id: UUID,
    function_id: UUID,
    guest_id: UUID,
    request: InviteSentSubmit,
    write_model: FunctionWriteModel = Depends(get_function_write_model),
) -> FunctionInviteDTO:
    return await write_model.mark_sent(event_id, function_id, guest_id, request.channel)


@router.put(INVITE_RESPONSE_URL)
async def record_response(
    event_id: UUID,
    function_id: UUID,
    guest_id: UUID,
    request: InviteResponseSubmit,
    write_model: FunctionWriteModel = Depends(get_function_write_model),
) -> FunctionInviteDTO:
    return await write_model.record_response(
        event_id,
        function_id,
        guest_id,
        request.response,
        party_size=request.party_size,
        note=request.note,
    )


@router.delete(INVITE_RESPONSE_URL)
async def reopen_invite(
    event_id: UUID,
    function_id: UUID,
    guest_id: UUID,
    write_model: FunctionWriteModel = Depends(get_function_write_model),
) -> FunctionInviteDTO:
    """Clear the guest's answer so they can respond again."""
    return await write_model.reopen_invite(event_id, function_id, guest_id)


@router.get(INVITE_MESSAGE_URL)
async def get_invite_message(
    event_id: UUID,
    guest_id: UUID,
    function_ids: list[UUID] | None = Query(default=None),
    read_model: EventReadModel = Depends(get_event_read_model),
) -> InviteMessageDTO:
    return await read_model.invite_message(event_id, guest_id, function_ids)
