from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, EmailStr

from planner.events.repository.read_models import EventReadModel
from planner.events.router import get_event_read_model
from planner.team.dtos import EventMemberDTO, MemberRole
from planner.team.write_model import SqlTeamWriteModel, TeamWriteModel

router = APIRouter()

MEMBERS_URL = "/api/v1/events/{event_id}/members"
MEMBER_URL = "/api/v1/events/{event_id}/members/{member_id}"
MEMBER_ACCEPT_URL = "/api/v1/events/{event_id}/members/{member_id}/accept"
MEMBER_DECLINE_URL = "/api/v1/events/{event_id}/members/{member_id}/decline"
JOIN_URL = "/api/v1/events/{event_id}/join"


class MemberInvite(BaseModel):
    name: str
    email: EmailStr | None = None
    phone: str | None = None
    role: MemberRole = MemberRole.VIEWER


class RoleUpdate(BaseModel):
    role: MemberRole


class InviteAccept(BaseModel):
    user_id: UUID | None = None


class JoinWithCode(BaseModel):
    code: str
    user_id: UUID | None = None


def get_team_write_model() -> TeamWriteModel:
    """Dependency to get team write model instance."""
    return SqlTeamWriteModel()


@router.get(MEMBERS_URL)
async def list_members(
    event_id: UUID,
    read_model: EventReadModel = Depends(get_event_read_model),
) -> list[EventMemberDTO]:
    return await read_model.list_members(event_id)


@router.post(MEMBERS_URL, status_code=status.HTTP_201_CREATED)
async def invite_member(
    event_id: UUID,
    request: MemberInvite,
    write_model: TeamWriteModel = Depends(get_team_write_model),
) -> EventMemberDTO:
    """Invite a co-organizer. The response carries the code they join with."""
    return await write_model.invite_member(event_id, **request.model_dump())


@router.patch(MEMBER_URL)
async def change_role(
    event_id: UUID,
    member_id: UUID,
    request: RoleUpdate,
    write_model: TeamWriteModel = Depends(get_team_write_model),
) -> EventMemberDTO:
    return await write_model.change_role(event_id, member_id, request.role)


@router.delete(MEMBER_URL, status_code=status.HTTP_204_NO_CONTENT)
async def remove_member(
    event_id: UUID,
    member_id: UUID,
    write_model: TeamWriteModel = Depends(get_team_write_model),
) -> Response:
    await write_model.remove_member(event_id, member_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(MEMBER_ACCEPT_URL)
async def accept_invite(
    event_id: UUID,
    member_id: UUID,
    request: InviteAccept,
    write_model: TeamWriteModel = Depends(get_team_write_model),
) -> EventMemberDTO:
    return await write_model.accept_invite(event_id, member_id, request.user_id)


@router.post(MEMBER_DECLINE_URL)
async def decline_invite(
    event_id: UUID,
    member_id: UUID,
    write_model: TeamWriteModel = Depends(get_team_write_model),
) -> EventMemberDTO:
    return await write_model.decline_invite(event_id, member_id)


@router.post(JOIN_URL)
async def join_with_code(
    event_id: UUID,
    request: JoinWithCode,
    write_model: TeamWriteModel = Depends(get_team_write_model),
) -> EventMemberDTO:
    return await write_model.accept_invite_by_code(event_id, request.code, request.user_id)
