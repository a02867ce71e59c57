"""Write model for event team members. Returns DTOs, never ORM models."""

from abc import ABC, abstractmethod
from uuid import UUID

from planner.events.aggregate import get_member
from planner.events.repository.write_models import SqlEventAggregateWriteModel
from planner.team import membership
from planner.team.dtos import EventMemberDTO, MemberRole


class TeamWriteModel(ABC):
    @abstractmethod
    async def invite_member(
        self,
        event_id: UUID,
        name: str,
        email: str | None = None,
        phone: str | None = None,
        role: MemberRole = MemberRole.VIEWER,
    ) -> EventMemberDTO:
        raise NotImplementedError

    @abstractmethod
    async def accept_invite(
        self, event_id: UUID, member_id: UUID, user_id: UUID | None = None
    ) -> EventMemberDTO:
        raise NotImplementedError

    @abstractmethod
    async def accept_invite_by_code(
        self, event_id: UUID, code: str, user_id: UUID | None = None
    ) -> EventMemberDTO:
        raise NotImplementedError

    @abstractmethod
    async def decline_invite(self, event_id: UUID, member_id: UUID) -> EventMemberDTO:
        raise NotImplementedError

    @abstractmethod
    async def change_role(self, event_id: UUID, member_id: UUID, role: MemberRole) -> EventMemberDTO:
        raise NotImplementedError

    @abstractmethod
    async def remove_member(self, event_id: UUID, member_id: UUID) -> None:
        raise NotImplementedError


class SqlTeamWriteModel(SqlEventAggregateWriteModel, TeamWriteModel):
    async def invite_member(
        self,
        event_id: UUID,
        name: str,
        email: str | None = None,
        phone: str | None = None,
        role: MemberRole = MemberRole.VIEWER,
    ) -> EventMemberDTO:
        async with self._event_aggregate(event_id, "invite_member") as event:
            member = membership.invite_member(event, name, email=email, phone=phone, role=role)
        return EventMemberDTO.from_member(member)

    async def accept_invite(
        self, event_id: UUID, member_id: UUID, user_id: UUID | None = None
    ) -> EventMemberDTO:
        operation = "accept_invite"
        async with self._event_aggregate(event_id, operation) as event:
            member = membership.accept_invite(get_member(event, member_id, operation), user_id)
        return EventMemberDTO.from_member(member)

    async def accept_invite_by_code(
        self, event_id: UUID, code: str, user_id: UUID | None = None
    ) -> EventMemberDTO:
        async with self._event_aggregate(event_id, "accept_invite_by_code") as event:
            member = membership.accept_invite_by_code(event, code, user_id)
        return EventMemberDTO.from_member(member)

    async def decline_invite(self, event_id: UUID, member_id: UUID) -> EventMemberDTO:
        operation = "decline_invite"
        async with self._event_aggregate(event_id, operation) as event:
            member = membership.decline_invite(get_member(event, member_id, operation))
        return EventMemberDTO.from_member(member)

    async def change_role(self, event_id: UUID, member_id: UUID, role: MemberRole) -> EventMemberDTO:
        operation = "change_role"
        async with self._event_aggregate(event_id, operation) as event:
            member = membership.change_role(get_member(event, member_id, operation), role)
        return EventMemberDTO.from_member(member)

    async def remove_member(self, event_id: UUID, member_id: UUID) -> None:
        async with self._event_aggregate(event_id, "remove_member") as event:
            membership.remove_member(event, member_id)
