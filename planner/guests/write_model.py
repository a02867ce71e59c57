"""Write model for guests and their party composition. Returns DTOs, never ORM models."""

from abc import ABC, abstractmethod
from uuid import UUID

from planner.events.aggregate import get_guest
from planner.events.repository.write_models import SqlEventAggregateWriteModel
from planner.guests import party
from planner.guests.dtos import GuestDTO, GuestRole, PartyMemberDTO, PartyRelationship, RSVPStatus
from planner.links import rsvp_link
from planner.notifications import rsvp_received


def _to_dto(event_id: UUID, guest) -> GuestDTO:
    return GuestDTO.from_guest(guest, rsvp_link=rsvp_link(event_id, guest.uuid))


class GuestWriteModel(ABC):
    @abstractmethod
    async def add_guest(
        self,
        event_id: UUID,
        name: str,
        email: str | None = None,
        phone: str | None = None,
        role: GuestRole = GuestRole.GUEST,
        plus_one_count: int = 0,
        expected_version: int | None = None,
    ) -> GuestDTO:
        raise NotImplementedError

    @abstractmethod
    async def update_guest(
        self, event_id: UUID, guest_id: UUID, expected_version: int | None = None, **changes
    ) -> GuestDTO:
        raise NotImplementedError

    @abstractmethod
    async def set_rsvp(
        self,
        event_id: UUID,
        guest_id: UUID,
        status: RSVPStatus,
        plus_one_count: int | None = None,
        expected_version: int | None = None,
    ) -> GuestDTO:
        raise NotImplementedError

    @abstractmethod
    async def add_party_member(
        self,
        event_id: UUID,
        guest_id: UUID,
        name: str,
        relation: PartyRelationship | None = None,
        dietary_restrictions: str | None = None,
    ) -> PartyMemberDTO:
        raise NotImplementedError

    @abstractmethod
    async def remove_party_member(self, event_id: UUID, guest_id: UUID, member_id: UUID) -> None:
        raise NotImplementedError

    @abstractmethod
    async def remove_guest(
        self, event_id: UUID, guest_id: UUID, expected_version: int | None = None
    ) -> None:
        """Remove the guest together with their function invites and seat."""
        raise NotImplementedError


class SqlGuestWriteModel(SqlEventAggregateWriteModel, GuestWriteModel):
    async def add_guest(
        self,
        event_id: UUID,
        name: str,
        email: str | None = None,
        phone: str | None = None,
        role: GuestRole = GuestRole.GUEST,
        plus_one_count: int = 0,
        expected_version: int | None = None,
    ) -> GuestDTO:
        async with self._event_aggregate(event_id, "add_guest", expected_version) as event:
            guest = party.add_guest(
                event, name, email=email, phone=phone, role=role, plus_one_count=plus_one_count
            )
        return _to_dto(event_id, guest)

    async def update_guest(
        self, event_id: UUID, guest_id: UUID, expected_version: int | None = None, **changes
    ) -> GuestDTO:
        operation = "update_guest"
        async with self._event_aggregate(event_id, operation, expected_version) as event:
            guest = party.update_guest_details(get_guest(event, guest_id, operation), **changes)
        return _to_dto(event_id, guest)

    async def set_rsvp(
        self,
        event_id: UUID,
        guest_id: UUID,
        status: RSVPStatus,
        plus_one_count: int | None = None,
        expected_version: int | None = None,
    ) -> GuestDTO:
        operation = "set_rsvp"
        async with self._event_aggregate(event_id, operation, expected_version) as event:
            guest = party.set_rsvp(get_guest(event, guest_id, operation), status, plus_one_count)
        await self._publish(rsvp_received(event, guest, RSVPStatus(status)))
        return _to_dto(event_id, guest)

    async def add_party_member(
        self,
        event_id: UUID,
        guest_id: UUID,
        name: str,
        relation: PartyRelationship | None = None,
        dietary_restrictions: str | None = None,
    ) -> PartyMemberDTO:
        operation = "add_party_member"
        async with self._event_aggregate(event_id, operation) as event:
            member = party.add_party_member(
                get_guest(event, guest_id, operation),
                name,
                relation=relation,
                dietary_restrictions=dietary_restrictions,
            )
        return PartyMemberDTO.from_member(member)

    async def remove_party_member(self, event_id: UUID, guest_id: UUID, member_id: UUID) -> None:
        operation = "remove_party_member"
        async with self._event_aggregate(event_id, operation) as event:
            party.remove_party_member(get_guest(event, guest_id, operation), member_id)

    async def remove_guest(
        self, event_id: UUID, guest_id: UUID, expected_version: int | None = None
    ) -> None:
        async with self._event_aggregate(event_id, "remove_guest", expected_version) as event:
            party.remove_guest(event, guest_id)
