"""Write model for functions and per-function invitations. Returns DTOs, never ORM models."""

import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from uuid import UUID

from planner.config.settings import settings
from planner.errors import NotFoundError
from planner.events.aggregate import get_function, get_guest
from planner.events.repository.write_models import SqlEventAggregateWriteModel
from planner.functions import invitations
from planner.functions.dtos import (
    BulkSendResultDTO,
    DressCode,
    FunctionDTO,
    FunctionInviteDTO,
    InviteChannel,
    RSVPResponse,
)
from planner.functions.sender import (
    InviteDispatcher,
    LinkDispatcher,
    deliver,
    mark_guest_sent,
    prepare_invites,
)
from planner.notifications import NotificationPublisher, rsvp_received

logger = logging.getLogger(__name__)


class FunctionWriteModel(ABC):
    @abstractmethod
    async def add_function(
        self,
        event_id: UUID,
        name: str,
        starts_at: datetime,
        ends_at: datetime | None = None,
        description: str | None = None,
        location_name: str | None = None,
        dress_code: DressCode | None = None,
        custom_dress_code: str | None = None,
    ) -> FunctionDTO:
        raise NotImplementedError

    @abstractmethod
    async def remove_function(self, event_id: UUID, function_id: UUID) -> None:
        raise NotImplementedError

    @abstractmethod
    async def create_invites(
        self,
        event_id: UUID,
        guest_ids: list[UUID],
        function_ids: list[UUID],
    ) -> list[FunctionInviteDTO]:
        """Invite each guest to each function; existing invites are kept as they are."""
        raise NotImplementedError

    @abstractmethod
    async def mark_sent(
        self, event_id: UUID, function_id: UUID, guest_id: UUID, channel: InviteChannel
    ) -> FunctionInviteDTO:
        raise NotImplementedError

    @abstractmethod
    async def record_response(
        self,
        event_id: UUID,
        function_id: UUID,
        guest_id: UUID,
        response: RSVPResponse,
        party_size: int | None = None,
        note: str | None = None,
    ) -> FunctionInviteDTO:
        """Record or overwrite a guest's answer; creates the invite if it is missing."""
        raise NotImplementedError

    @abstractmethod
    async def reopen_invite(
        self, event_id: UUID, function_id: UUID, guest_id: UUID
    ) -> FunctionInviteDTO:
        raise NotImplementedError

    @abstractmethod
    async def send_invites(
        self,
        event_id: UUID,
        guest_ids: list[UUID],
        function_ids: list[UUID],
        channel: InviteChannel,
    ) -> BulkSendResultDTO:
        raise NotImplementedError


class SqlFunctionWriteModel(SqlEventAggregateWriteModel, FunctionWriteModel):
    def __init__(
        self,
        session_overwrite=None,
        publisher: NotificationPublisher | None = None,
        dispatcher: InviteDispatcher | None = None,
        send_delay_seconds: float | None = None,
    ) -> None:
        super().__init__(session_overwrite=session_overwrite, publisher=publisher)
        self.dispatcher = dispatcher or LinkDispatcher()
        self.send_delay_seconds = (
            settings.invite_send_delay_seconds if send_delay_seconds is None else send_delay_seconds
        )

    async def add_function(
        self,
        event_id: UUID,
        name: str,
        starts_at: datetime,
        ends_at: datetime | None = None,
        description: str | None = None,
        location_name: str | None = None,
        dress_code: DressCode | None = None,
        custom_dress_code: str | None = None,
    ) -> FunctionDTO:
        async with self._event_aggregate(event_id, "add_function") as event:
            function = invitations.add_function(
                event,
                name,
                starts_at,
                ends_at=ends_at,
                description=description,
                location_name=location_name,
                dress_code=dress_code,
                custom_dress_code=custom_dress_code,
            )
        return FunctionDTO.from_function(function)

    async def remove_function(self, event_id: UUID, function_id: UUID) -> None:
        async with self._event_aggregate(event_id, "remove_function") as event:
            invitations.remove_function(event, function_id)

    async def create_invites(
        self,
        event_id: UUID,
        guest_ids: list[UUID],
        function_ids: list[UUID],
    ) -> list[FunctionInviteDTO]:
        operation = "create_invites"
        async with self._event_aggregate(event_id, operation) as event:
            guests = [get_guest(event, guest_id, operation) for guest_id in guest_ids]
            functions = [get_function(event, function_id, operation) for function_id in function_ids]
            created = invitations.create_invites(guests, functions)
        logger.info("Created %s invites for event %s", len(created), event_id)
        return [FunctionInviteDTO.from_invite(invite) for invite in created]

    async def mark_sent(
        self, event_id: UUID, function_id: UUID, guest_id: UUID, channel: InviteChannel
    ) -> FunctionInviteDTO:
        operation = "mark_sent"
        async with self._event_aggregate(event_id, operation) as event:
            function = get_function(event, function_id, operation)
            invite = invitations.find_invite(function, guest_id)
            if invite is None:
                raise NotFoundError("FunctionInvite", f"{guest_id}/{function_id}", operation)
            invitations.mark_sent(invite, channel)
        return FunctionInviteDTO.from_invite(invite)

    async def record_response(
        self,
        event_id: UUID,
        function_id: UUID,
        guest_id: UUID,
        response: RSVPResponse,
        party_size: int | None = None,
        note: str | None = None,
    ) -> FunctionInviteDTO:
        operation = "record_response"
        async with self._event_aggregate(event_id, operation) as event:
            guest = get_guest(event, guest_id, operation)
            function = get_function(event, function_id, operation)
            invite = invitations.create_invite(guest, function)
            invitations.record_response(
                invite,
                response,
                party_size=party_size,
                note=note,
                default_party_size=guest.total_headcount,
            )
        await self._publish(rsvp_received(event, guest, RSVPResponse(response), function))
        return FunctionInviteDTO.from_invite(invite)

    async def reopen_invite(
        self, event_id: UUID, function_id: UUID, guest_id: UUID
    ) -> FunctionInviteDTO:
        operation = "reopen_invite"
        async with self._event_aggregate(event_id, operation) as event:
            function = get_function(event, function_id, operation)
            invite = invitations.find_invite(function, guest_id)
            if invite is None:
                raise NotFoundError("FunctionInvite", f"{guest_id}/{function_id}", operation)
            invitations.reopen_invite(invite)
        return FunctionInviteDTO.from_invite(invite)

    async def send_invites(
        self,
        event_id: UUID,
        guest_ids: list[UUID],
        function_ids: list[UUID],
        channel: InviteChannel,
    ) -> BulkSendResultDTO:
        """Send to each guest in turn.

        Per guest, missing invites are created in one transaction, the message
        is dispatched with no transaction open, and a delivered message marks
        the invites sent in a second transaction. A failed delivery is counted
        and the loop moves on. Cancelling the task stops between steps; guests
        already processed stay committed.
        """
        operation = "send_invites"
        sent = 0
        created = 0
        failed_guest_ids = []
        for index, guest_id in enumerate(guest_ids):
            if index:
                await asyncio.sleep(self.send_delay_seconds)
            async with self._event_aggregate(event_id, operation) as event:
                guest = get_guest(event, guest_id, operation)
                functions = [get_function(event, f_id, operation) for f_id in function_ids]
                message, new_invites = prepare_invites(event, guest, functions)
            created += new_invites

            delivered = await deliver(self.dispatcher, channel, guest, event, message)
            if delivered:
                async with self._event_aggregate(event_id, operation) as event:
                    functions = [f for f in event.functions if f.uuid in function_ids]
                    mark_guest_sent(guest_id, functions, channel)
                sent += 1
            else:
                failed_guest_ids.append(guest_id)

        logger.info(
            "Sent invites for event %s via %s: %s sent, %s failed",
            event_id,
            channel,
            sent,
            len(failed_guest_ids),
        )
        return BulkSendResultDTO(
            sent_count=sent,
            failed_count=len(failed_guest_ids),
            created_invites=created,
            failed_guest_ids=failed_guest_ids,
        )
