import abc
from datetime import datetime
from functools import partial
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from planner.budget.dtos import BudgetDTO
from planner.config.database import async_session_manager
from planner.events import aggregate
from planner.events.dtos import EventDTO, EventSummaryDTO
from planner.events.export import build_user_export
from planner.events.repository.orm_models import Event, Guest
from planner.events.repository.write_models import load_event
from planner.functions.dtos import FunctionDTO, InviteMessageDTO
from planner.functions.invitations import available_channels
from planner.functions.messages import build_invite_message, channel_url, invite_subject
from planner.guests.dtos import GuestDTO
from planner.links import event_link, rsvp_link
from planner.notifications import DEFAULT_REMINDER_DAYS, EventReminderEvent, reminder_triggers
from planner.seating import assignments
from planner.seating.dtos import SeatingPlanDTO, SeatingTableDTO
from planner.team.dtos import EventMemberDTO


class EventReadModel(abc.ABC):
    @abc.abstractmethod
    async def get_event(self, event_id: UUID) -> EventDTO:
        raise NotImplementedError

    @abc.abstractmethod
    async def get_summary(self, event_id: UUID) -> EventSummaryDTO:
        raise NotImplementedError

    @abc.abstractmethod
    async def list_guests(self, event_id: UUID) -> list[GuestDTO]:
        raise NotImplementedError

    @abc.abstractmethod
    async def list_functions(self, event_id: UUID) -> list[FunctionDTO]:
        raise NotImplementedError

    @abc.abstractmethod
    async def seating_plan(self, event_id: UUID) -> SeatingPlanDTO:
        raise NotImplementedError

    @abc.abstractmethod
    async def get_budget(self, event_id: UUID) -> BudgetDTO:
        raise NotImplementedError

    @abc.abstractmethod
    async def list_members(self, event_id: UUID) -> list[EventMemberDTO]:
        raise NotImplementedError

    @abc.abstractmethod
    async def invite_message(
        self, event_id: UUID, guest_id: UUID, function_ids: list[UUID] | None = None
    ) -> InviteMessageDTO:
        """
        Render the invite for one guest.
        With ``function_ids`` the message lists those functions, otherwise the
        functions the guest is invited to.
        """
        raise NotImplementedError

    @abc.abstractmethod
    async def export_user_data(self, user_id: UUID, name: str, email: str | None = None) -> str:
        raise NotImplementedError

    @abc.abstractmethod
    async def reminders(
        self, event_id: UUID, now: datetime | None = None
    ) -> list[EventReminderEvent]:
        raise NotImplementedError


class SqlEventReadModel(EventReadModel):
    """SQL implementation of the event read model."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def _load(self, event_id: UUID, operation: str) -> Event:
        async with self.async_session_manager(
            auto_commit=False, session_overwrite=self.session_overwrite
        ) as session:
            return await load_event(session, event_id, operation)

    async def get_event(self, event_id: UUID) -> EventDTO:
        event = await self._load(event_id, "get_event")
        return EventDTO.from_event(event, share_link=event_link(event.uuid))

    async def get_summary(self, event_id: UUID) -> EventSummaryDTO:
        return aggregate.summarize(await self._load(event_id, "get_summary"))

    async def list_guests(self, event_id: UUID) -> list[GuestDTO]:
        event = await self._load(event_id, "list_guests")
        return [
            GuestDTO.from_guest(guest, rsvp_link=rsvp_link(event.uuid, guest.uuid))
            for guest in event.guests
        ]

    async def list_functions(self, event_id: UUID) -> list[FunctionDTO]:
        event = await self._load(event_id, "list_functions")
        return [FunctionDTO.from_function(function) for function in event.functions]

    async def seating_plan(self, event_id: UUID) -> SeatingPlanDTO:
        event = await self._load(event_id, "seating_plan")
        return SeatingPlanDTO(
            tables=[SeatingTableDTO.from_table(table) for table in event.seating_tables],
            unassigned_guest_ids=[guest.uuid for guest in assignments.unassigned_guests(event)],
        )

    async def get_budget(self, event_id: UUID) -> BudgetDTO:
        operation = "get_budget"
        event = await self._load(event_id, operation)
        return BudgetDTO.from_budget(aggregate.get_budget(event, operation))

    async def list_members(self, event_id: UUID) -> list[EventMemberDTO]:
        event = await self._load(event_id, "list_members")
        return [EventMemberDTO.from_member(member) for member in event.members]

    async def invite_message(
        self, event_id: UUID, guest_id: UUID, function_ids: list[UUID] | None = None
    ) -> InviteMessageDTO:
        operation = "invite_message"
        event = await self._load(event_id, operation)
        guest = aggregate.get_guest(event, guest_id, operation)
        if function_ids is None:
            invited = {invite.function_id for invite in guest.invites}
            functions = [f for f in event.functions if f.uuid in invited]
        else:
            functions = [aggregate.get_function(event, f_id, operation) for f_id in function_ids]

        body = build_invite_message(guest, event, functions)
        urls = {}
        for channel in available_channels(guest):
            url = channel_url(channel, guest, event, body)
            if url is not None:
                urls[channel] = url
        return InviteMessageDTO(
            guest_id=guest.uuid,
            subject=invite_subject(event),
            body=body,
            channel_urls=urls,
        )

    async def export_user_data(self, user_id: UUID, name: str, email: str | None = None) -> str:
        async with self.async_session_manager(
            auto_commit=False, session_overwrite=self.session_overwrite
        ) as session:
            stmt = (
                select(Event)
                .where(or_(Event.host_id == user_id, Event.guests.any(Guest.user_id == user_id)))
                .order_by(Event.starts_at)
            )
            result = await session.execute(stmt)
            events = result.scalars().all()
            return build_user_export(user_id, name, email, events).to_json()

    async def reminders(
        self, event_id: UUID, now: datetime | None = None
    ) -> list[EventReminderEvent]:
        event = await self._load(event_id, "reminders")
        return reminder_triggers(event, DEFAULT_REMINDER_DAYS, now=now)
