"""In-memory stand-ins for the SQL read and write models.

They keep event aggregates in a dict and run the same domain operations, so
endpoint tests exercise real behaviour without a database.
"""

from contextlib import asynccontextmanager
from uuid import UUID

from planner.budget.write_model import SqlBudgetWriteModel
from planner.errors import ConcurrencyConflictError, NotFoundError
from planner.events import aggregate
from planner.events.dtos import EventDTO
from planner.events.export import build_user_export
from planner.events.repository.orm_models import Event
from planner.events.repository.read_models import SqlEventReadModel
from planner.events.repository.write_models import SqlEventWriteModel
from planner.functions.write_model import SqlFunctionWriteModel
from planner.guests.write_model import SqlGuestWriteModel
from planner.links import event_link
from planner.seating.write_model import SqlSeatingWriteModel
from planner.team.write_model import SqlTeamWriteModel


class InMemoryEventStore:
    """Holds event aggregates by id."""

    def __init__(self):
        self.events: dict[UUID, Event] = {}

    def add(self, event: Event) -> Event:
        event.version = 1
        self.events[event.uuid] = event
        return event

    def get(self, event_id: UUID, operation: str | None = None) -> Event:
        if event_id not in self.events:
            raise NotFoundError("Event", event_id, operation)
        return self.events[event_id]


class InMemoryUnitOfWork:
    """Replaces the session-backed aggregate loading with the in-memory store."""

    def __init__(self, store: InMemoryEventStore, **kwargs):
        super().__init__(**kwargs)
        self.store = store

    def _check_version(self, event: Event, operation: str, expected_version: int | None) -> None:
        if expected_version is not None and event.version != expected_version:
            raise ConcurrencyConflictError(
                f"Event is at version {event.version}, not {expected_version}",
                operation=operation,
                entity="Event",
                entity_id=event.uuid,
            )

    @asynccontextmanager
    async def _event_aggregate(
        self, event_id: UUID, operation: str, expected_version: int | None = None
    ):
        event = self.store.get(event_id, operation)
        self._check_version(event, operation, expected_version)
        yield event
        event.version += 1


class InMemoryEventWriteModel(InMemoryUnitOfWork, SqlEventWriteModel):
    async def create_event(self, **kwargs) -> EventDTO:
        event = self.store.add(aggregate.create_event(**kwargs))
        return EventDTO.from_event(event, share_link=event_link(event.uuid))

    async def delete_event(self, event_id: UUID, expected_version: int | None = None) -> None:
        event = self.store.get(event_id, "delete_event")
        self._check_version(event, "delete_event", expected_version)
        del self.store.events[event_id]


class InMemoryGuestWriteModel(InMemoryUnitOfWork, SqlGuestWriteModel):
    pass


class InMemoryFunctionWriteModel(InMemoryUnitOfWork, SqlFunctionWriteModel):
    pass


class InMemorySeatingWriteModel(InMemoryUnitOfWork, SqlSeatingWriteModel):
    pass


class InMemoryBudgetWriteModel(InMemoryUnitOfWork, SqlBudgetWriteModel):
    pass


class InMemoryTeamWriteModel(InMemoryUnitOfWork, SqlTeamWriteModel):
    pass


class InMemoryEventReadModel(SqlEventReadModel):
    def __init__(self, store: InMemoryEventStore):
        super().__init__()
        self.store = store

    async def _load(self, event_id: UUID, operation: str) -> Event:
        return self.store.get(event_id, operation)

    async def export_user_data(self, user_id: UUID, name: str, email: str | None = None) -> str:
        events = sorted(self.store.events.values(), key=lambda e: e.starts_at)
        return build_user_export(user_id, name, email, events).to_json()
