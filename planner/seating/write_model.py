"""Write model for seating tables. Returns DTOs, never ORM models."""

from abc import ABC, abstractmethod
from uuid import UUID

from planner.events.aggregate import get_table
from planner.events.repository.write_models import SqlEventAggregateWriteModel
from planner.seating import assignments
from planner.seating.dtos import DEFAULT_TABLE_CAPACITY, SeatingTableDTO


class SeatingWriteModel(ABC):
    @abstractmethod
    async def create_table(
        self, event_id: UUID, name: str, capacity: int = DEFAULT_TABLE_CAPACITY
    ) -> SeatingTableDTO:
        raise NotImplementedError

    @abstractmethod
    async def resize_table(self, event_id: UUID, table_id: UUID, capacity: int) -> SeatingTableDTO:
        raise NotImplementedError

    @abstractmethod
    async def remove_table(self, event_id: UUID, table_id: UUID) -> None:
        raise NotImplementedError

    @abstractmethod
    async def assign_guest(
        self, event_id: UUID, table_id: UUID, guest_id: UUID
    ) -> list[SeatingTableDTO]:
        """Seat a guest; returns every table so a move shows up on both sides."""
        raise NotImplementedError

    @abstractmethod
    async def unassign_guest(self, event_id: UUID, table_id: UUID, guest_id: UUID) -> SeatingTableDTO:
        raise NotImplementedError


class SqlSeatingWriteModel(SqlEventAggregateWriteModel, SeatingWriteModel):
    async def create_table(
        self, event_id: UUID, name: str, capacity: int = DEFAULT_TABLE_CAPACITY
    ) -> SeatingTableDTO:
        async with self._event_aggregate(event_id, "create_table") as event:
            table = assignments.create_table(event, name, capacity)
        return SeatingTableDTO.from_table(table)

    async def resize_table(self, event_id: UUID, table_id: UUID, capacity: int) -> SeatingTableDTO:
        operation = "resize_table"
        async with self._event_aggregate(event_id, operation) as event:
            table = assignments.resize_table(get_table(event, table_id, operation), capacity)
        return SeatingTableDTO.from_table(table)

    async def remove_table(self, event_id: UUID, table_id: UUID) -> None:
        async with self._event_aggregate(event_id, "remove_table") as event:
            assignments.remove_table(event, table_id)

    async def assign_guest(
        self, event_id: UUID, table_id: UUID, guest_id: UUID
    ) -> list[SeatingTableDTO]:
        operation = "assign_guest"
        async with self._event_aggregate(event_id, operation) as event:
            assignments.assign_guest(event, get_table(event, table_id, operation), guest_id)
        return [SeatingTableDTO.from_table(t) for t in event.seating_tables]

    async def unassign_guest(self, event_id: UUID, table_id: UUID, guest_id: UUID) -> SeatingTableDTO:
        operation = "unassign_guest"
        async with self._event_aggregate(event_id, operation) as event:
            table = get_table(event, table_id, operation)
            assignments.unassign_guest(table, guest_id)
        return SeatingTableDTO.from_table(table)
