from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from planner.events.repository.orm_models import SeatingTable

DEFAULT_TABLE_CAPACITY = 8


@dataclass(frozen=True)
class SeatingTableDTO:
    """DTO for a seating table and its occupants in seat order."""

    id: UUID
    name: str
    capacity: int
    guest_ids: list[UUID] = field(default_factory=list)

    @property
    def remaining_seats(self) -> int:
        return max(0, self.capacity - len(self.guest_ids))

    @classmethod
    def from_table(cls, table: "SeatingTable") -> "SeatingTableDTO":
        return cls(
            id=table.uuid,
            name=table.name,
            capacity=table.capacity,
            guest_ids=list(table.guest_ids),
        )


@dataclass(frozen=True)
class SeatingPlanDTO:
    tables: list[SeatingTableDTO]
    unassigned_guest_ids: list[UUID]
