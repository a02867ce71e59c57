"""Seating tables and guest placement.

Each guest of an event has at most one ``SeatAssignment``. Assigning a guest to
another table moves that record, so a guest can never sit at two tables.
"""

from uuid import UUID, uuid4

from planner.errors import CapacityExceeded, ValidationError
from planner.events.aggregate import get_guest, get_table, require_text
from planner.events.repository.orm_models import Event, Guest, SeatAssignment, SeatingTable
from planner.models.base import utcnow
from planner.seating.dtos import DEFAULT_TABLE_CAPACITY


def _check_capacity(capacity: int, operation: str, table_id: UUID | None = None) -> None:
    if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
        raise ValidationError(
            "Table capacity must be a positive whole number",
            operation=operation,
            entity="SeatingTable",
            entity_id=table_id,
        )


def create_table(event: Event, name: str, capacity: int = DEFAULT_TABLE_CAPACITY) -> SeatingTable:
    operation = "create_table"
    name = require_text(name, "Table name", operation, "SeatingTable")
    _check_capacity(capacity, operation)

    now = utcnow()
    table = SeatingTable(
        uuid=uuid4(),
        event_id=event.uuid,
        name=name,
        capacity=capacity,
        created_at=now,
        updated_at=now,
        assignments=[],
    )
    event.seating_tables.append(table)
    return table


def resize_table(table: SeatingTable, capacity: int) -> SeatingTable:
    operation = "resize_table"
    _check_capacity(capacity, operation, table.uuid)
    if capacity < len(table.assignments):
        raise ValidationError(
            f"Table '{table.name}' already seats {len(table.assignments)} guests",
            operation=operation,
            entity="SeatingTable",
            entity_id=table.uuid,
        )
    table.capacity = capacity
    return table


def remove_table(event: Event, table_id: UUID) -> SeatingTable:
    """Delete a table; its guests become unassigned."""
    table = get_table(event, table_id, "remove_table")
    event.seating_tables.remove(table)
    return table


def find_assignment(event: Event, guest_id: UUID) -> tuple[SeatingTable, SeatAssignment] | None:
    for table in event.seating_tables:
        for assignment in table.assignments:
            if assignment.guest_id == guest_id:
                return table, assignment
    return None


def assign_guest(event: Event, table: SeatingTable, guest_id: UUID) -> SeatAssignment:
    """Seat a guest at ``table``, moving them off any other table of the event.

    Raises ``CapacityExceeded`` when the table is full; no table changes then.
    Seating a guest at the table they already sit at changes nothing.
    """
    operation = "assign_guest"
    guest = get_guest(event, guest_id, operation)
    get_table(event, table.uuid, operation)

    current = find_assignment(event, guest.uuid)
    if current is not None and current[0] is table:
        return current[1]
    if table.is_full:
        raise CapacityExceeded(table.name, table.capacity, table.uuid, operation)

    if current is not None:
        previous_table, assignment = current
        # Detach before attaching so the record is never treated as an orphan
        previous_table.assignments.remove(assignment)
        table.assignments.append(assignment)
        assignment.table_id = table.uuid
        return assignment

    now = utcnow()
    assignment = SeatAssignment(
        uuid=uuid4(),
        event_id=event.uuid,
        table_id=table.uuid,
        guest_id=guest.uuid,
        created_at=now,
        updated_at=now,
    )
    table.assignments.append(assignment)
    guest.seat_assignments.append(assignment)
    return assignment


def unassign_guest(table: SeatingTable, guest_id: UUID) -> bool:
    """Remove the guest from the table if seated there; returns whether anything changed."""
    for assignment in table.assignments:
        if assignment.guest_id == guest_id:
            table.assignments.remove(assignment)
            return True
    return False


def table_for_guest(event: Event, guest_id: UUID) -> SeatingTable | None:
    found = find_assignment(event, guest_id)
    return found[0] if found else None


def unassigned_guests(event: Event) -> list[Guest]:
    seated = {a.guest_id for t in event.seating_tables for a in t.assignments}
    return [g for g in event.guests if g.uuid not in seated]
