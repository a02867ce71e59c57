"""Domain errors.

Every error carries the operation that failed and the entity it was applied
to, so callers can render a user-facing message without parsing strings.
Validation happens before any mutation: when one of these is raised by a
domain operation, nothing was applied.
"""

from uuid import UUID


class PlannerError(Exception):
    """Base class for all domain errors."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        entity: str | None = None,
        entity_id: UUID | str | None = None,
    ) -> None:
        self.message = message
        self.operation = operation
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            "detail": self.message,
            "operation": self.operation,
            "entity": self.entity,
            "entity_id": str(self.entity_id) if self.entity_id is not None else None,
        }


class ValidationError(PlannerError):
    """Raised when input is rejected: empty required field, non-positive capacity, negative amount."""


class NotFoundError(PlannerError):
    """Raised when an id does not exist inside the target event."""

    def __init__(self, entity: str, entity_id: UUID | str, operation: str | None = None) -> None:
        super().__init__(
            f"{entity} '{entity_id}' not found",
            operation=operation,
            entity=entity,
            entity_id=entity_id,
        )


class CapacityExceeded(PlannerError):
    """Raised when a seating table is already full."""

    def __init__(self, table_name: str, capacity: int, table_id: UUID, operation: str) -> None:
        self.capacity = capacity
        super().__init__(
            f"Table '{table_name}' is full ({capacity} seats)",
            operation=operation,
            entity="SeatingTable",
            entity_id=table_id,
        )


class AlreadyExists(PlannerError):
    """Raised when creating a second instance of a one-per-event entity."""


class PersistenceError(PlannerError):
    """Raised when the durable store rejects a commit."""


class ConcurrencyConflictError(PlannerError):
    """Raised when the event was changed by another writer since it was read."""
