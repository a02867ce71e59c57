"""Event write models - load one aggregate, apply domain operations, commit once.

Write models return DTOs, never ORM models.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime
from functools import partial
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from planner.config.database import async_session_manager
from planner.errors import ConcurrencyConflictError, NotFoundError, PersistenceError
from planner.events import aggregate
from planner.events.dtos import EventCategory, EventDTO, EventFeature, EventPrivacy
from planner.events.repository.orm_models import Event
from planner.links import event_link
from planner.models.base import utcnow
from planner.notifications import (
    DomainEvent,
    LoggingNotificationPublisher,
    NotificationPublisher,
)

logger = logging.getLogger(__name__)


async def load_event(session: AsyncSession, event_id: UUID, operation: str | None = None) -> Event:
    """Load the whole aggregate, replacing anything stale in the identity map."""
    stmt = select(Event).where(Event.uuid == event_id).execution_options(populate_existing=True)
    result = await session.execute(stmt)
    event = result.scalar_one_or_none()
    if event is None:
        raise NotFoundError("Event", event_id, operation)
    return event


async def commit_aggregate(
    session: AsyncSession, event: Event, operation: str, commit: bool = True
) -> None:
    """Flush (and commit) one operation's changes, bumping the event version.

    Touching ``updated_at`` makes every change inside the aggregate an UPDATE
    of the event row, which the mapper checks against the loaded version.
    """
    event_id = event.uuid
    event.updated_at = utcnow()
    try:
        await session.flush()
        if commit:
            await session.commit()
    except StaleDataError:
        logger.warning("Event %s was changed concurrently during %s", event_id, operation)
        raise ConcurrencyConflictError(
            "The event was changed by someone else; reload and try again",
            operation=operation,
            entity="Event",
            entity_id=event_id,
        ) from None
    except SQLAlchemyError as e:
        logger.exception("Committing %s for event %s failed", operation, event_id)
        raise PersistenceError(
            "Saving changes failed; retry the operation",
            operation=operation,
            entity="Event",
            entity_id=event_id,
        ) from e


class SqlEventAggregateWriteModel:
    """Shared unit of work for every write model that changes one event."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(
        self,
        session_overwrite: AsyncSession | None = None,
        publisher: NotificationPublisher | None = None,
    ) -> None:
        self.session_overwrite = session_overwrite
        self.publisher = publisher or LoggingNotificationPublisher()

    @asynccontextmanager
    async def _event_aggregate(
        self, event_id: UUID, operation: str, expected_version: int | None = None
    ) -> AsyncIterator[Event]:
        async with self.async_session_manager(
            auto_commit=False, session_overwrite=self.session_overwrite
        ) as session:
            event = await load_event(session, event_id, operation)
            if expected_version is not None and event.version != expected_version:
                logger.warning(
                    "Event %s is at version %s, caller expected %s",
                    event_id,
                    event.version,
                    expected_version,
                )
                raise ConcurrencyConflictError(
                    f"Event is at version {event.version}, not {expected_version}",
                    operation=operation,
                    entity="Event",
                    entity_id=event_id,
                )
            yield event
            await commit_aggregate(
                session, event, operation, commit=self.session_overwrite is None
            )

    async def _publish(self, event: DomainEvent | None) -> None:
        if event is not None:
            await self.publisher.publish(event)


class EventWriteModel(ABC):
    @abstractmethod
    async def create_event(
        self,
        title: str,
        starts_at: datetime,
        ends_at: datetime | None = None,
        description: str | None = None,
        category: EventCategory = EventCategory.PARTY,
        privacy: EventPrivacy = EventPrivacy.INVITE_ONLY,
        capacity: int | None = None,
        location_name: str | None = None,
        host_id: UUID | None = None,
        enabled_features: list[EventFeature] | None = None,
    ) -> EventDTO:
        raise NotImplementedError

    @abstractmethod
    async def update_event(
        self, event_id: UUID, expected_version: int | None = None, **changes
    ) -> EventDTO:
        """Apply the given fields; see ``aggregate.update_event_details``."""
        raise NotImplementedError

    @abstractmethod
    async def delete_event(self, event_id: UUID, expected_version: int | None = None) -> None:
        """Delete the event and everything it owns in one transaction."""
        raise NotImplementedError


class SqlEventWriteModel(SqlEventAggregateWriteModel, EventWriteModel):
    async def create_event(
        self,
        title: str,
        starts_at: datetime,
        ends_at: datetime | None = None,
        description: str | None = None,
        category: EventCategory = EventCategory.PARTY,
        privacy: EventPrivacy = EventPrivacy.INVITE_ONLY,
        capacity: int | None = None,
        location_name: str | None = None,
        host_id: UUID | None = None,
        enabled_features: list[EventFeature] | None = None,
    ) -> EventDTO:
        event = aggregate.create_event(
            title=title,
            starts_at=starts_at,
            ends_at=ends_at,
            description=description,
            category=category,
            privacy=privacy,
            capacity=capacity,
            location_name=location_name,
            host_id=host_id,
            enabled_features=enabled_features,
        )
        async with self.async_session_manager(
            auto_commit=False, session_overwrite=self.session_overwrite
        ) as session:
            session.add(event)
            await commit_aggregate(
                session, event, "create_event", commit=self.session_overwrite is None
            )
        return EventDTO.from_event(event, share_link=event_link(event.uuid))

    async def update_event(
        self, event_id: UUID, expected_version: int | None = None, **changes
    ) -> EventDTO:
        async with self._event_aggregate(event_id, "update_event", expected_version) as event:
            aggregate.update_event_details(event, **changes)
        return EventDTO.from_event(event, share_link=event_link(event.uuid))

    async def delete_event(self, event_id: UUID, expected_version: int | None = None) -> None:
        operation = "delete_event"
        async with self.async_session_manager(
            auto_commit=False, session_overwrite=self.session_overwrite
        ) as session:
            event = await load_event(session, event_id, operation)
            if expected_version is not None and event.version != expected_version:
                raise ConcurrencyConflictError(
                    f"Event is at version {event.version}, not {expected_version}",
                    operation=operation,
                    entity="Event",
                    entity_id=event_id,
                )
            await session.delete(event)
            try:
                await session.flush()
                if self.session_overwrite is None:
                    await session.commit()
            except StaleDataError:
                raise ConcurrencyConflictError(
                    "The event was changed by someone else; reload and try again",
                    operation=operation,
                    entity="Event",
                    entity_id=event_id,
                ) from None
            except SQLAlchemyError as e:
                logger.exception("Deleting event %s failed", event_id)
                raise PersistenceError(
                    "Deleting the event failed; retry the operation",
                    operation=operation,
                    entity="Event",
                    entity_id=event_id,
                ) from e
        logger.info("Deleted event %s", event_id)
