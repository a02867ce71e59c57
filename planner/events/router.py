from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from planner.events.dtos import (
    EventCategory,
    EventDTO,
    EventFeature,
    EventPrivacy,
    EventSummaryDTO,
)
from planner.events.repository.read_models import EventReadModel, SqlEventReadModel
from planner.events.repository.write_models import EventWriteModel, SqlEventWriteModel

router = APIRouter()

EVENTS_URL = "/api/v1/events"
EVENT_URL = "/api/v1/events/{event_id}"
EVENT_SUMMARY_URL = "/api/v1/events/{event_id}/summary"
EVENT_REMINDERS_URL = "/api/v1/events/{event_id}/reminders"
USER_EXPORT_URL = "/api/v1/users/{user_id}/export"


class EventCreate(BaseModel):
    title: str
    starts_at: datetime
    ends_at: datetime | None = None
    description: str | None = None
    category: EventCategory = EventCategory.PARTY
    privacy: EventPrivacy = EventPrivacy.INVITE_ONLY
    capacity: int | None = None
    location_name: str | None = None
    host_id: UUID | None = None
    enabled_features: list[EventFeature] | None = None


class EventUpdate(BaseModel):
    """Only the fields present in the request body are changed."""

    title: str | None = None
    description: str | None = None
    starts_at: datetime | None = None
    ends_at: datetime | None = None
    capacity: int | None = None
    privacy: EventPrivacy | None = None
    location_name: str | None = None
    enabled_features: list[EventFeature] | None = None


class ReminderResponse(BaseModel):
    identifier: str
    function_id: UUID | None
    title: str
    body: str
    days_before: int
    fire_at: datetime


def get_event_write_model() -> EventWriteModel:
    """Dependency to get event write model instance."""
    return SqlEventWriteModel()


def get_event_read_model() -> EventReadModel:
    """Dependency to get event read model instance."""
    return SqlEventReadModel()


@router.post(EVENTS_URL, status_code=status.HTTP_201_CREATED)
async def create_event(
    request: EventCreate,
    write_model: EventWriteModel = Depends(get_event_write_model),
) -> EventDTO:
    return await write_model.create_event(**request.model_dump())


@router.get(EVENT_URL)
async def get_event(
    event_id: UUID,
    read_model: EventReadModel = Depends(get_event_read_model),
) -> EventDTO:
    return await read_model.get_event(event_id)


@router.patch(EVENT_URL)
async def update_event(
    event_id: UUID,
    request: EventUpdate,
    expected_version: int | None = None,
    write_model: EventWriteModel = Depends(get_event_write_model),
) -> EventDTO:
    return await write_model.update_event(
        event_id, expected_version=expected_version, **request.model_dump(exclude_unset=True)
    )


@router.delete(EVENT_URL, status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(
    event_id: UUID,
    expected_version: int | None = None,
    write_model: EventWriteModel = Depends(get_event_write_model),
) -> Response:
    """Delete the event with everything it owns."""
    await write_model.delete_event(event_id, expected_version=expected_version)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(EVENT_SUMMARY_URL)
async def get_event_summary(
    event_id: UUID,
    read_model: EventReadModel = Depends(get_event_read_model),
) -> EventSummaryDTO:
    return await read_model.get_summary(event_id)


@router.get(EVENT_REMINDERS_URL, response_model=list[ReminderResponse])
async def list_reminders(
    event_id: UUID,
    read_model: EventReadModel = Depends(get_event_read_model),
) -> list[ReminderResponse]:
    reminders = await read_model.reminders(event_id)
    return [
        ReminderResponse(
            identifier=reminder.identifier,
            function_id=reminder.function_id,
            title=reminder.title,
            body=reminder.body,
            days_before=reminder.days_before,
            fire_at=reminder.fire_at,
        )
        for reminder in reminders
    ]


@router.get(USER_EXPORT_URL)
async def export_user_data(
    user_id: UUID,
    name: str,
    email: str | None = None,
    read_model: EventReadModel = Depends(get_event_read_model),
) -> Response:
    """
    Export everything stored about a user as a JSON document.
    Covers the events they host and the events they are a guest of.
    """
    content = await read_model.export_user_data(user_id, name, email)
    return Response(content=content, media_type="application/json")
