"""User data export: a read-only JSON projection of what a user hosts and attends.

Keys are camelCase and sorted, dates are ISO-8601 in UTC, absent optional
values are left out. Ticketing lives outside this service, so ``tickets`` is
always empty.
"""

import json
import logging
from collections.abc import Iterable
from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

from planner.config.settings import settings
from planner.dates import as_utc
from planner.events.repository.orm_models import Event
from planner.models.base import utcnow

logger = logging.getLogger(__name__)


def _iso(value: datetime) -> str:
    return as_utc(value).replace(microsecond=0).isoformat().replace("+00:00", "Z")


IsoDatetime = Annotated[datetime, PlainSerializer(_iso, return_type=str)]


class ExportModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProfileExport(ExportModel):
    id: str
    name: str
    email: str | None = None


class FunctionExport(ExportModel):
    name: str
    date: IsoDatetime
    location: str | None = None


class HostedEventExport(ExportModel):
    id: str
    title: str
    description: str | None = None
    category: str
    start_date: IsoDatetime
    end_date: IsoDatetime | None = None
    location: str | None = None
    privacy: str
    created_at: IsoDatetime
    guest_count: int
    functions: list[FunctionExport] = []


class AttendingEventExport(ExportModel):
    event_title: str
    event_date: IsoDatetime
    rsvp_status: str
    responded_at: IsoDatetime | None = None


class UserDataExport(ExportModel):
    export_date: IsoDatetime
    app_version: str
    profile: ProfileExport
    hosted_events: list[HostedEventExport] = []
    attending_events: list[AttendingEventExport] = []
    tickets: list[dict] = []

    def to_json(self) -> str:
        data = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        return json.dumps(data, sort_keys=True, indent=2)


def hosted_event_export(event: Event) -> HostedEventExport:
    return HostedEventExport(
        id=str(event.uuid),
        title=event.title,
        description=event.description,
        category=event.category.value,
        start_date=event.starts_at,
        end_date=event.ends_at,
        location=event.location_name,
        privacy=event.privacy.value,
        created_at=event.created_at,
        guest_count=len(event.guests),
        functions=[
            FunctionExport(name=f.name, date=f.starts_at, location=f.location_name)
            for f in event.functions
        ],
    )


def build_user_export(
    user_id: UUID,
    name: str,
    email: str | None,
    events: Iterable[Event],
    export_date: datetime | None = None,
) -> UserDataExport:
    """Project ``events`` for one user: those they host and those they are a guest of."""
    hosted = []
    attending = []
    for event in events:
        if event.host_id == user_id:
            hosted.append(hosted_event_export(event))
        guest = next((g for g in event.guests if g.user_id == user_id), None)
        if guest is not None:
            attending.append(
                AttendingEventExport(
                    event_title=event.title,
                    event_date=event.starts_at,
                    rsvp_status=guest.status.value,
                    responded_at=guest.responded_at,
                )
            )

    export = UserDataExport(
        export_date=export_date or utcnow(),
        app_version=settings.app_version,
        profile=ProfileExport(id=str(user_id), name=name, email=email),
        hosted_events=hosted,
        attending_events=attending,
    )
    logger.info(
        "Built data export for user %s: %s hosted, %s attending",
        user_id,
        len(hosted),
        len(attending),
    )
    return export
