from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from planner.events.repository.read_models import EventReadModel
from planner.events.router import get_event_read_model
from planner.seating.dtos import DEFAULT_TABLE_CAPACITY, SeatingPlanDTO, SeatingTableDTO
from planner.seating.write_model import SeatingWriteModel, SqlSeatingWriteModel

router = APIRouter()

TABLES_URL = "/api/v1/events/{event_id}/tables"
TABLE_URL = "/api/v1/events/{event_id}/tables/{table_id}"
TABLE_GUEST_URL = "/api/v1/events/{event_id}/tables/{table_id}/guests/{guest_id}"


class TableCreate(BaseModel):
    name: str
    capacity: int = DEFAULT_TABLE_CAPACITY


class TableResize(BaseModel):
    capacity: int


def get_seating_write_model() -> SeatingWriteModel:
    """Dependency to get seating write model instance."""
    return SqlSeatingWriteModel()


@router.get(TABLES_URL)
async def get_seating_plan(
    event_id: UUID,
    read_model: EventReadModel = Depends(get_event_read_model),
) -> SeatingPlanDTO:
    return await read_model.seating_plan(event_id)


@router.post(TABLES_URL, status_code=status.HTTP_201_CREATED)
async def create_table(
    event_id: UUID,
    request: TableCreate,
    write_model: SeatingWriteModel = Depends(get_seating_write_model),
) -> SeatingTableDTO:
    return await write_model.create_table(event_id, request.name, request.capacity)


@router.patch(TABLE_URL)
async def resize_table(
    event_id: UUID,
    table_id: UUID,
    request: TableResize,
    write_model: SeatingWriteModel = Depends(get_seating_write_model),
) -> SeatingTableDTO:
    return await write_model.resize_table(event_id, table_id, request.capacity)


@router.delete(TABLE_URL, status_code=status.HTTP_204_NO_CONTENT)
async def remove_table(
    event_id: UUID,
    table_id: UUID,
    write_model: SeatingWriteModel = Depends(get_seating_write_model),
) -> Response:
    await write_model.remove_table(event_id, table_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put(TABLE_GUEST_URL)
async def assign_guest(
    event_id: UUID,
    table_id: UUID,
    guest_id: UUID,
    write_model: SeatingWriteModel = Depends(get_seating_write_model),
) -> list[SeatingTableDTO]:
    """
    Seat a guest at a table.
    A guest already seated elsewhere is moved; a full table is rejected with 409.
    """
    return await write_model.assign_guest(event_id, table_id, guest_id)


@router.delete(TABLE_GUEST_URL)
async def unassign_guest(
    event_id: UUID,
    table_id: UUID,
    guest_id: UUID,
    write_model: SeatingWriteModel = Depends(get_seating_write_model),
) -> SeatingTableDTO:
    return await write_model.unassign_guest(event_id, table_id, guest_id)
