from contextlib import asynccontextmanager
from datetime import UTC, datetime

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from planner.budget.router import get_budget_write_model
from planner.events import aggregate
from planner.events.dtos import EventCategory
from planner.events.repository import orm_models  # noqa: F401
from planner.events.router import get_event_read_model, get_event_write_model
from planner.events.tests.inmemory_models import (
    InMemoryBudgetWriteModel,
    InMemoryEventReadModel,
    InMemoryEventStore,
    InMemoryEventWriteModel,
    InMemoryFunctionWriteModel,
    InMemoryGuestWriteModel,
    InMemorySeatingWriteModel,
    InMemoryTeamWriteModel,
)
from planner.functions.router import get_function_write_model
from planner.functions.sender import LinkDispatcher
from planner.guests.router import get_guest_write_model
from planner.main import app
from planner.models.base import BaseModel
from planner.seating.router import get_seating_write_model
from planner.team.router import get_team_write_model


@pytest.fixture
def client_factory():
    """Build a test client with the given dependency overrides installed."""

    @asynccontextmanager
    async def factory(overrides: dict | None = None):
        app.dependency_overrides.update(overrides or {})
        transport = ASGITransport(app=app)
        try:
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                yield client
        finally:
            app.dependency_overrides.clear()

    return factory


@pytest.fixture
async def client(client_factory):
    async with client_factory() as client:
        yield client


@pytest.fixture
async def db_engine(tmp_path):
    """A throwaway SQLite database with the full schema."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'planner.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(db_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, expire_on_commit=False)


@pytest.fixture
async def db_session(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
def starts_at() -> datetime:
    return datetime(2030, 6, 15, 19, 0, tzinfo=UTC)


@pytest.fixture
def event(starts_at):
    """A transient event aggregate, for domain tests that need no database."""
    return aggregate.create_event(
        title="Summer Wedding",
        starts_at=starts_at,
        category=EventCategory.WEDDING,
        location_name="Lakeside Gardens",
    )


@pytest.fixture
def store() -> InMemoryEventStore:
    return InMemoryEventStore()


@pytest.fixture
def inmemory_overrides(store):
    """Dependency overrides that route every endpoint to the in-memory store."""
    return {
        get_event_write_model: lambda: InMemoryEventWriteModel(store),
        get_event_read_model: lambda: InMemoryEventReadModel(store),
        get_guest_write_model: lambda: InMemoryGuestWriteModel(store),
        get_function_write_model: lambda: InMemoryFunctionWriteModel(
            store, dispatcher=LinkDispatcher(), send_delay_seconds=0
        ),
        get_seating_write_model: lambda: InMemorySeatingWriteModel(store),
        get_budget_write_model: lambda: InMemoryBudgetWriteModel(store),
        get_team_write_model: lambda: InMemoryTeamWriteModel(store),
    }
