import asyncio
import logging
from contextlib import asynccontextmanager

import sentry_sdk
from alembic import command
from alembic.config import Config
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from planner.budget.router import router as budget_router
from planner.config.database import check_database
from planner.config.logging import setup_logging
from planner.config.settings import settings
from planner.errors import (
    AlreadyExists,
    CapacityExceeded,
    ConcurrencyConflictError,
    NotFoundError,
    PersistenceError,
    PlannerError,
    ValidationError,
)
from planner.events.router import router as events_router
from planner.functions.router import router as functions_router
from planner.guests.router import router as guests_router
from planner.routers.healthz.router import router as healthz_router
from planner.seating.router import router as seating_router
from planner.team.router import router as team_router

setup_logging()
logger = logging.getLogger(__name__)

ERROR_STATUS_CODES = {
    ValidationError: 422,
    NotFoundError: 404,
    CapacityExceeded: 409,
    AlreadyExists: 409,
    ConcurrencyConflictError: 409,
    PersistenceError: 503,
}


async def run_migrations():
    alembic_cfg = Config("alembic.ini")
    await asyncio.to_thread(command.upgrade, alembic_cfg, "head")


@asynccontextmanager
async def lifespan(app: FastAPI):
    await check_database()
    if settings.RUN_MIGRATIONS_ON_STARTUP:
        await run_migrations()
    yield


if settings.SENTRY_DSN:
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENVIRONMENT,
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
        profiles_sample_rate=settings.SENTRY_PROFILES_SAMPLE_RATE,
        integrations=[
            StarletteIntegration(transaction_style="endpoint"),
            FastApiIntegration(transaction_style="endpoint"),
        ],
        send_default_pii=False,
    )

app = FastAPI(
    title="Event Planner API",
    description="API for planning events: guests, functions, seating, budget and team",
    version=settings.app_version,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,  # type: ignore[arg-type]
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PlannerError)
async def planner_error_handler(request: Request, exc: PlannerError) -> JSONResponse:
    status_code = next(
        (code for error, code in ERROR_STATUS_CODES.items() if isinstance(exc, error)), 400
    )
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=status_code, content=exc.to_dict())


# Include routers
app.include_router(healthz_router, prefix="/healthz", tags=["Healthz"])
app.include_router(events_router, tags=["Events"])
app.include_router(guests_router, tags=["Guests"])
app.include_router(functions_router, tags=["Functions"])
app.include_router(seating_router, tags=["Seating"])
app.include_router(budget_router, tags=["Budget"])
app.include_router(team_router, tags=["Team"])


@app.get("/", tags=["Root"])
async def root():
    return {"message": "Welcome to the Event Planner API"}
