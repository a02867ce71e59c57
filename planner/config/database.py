import contextlib
import logging
from collections.abc import AsyncIterator

from alembic import command, config
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from planner.config.settings import settings

logger = logging.getLogger(__name__)


def create_engine(url: str) -> AsyncEngine:
    url = str(url)
    connect_args = {}
    if "sqlite" in url:
        connect_args = {"timeout": 15}
    return create_async_engine(
        url,
        echo=settings.LOG_DB,
        connect_args=connect_args,
    )


engine = create_engine(settings.database_url)


def run_upgrade(connection, cfg):
    cfg.attributes["connection"] = connection
    command.upgrade(cfg, "head")


async def upgrade_database(bind: AsyncEngine = engine) -> None:
    async with bind.begin() as conn:
        await conn.run_sync(run_upgrade, config.Config("alembic.ini"))


async def check_database(bind: AsyncEngine = engine) -> None:
    """Open a connection to the durable store; failing here is fatal at startup."""
    try:
        async with bind.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception:
        logger.critical("Durable store at %s cannot be opened", bind.url.render_as_string())
        raise


async_session_maker = async_sessionmaker(engine, expire_on_commit=False)


@contextlib.asynccontextmanager
async def async_session_manager(
    auto_commit=True, session_overwrite: AsyncSession | None = None
) -> AsyncIterator[AsyncSession]:
    if session_overwrite:
        yield session_overwrite
    else:
        async with async_session_maker() as session:
            try:
                yield session
            except Exception as e:
                await session.rollback()
                raise e
            else:
                if auto_commit:
                    await session.commit()
