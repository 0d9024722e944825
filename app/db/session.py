import logging
from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import Settings, get_settings
from app.models import Base

logger = logging.getLogger(__name__)


def create_engine_from_settings(settings: Settings | None = None) -> AsyncEngine:
    settings = settings or get_settings()

    connect_args: dict = {}
    if settings.database_url.startswith("sqlite"):
        connect_args["timeout"] = settings.db_timeout_seconds

    return create_async_engine(
        settings.database_url,
        echo=settings.sql_echo,
        connect_args=connect_args,
        pool_pre_ping=True,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False: services hand ORM rows to pydantic after committing
    return async_sessionmaker(engine, expire_on_commit=False)


engine: AsyncEngine = create_engine_from_settings()
SessionLocal = create_session_factory(engine)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yields one session per request/unit of work."""
    async with SessionLocal() as session:
        yield session


async def init_db(target: AsyncEngine | None = None) -> None:
    """Creates all tables registered on Base.metadata."""
    target = target or engine
    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema initialized")
