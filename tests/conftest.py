import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.models import Base
from app.repositories import GuildRepository, UserRepository, WorkoutRepository
from app.services import GuildService, UserService

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# In-memory SQLite with StaticPool: every session in a test shares one connection,
# hence one database. A fresh engine per test keeps tests isolated.


@pytest.fixture(name="engine")
async def engine_fixture():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture(name="session")
async def session_fixture(engine):
    session_factory = async_sessionmaker(engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
def user_service(session) -> UserService:
    return UserService(session, UserRepository(session), GuildRepository(session))


@pytest.fixture
def guild_service(session) -> GuildService:
    return GuildService(session, GuildRepository(session), UserRepository(session), WorkoutRepository(session))
