import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from tasvideos.api.main import app
from tasvideos.core.cache import MemoryCacheService
from tasvideos.db.base import Base
from tasvideos.db.session import get_async_session
from tasvideos.db.models import *  # noqa: F403

from tests.helpers.constants import TEST_SAVED_PUBLICATIONS
from tests.helpers.util import add_publication_fixtures


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    try:
        yield engine
    finally:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False, autocommit=False)


@pytest_asyncio.fixture
async def session(session_maker):
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_maker):
    async def override_get_async_session():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_get_async_session
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.pop(get_async_session, None)


@pytest_asyncio.fixture
async def setup_publications(session):
    """
    Populates the catalog with the publications described in TEST_SAVED_PUBLICATIONS,
    along with their systems, classes, games, genres, flags and authors.
    """
    await add_publication_fixtures(session)
    await session.commit()
    return TEST_SAVED_PUBLICATIONS


@pytest.fixture
def fake_clock():
    class FakeClock:
        def __init__(self):
            self.now = 1000.0

        def __call__(self):
            return self.now

        def advance(self, seconds):
            self.now += seconds

    return FakeClock()


@pytest.fixture
def memory_cache(fake_clock):
    return MemoryCacheService(default_ttl_seconds=30, clock=fake_clock)
