"""
Test infrastructure for the Article API.

Strategy
--------
- SQLite in-memory via aiosqlite stands in for Postgres, keeping the
  suite self-contained.  The service layer picks the SQLite flavour of
  ``INSERT ... ON CONFLICT DO NOTHING`` automatically.
- StaticPool forces every async task onto the same in-memory connection;
  SQLite in-memory databases are connection-scoped.
- httpx's ASGITransport does not run the lifespan, so the application's
  ``get_db`` dependency is overridden with the test session factory
  instead of going through ``app.state.database``.
- All tables are created before each test and dropped after it.
"""
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

import article_api.models  # noqa: F401
from article_api.database import Base, get_db
from article_api.main import app
from article_api.security import create_access_token

# ---------------------------------------------------------------------------
# Test database engine — SQLite in-memory with aiosqlite
# ---------------------------------------------------------------------------

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine_test = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

async_session_test = async_sessionmaker(
    engine_test,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ---------------------------------------------------------------------------
# Dependency override — replace get_db with the test session factory
# ---------------------------------------------------------------------------

async def override_get_db():
    async with async_session_test() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


app.dependency_overrides[get_db] = override_get_db


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after to guarantee isolation."""
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def db_session() -> AsyncSession:
    """Yield a live AsyncSession for tests that call services directly."""
    async with async_session_test() as session:
        yield session


@pytest_asyncio.fixture
async def async_client() -> AsyncClient:
    """Yield an httpx.AsyncClient wired to the FastAPI app via ASGITransport."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def auth_header():
    """Return a factory building an ``Authorization`` header for an email."""
    def _make(email: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(email)}"}
    return _make
