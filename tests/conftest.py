from collections.abc import AsyncGenerator
from datetime import date, datetime

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from opsdesk.api.deps import get_now, get_today_source
from opsdesk.availability.drafts import DraftStore, MemoryStorage, get_draft_store
from opsdesk.database import Base, get_db
from opsdesk.main import app
from opsdesk.models.user import User

test_engine = create_async_engine("sqlite+aiosqlite://", echo=False)
test_session = async_sessionmaker(test_engine, expire_on_commit=False)

# Wednesday: Monday and Tuesday of the current week are already in the past.
TODAY = date(2024, 1, 3)
CURRENT_WEEK = date(2024, 1, 1)
NOW = datetime(2024, 1, 3, 9, 0)


async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
    async with test_session() as session:
        yield session


app.dependency_overrides[get_db] = override_get_db
app.dependency_overrides[get_today_source] = lambda: (lambda: TODAY)
app.dependency_overrides[get_now] = lambda: NOW


@pytest.fixture(autouse=True)
async def setup_db() -> AsyncGenerator[None, None]:
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(autouse=True)
def draft_storage() -> MemoryStorage:
    """Fresh in-memory draft storage for every test."""
    storage = MemoryStorage()
    app.dependency_overrides[get_draft_store] = lambda: DraftStore(storage)
    return storage


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def create_user(
    user_id: int = 1, email: str = "staff@example.com", role: str = "employee"
) -> User:
    async with test_session() as session:
        user = User(id=user_id, name=f"User {user_id}", email=email, role=role)
        session.add(user)
        await session.commit()
        return user


@pytest.fixture
async def user(setup_db: None) -> User:
    return await create_user()
