from datetime import date, datetime, timezone
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from libs.common.datetime_utils import get_now, get_today
from libs.db.base import Base
from libs.db.session import get_async_db

# Import all models so metadata includes every table
from services.members_service import models as _member_models  # noqa: F401
from services.volunteer_service import models as _volunteer_models  # noqa: F401

# Pinned clock shared by the service apps and the factories
TODAY = date(2026, 6, 15)
NOW = datetime(2026, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def test_engine(tmp_path):
    """
    A throwaway SQLite database per test, with every table created.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(
        bind=test_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """
    Session for arranging data and asserting on it directly.
    """
    async with session_factory() as session:
        yield session


def _override_dependencies(app, session_factory):
    async def _get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_db] = _get_db
    app.dependency_overrides[get_today] = lambda: TODAY
    app.dependency_overrides[get_now] = lambda: NOW


@pytest_asyncio.fixture
async def members_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """
    AsyncClient against the members service app.
    """
    from services.members_service.app.main import app as members_app

    _override_dependencies(members_app, session_factory)
    async with AsyncClient(
        transport=ASGITransport(app=members_app), base_url="http://test"
    ) as ac:
        yield ac
    members_app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def volunteer_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """
    AsyncClient against the volunteer service app.
    """
    from services.volunteer_service.app.main import app as volunteer_app

    _override_dependencies(volunteer_app, session_factory)
    async with AsyncClient(
        transport=ASGITransport(app=volunteer_app), base_url="http://test"
    ) as ac:
        yield ac
    volunteer_app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def gateway_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """
    AsyncClient against the gateway, with its service clients routed to the
    in-process service apps instead of external URLs.
    """
    from services.gateway_service.app import clients
    from services.gateway_service.app.main import app as gateway_app
    from services.members_service.app.main import app as members_app
    from services.volunteer_service.app.main import app as volunteer_app

    _override_dependencies(members_app, session_factory)
    _override_dependencies(volunteer_app, session_factory)

    original_members_client = clients.members_client
    original_volunteer_client = clients.volunteer_client
    clients.members_client = clients.ServiceClient(
        "http://members", transport=ASGITransport(app=members_app)
    )
    clients.volunteer_client = clients.ServiceClient(
        "http://volunteer", transport=ASGITransport(app=volunteer_app)
    )

    async with AsyncClient(
        transport=ASGITransport(app=gateway_app), base_url="http://test"
    ) as ac:
        yield ac

    members_app.dependency_overrides.clear()
    volunteer_app.dependency_overrides.clear()
    clients.members_client = original_members_client
    clients.volunteer_client = original_volunteer_client
