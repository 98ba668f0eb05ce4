"""
tests.conftest

Shared fixtures: per-test SQLite database, app instance and token helpers.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from peer_review.api.app import create_app
from peer_review.auth.jwt import JwtConfig, issue_token
from peer_review.db.init_db import init_db
from peer_review.db.session import create_engine, create_sessionmaker
from peer_review.settings import Settings


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        env="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'peer_review.db'}",
        available_locales=["en", "fr", "es"],
        default_locale="en",
    )


@pytest_asyncio.fixture
async def session_factory(settings: Settings) -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    engine = create_engine(settings)
    await init_db(engine)
    try:
        yield create_sessionmaker(engine)
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def app(settings: Settings):
    app = create_app(settings=settings)
    # httpx's ASGITransport does not drive lifespan events; run them explicitly.
    async with app.router.lifespan_context(app):
        yield app


@pytest_asyncio.fixture
async def client(app) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def auth_header(settings: Settings):
    def _make(subject: str, *roles: str) -> dict[str, str]:
        token = issue_token(
            cfg=JwtConfig.from_settings(settings),
            subject=subject,
            roles=list(roles) or ["student"],
        )
        return {"Authorization": f"Bearer {token}"}

    return _make
