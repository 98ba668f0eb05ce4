"""
peer_review.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for locale config and DB sessions.
- Encapsulate app.state access patterns (engine/sessionmaker).
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from peer_review.i18n.locale import LocaleConfig


def locale_config(request: Request) -> LocaleConfig:
    # Built once in `api.app.create_app` from the app's own settings.
    return request.app.state.locale_config  # type: ignore[attr-defined]


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    # The sessionmaker is created on app startup in `peer_review.api.app.create_app`.
    return request.app.state.sessionmaker  # type: ignore[attr-defined]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session
