"""
peer_review.api.app

FastAPI app factory for the peer-review portal.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Initialize and dispose shared infrastructure (DB engine/session factory).
- Provide a single composition root where cross-cutting concerns live.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from peer_review import __version__
from peer_review.api.routers.dev_auth import router as dev_auth_router
from peer_review.api.routers.health import router as health_router
from peer_review.api.routers.locale import router as locale_router
from peer_review.api.routers.student_review import router as student_review_router
from peer_review.db.init_db import init_db
from peer_review.db.session import create_engine, create_sessionmaker
from peer_review.i18n.locale import LocaleConfig
from peer_review.i18n.middleware import LocaleMiddleware
from peer_review.observability.logging import configure_logging, get_logger
from peer_review.observability.middleware import RequestContextMiddleware
from peer_review.settings import Settings, get_settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            # Dev/test convenience: create tables automatically. Prod uses Alembic migrations.
            await init_db(engine)
        try:
            yield
        finally:
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Peer Review Portal",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.locale_config = LocaleConfig.from_settings(settings)
    # Routes read the same settings object the app was built with.
    app.dependency_overrides[get_settings] = lambda: settings

    # Last added runs first: request context, then locale, then route dependencies.
    app.add_middleware(LocaleMiddleware, config=app.state.locale_config)
    app.add_middleware(RequestContextMiddleware)

    app.include_router(health_router, tags=["health"])
    app.include_router(dev_auth_router)
    app.include_router(locale_router)
    app.include_router(student_review_router)

    return app


# --- Module Notes -----------------------------------------------------------
# App composition stays here; review logic stays in services, access rules in
# `api.authorization`.
