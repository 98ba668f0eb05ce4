"""
peer_review.i18n.middleware

Per-request locale negotiation.

Responsibilities:
- Negotiate the locale before any route dependency (authorization included) runs.
- Expose it via `request.state.locale`, `current_locale()` and structured logs.
- Echo the final locale in the `Content-Language` response header.
"""

from __future__ import annotations

from contextvars import ContextVar

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from peer_review.i18n.locale import LocaleConfig, resolve_locale

_current_locale: ContextVar[str | None] = ContextVar("current_locale", default=None)


def current_locale(default: str) -> str:
    return _current_locale.get() or default


def apply_locale(request: Request, locale: str) -> None:
    # Routes may refine the locale (e.g. from the user's profile) after authentication.
    request.state.locale = locale
    _current_locale.set(locale)
    structlog.contextvars.bind_contextvars(locale=locale)


class LocaleMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, *, config: LocaleConfig) -> None:
        super().__init__(app)
        self._config = config

    async def dispatch(self, request: Request, call_next) -> Response:
        locale = resolve_locale(
            param=request.query_params.get("locale"),
            accept_language=request.headers.get("accept-language"),
            config=self._config,
        )
        apply_locale(request, locale)

        response: Response = await call_next(request)
        # request.state is shared with the endpoint, so later refinements win.
        response.headers["content-language"] = getattr(request.state, "locale", locale)
        return response
