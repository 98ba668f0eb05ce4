"""
peer_review.api.routers.locale

Locale introspection endpoint.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from peer_review.api.deps import locale_config
from peer_review.i18n.locale import LocaleConfig
from peer_review.i18n.middleware import current_locale

router = APIRouter(prefix="/v1", tags=["i18n"])


class LocaleResponse(BaseModel):
    locale: str
    default_locale: str
    available_locales: list[str]


@router.get("/locale", response_model=LocaleResponse)
async def get_locale(
    config: LocaleConfig = Depends(locale_config),
) -> LocaleResponse:
    return LocaleResponse(
        locale=current_locale(config.default),
        default_locale=config.default,
        available_locales=list(config.available),
    )
