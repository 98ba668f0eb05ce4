"""
peer_review.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (e.g., JWT secret).
- Validate the locale configuration (default must be an available locale).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _primary_subtag(code: str) -> str:
    # Negotiation compares primary subtags only (`pt-BR` -> `pt`), so configure them that way.
    return code.strip().replace("_", "-").split("-", 1)[0].lower()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="PEER_REVIEW_", case_sensitive=False)

    # Environment controls toggle behavior like auto-init DB tables.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "peer-review"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Auth
    jwt_alg: str = "HS256"
    jwt_issuer: str = "peer-review"
    jwt_audience: str = "peer-review-api"
    jwt_secret: str = Field(default="dev-secret-change-me", repr=False)

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./peer_review.db"

    # I18n
    available_locales: list[str] = Field(default_factory=lambda: ["en", "fr", "es"])
    default_locale: str = "en"

    @field_validator("available_locales")
    @classmethod
    def _normalize_locales(cls, value: list[str]) -> list[str]:
        normalized: list[str] = []
        for code in value:
            code = _primary_subtag(code)
            if code and code not in normalized:
                normalized.append(code)
        if not normalized:
            raise ValueError("at least one locale must be available")
        return normalized

    @model_validator(mode="after")
    def _check_default_locale(self) -> Settings:
        self.default_locale = _primary_subtag(self.default_locale)
        if self.default_locale not in self.available_locales:
            raise ValueError(
                f"default_locale {self.default_locale!r} is not one of {self.available_locales}"
            )
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Locale settings are read once per app via `i18n.locale.LocaleConfig.from_settings`.
