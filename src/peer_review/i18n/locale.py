"""
peer_review.i18n.locale

Locale negotiation helpers.

Responsibilities:
- Parse `Accept-Language` headers into language codes ordered by preference.
- Pick the request locale from (in order) an explicit `locale` parameter, the
  user's stored preference and the browser's `Accept-Language` header.
- Fall back to the configured default locale when nothing matches.
"""

from __future__ import annotations

from dataclasses import dataclass

from peer_review.settings import Settings


@dataclass(frozen=True, slots=True)
class LocaleConfig:
    available: tuple[str, ...]
    default: str

    @classmethod
    def from_settings(cls, settings: Settings) -> LocaleConfig:
        return cls(available=tuple(settings.available_locales), default=settings.default_locale)

    def is_available(self, code: str | None) -> bool:
        return code is not None and normalize_locale(code) in self.available


def normalize_locale(code: str) -> str:
    # `en-US`, `en_US` and `EN` all map to the primary language subtag `en`.
    return code.strip().replace("_", "-").split("-", 1)[0].lower()


def _quality(params: list[str]) -> float:
    for param in params:
        key, _, value = param.partition("=")
        if key.strip().lower() != "q":
            continue
        try:
            q = float(value.strip())
        except ValueError:
            return 0.0
        return q if 0.0 <= q <= 1.0 else 0.0
    return 1.0


def parse_accept_language(header: str | None) -> list[str]:
    """
    Return the language codes of an `Accept-Language` header, most preferred first.

    Entries with `q=0`, wildcards and blank tags are dropped. Entries sharing a
    quality value keep their header order and a language is reported once, at
    its first (highest ranked) position.
    """

    if not header:
        return []

    ranked: list[tuple[float, int, str]] = []
    for position, entry in enumerate(header.split(",")):
        tag, *params = entry.split(";")
        tag = tag.strip()
        if not tag or tag == "*":
            continue
        q = _quality(params)
        if q <= 0.0:
            continue
        ranked.append((-q, position, normalize_locale(tag)))

    languages: list[str] = []
    for _, _, code in sorted(ranked):
        if code and code not in languages:
            languages.append(code)
    return languages


def extract_locale(
    *,
    param: str | None,
    accept_language: str | None,
    config: LocaleConfig,
    preferred: str | None = None,
) -> str | None:
    """
    Pick the request locale, or None when no candidate is available.

    An unsupported `param` is ignored rather than rejected so a stale link
    never breaks a page.
    """

    if param and param.strip().lower() in config.available:
        return param.strip().lower()

    if preferred and config.is_available(preferred):
        return normalize_locale(preferred)

    for code in parse_accept_language(accept_language):
        if code in config.available:
            return code
    return None


def resolve_locale(
    *,
    param: str | None,
    accept_language: str | None,
    config: LocaleConfig,
    preferred: str | None = None,
) -> str:
    return (
        extract_locale(
            param=param,
            accept_language=accept_language,
            config=config,
            preferred=preferred,
        )
        or config.default
    )


# --- Module Notes -----------------------------------------------------------
# The `locale` parameter must match an available locale exactly (case-insensitive);
# region-qualified values are only honoured when they come from Accept-Language.
