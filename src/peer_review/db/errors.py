"""
peer_review.db.errors

Persistence-layer exceptions.
"""

from __future__ import annotations


class RecordNotFoundError(LookupError):
    """
    Raised by repository `*_or_raise` lookups when no row matches.
    """

    def __init__(self, model: str, key: object) -> None:
        super().__init__(f"Couldn't find {model} with 'id'={key}")
        self.model = model
        self.key = key
