"""
peer_review.services.errors

Service-level exceptions.
"""

from __future__ import annotations


class ParticipantLoadError(RuntimeError):
    """
    Raised when a participant (or its assignment) cannot be loaded.
    The underlying persistence error is chained as `__cause__`.
    """
