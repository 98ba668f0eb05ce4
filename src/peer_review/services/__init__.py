"""
peer_review.services

Service-layer package.

Responsibilities:
- Compose repositories into the read models the API serves.
- Translate persistence errors into service-level errors.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services should be pure Python and easily testable against a throwaway database.
