"""
peer_review.auth

Authentication/authorization package.

Responsibilities:
- JWT helpers and validation.
- Role hierarchy and FastAPI auth dependencies (Principal + privilege checks).
"""

# Package marker.
