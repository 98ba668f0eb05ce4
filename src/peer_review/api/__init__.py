"""
peer_review.api

HTTP API package (FastAPI).

Responsibilities:
- Application factory and entrypoint.
- Routers and request-scoped dependencies.
"""

# Package marker.
