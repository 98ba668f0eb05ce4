"""
peer_review.auth.deps

FastAPI dependency functions for authentication and authorization.

Responsibilities:
- Convert a bearer token into a typed `Principal`.
- Enforce role checks via reusable dependency factories.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_403_FORBIDDEN

from peer_review.auth.jwt import JwtConfig, JwtValidationError, decode_and_validate
from peer_review.auth.models import Principal, Role
from peer_review.settings import Settings, get_settings

_bearer = HTTPBearer(auto_error=False)


def get_principal(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    settings: Settings = Depends(get_settings),
) -> Principal:
    if creds is None or not creds.credentials:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Missing bearer token")

    try:
        payload = decode_and_validate(cfg=JwtConfig.from_settings(settings), token=creds.credentials)
    except JwtValidationError as e:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail=f"Invalid token: {e}") from e

    subject = str(payload.get("sub", ""))
    roles_raw = payload.get("roles", [])
    if not subject:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Invalid token subject")
    if not isinstance(roles_raw, list):
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Invalid token roles")

    roles: frozenset[str] = frozenset(str(r) for r in roles_raw)
    return Principal(subject=subject, roles=roles)


def require_privileges(minimum: Role):
    def _dep(principal: Principal = Depends(get_principal)) -> Principal:
        if not principal.has_privileges_of(minimum):
            raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail="Insufficient privileges")
        return principal

    return _dep


# --- Module Notes -----------------------------------------------------------
# Record-level checks (e.g. "this participant belongs to the caller") live in
# `api.authorization` because they need a DB session.
