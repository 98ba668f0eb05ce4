"""
peer_review.api.authorization

Record-level authorization hooks.

Responsibilities:
- Gate the student review page: the caller must hold student privileges and
  either own a participant that may review, or be teaching staff.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_403_FORBIDDEN, HTTP_404_NOT_FOUND

from peer_review.api.deps import db_session, locale_config
from peer_review.auth.deps import require_privileges
from peer_review.auth.models import Principal, Role
from peer_review.db.errors import RecordNotFoundError
from peer_review.db.repositories.participants import ParticipantRepo
from peer_review.db.repositories.users import UserRepo
from peer_review.i18n.locale import LocaleConfig, resolve_locale
from peer_review.i18n.middleware import apply_locale
from peer_review.observability.logging import get_logger

log = get_logger(__name__)


async def authorize_student_review(
    request: Request,
    participant_id: str,
    principal: Principal = Depends(require_privileges(Role.student)),
    session: AsyncSession = Depends(db_session),
    config: LocaleConfig = Depends(locale_config),
) -> Principal:
    try:
        participant = await ParticipantRepo(session).get_or_raise(participant_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Participant not found") from e

    user = await UserRepo(session).get_by_name(principal.subject)
    if user is not None and user.locale:
        # The user's stored preference beats Accept-Language, an explicit ?locale= beats both.
        apply_locale(
            request,
            resolve_locale(
                param=request.query_params.get("locale"),
                accept_language=request.headers.get("accept-language"),
                config=config,
                preferred=user.locale,
            ),
        )

    if principal.is_teaching_staff:
        return principal

    owns = user is not None and user.id == participant.user_id
    if not owns or not participant.can_review:
        log.info(
            "authorization_denied",
            subject=principal.subject,
            participant_id=participant.id,
            owns=owns,
            can_review=participant.can_review,
        )
        raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail="Not allowed to review")
    return principal


# --- Module Notes -----------------------------------------------------------
# Runs after `i18n.middleware.LocaleMiddleware`, so a denied request is still
# answered in the negotiated locale.
