"""
peer_review.api.routers.student_review

Student review list ("Others' work") endpoint.

Responsibilities:
- Authorize the caller for the participant.
- Serve the `StudentReviewService` read model as JSON.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_404_NOT_FOUND

from peer_review.api.authorization import authorize_student_review
from peer_review.api.deps import db_session, locale_config
from peer_review.i18n.locale import LocaleConfig
from peer_review.services.errors import ParticipantLoadError
from peer_review.services.student_review_service import StudentReviewService, review_status

router = APIRouter(prefix="/v1/student-review", tags=["student-review"])


class ReviewMappingOut(BaseModel):
    id: int
    reviewee_id: int
    status: str


class StudentReviewResponse(BaseModel):
    participant_id: int
    assignment_id: int
    assignment_name: str
    topic_id: int | None
    review_phase: str
    bidding_enabled: bool
    review_mappings: list[ReviewMappingOut] = Field(default_factory=list)
    num_reviews_total: int
    num_reviews_completed: int
    num_reviews_in_progress: int
    response_ids: list[int] = Field(default_factory=list)
    locale: str


@router.get(
    "/{participant_id}",
    response_model=StudentReviewResponse,
    dependencies=[Depends(authorize_student_review)],
)
async def get_student_review(
    request: Request,
    participant_id: str,
    session: AsyncSession = Depends(db_session),
    config: LocaleConfig = Depends(locale_config),
) -> StudentReviewResponse:
    try:
        svc = await StudentReviewService.load(session, participant_id)
    except ParticipantLoadError as e:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail=str(e)) from e

    return StudentReviewResponse(
        participant_id=svc.participant.id,
        assignment_id=svc.assignment.id,
        assignment_name=svc.assignment.name,
        topic_id=svc.topic_id,
        review_phase=svc.review_phase,
        bidding_enabled=svc.bidding_enabled(),
        review_mappings=[
            ReviewMappingOut(id=m.id, reviewee_id=m.reviewee_id, status=review_status(m))
            for m in svc.review_mappings
        ],
        num_reviews_total=svc.num_reviews_total,
        num_reviews_completed=svc.num_reviews_completed,
        num_reviews_in_progress=svc.num_reviews_in_progress,
        response_ids=svc.response_ids,
        locale=getattr(request.state, "locale", config.default),
    )
