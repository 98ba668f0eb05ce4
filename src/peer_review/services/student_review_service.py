"""
peer_review.services.student_review_service

Read model behind a student's "Others' work" (review list) page.

Responsibilities:
- Load the participant, its assignment, topic and current review phase.
- Load the participant's review mappings, in calibration order when required.
- Tally completed / in-progress review counters.
- Load the assignment's sample review response ids.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from peer_review.db.errors import RecordNotFoundError
from peer_review.db.models import Assignment, AssignmentParticipant, ReviewResponseMap
from peer_review.db.repositories.assignments import AssignmentRepo
from peer_review.db.repositories.participants import ParticipantRepo
from peer_review.db.repositories.reviews import ReviewRepo
from peer_review.db.repositories.teams import TeamRepo
from peer_review.observability.logging import get_logger
from peer_review.services.errors import ParticipantLoadError

log = get_logger(__name__)

# Calibration submissions are presented in groups of five.
CALIBRATION_GROUP_SIZE = 5


def sort_for_calibration(mappings: Sequence[ReviewResponseMap]) -> list[ReviewResponseMap]:
    # sorted() is stable: mappings with the same remainder keep their relative order.
    return sorted(mappings, key=lambda m: m.id % CALIBRATION_GROUP_SIZE)


def review_status(mapping: ReviewResponseMap) -> str:
    if not mapping.responses:
        return "not_started"
    return "submitted" if mapping.responses[-1].is_submitted else "in_progress"


class StudentReviewService:
    """
    Use `await StudentReviewService.load(session, participant_id)`; the
    constructor only wires repositories.
    """

    def __init__(self, session: AsyncSession, *, now: datetime | None = None) -> None:
        self._now = now

        self._participants = ParticipantRepo(session)
        self._assignments = AssignmentRepo(session)
        self._teams = TeamRepo(session)
        self._reviews = ReviewRepo(session)

        self.participant: AssignmentParticipant | None = None
        self.assignment: Assignment | None = None
        self.topic_id: int | None = None
        self.review_phase: str | None = None
        self.review_mappings: list[ReviewResponseMap] = []
        self.num_reviews_total = 0
        self.num_reviews_completed = 0
        self.num_reviews_in_progress = 0
        self.response_ids: list[int] = []

    @classmethod
    async def load(
        cls,
        session: AsyncSession,
        participant_id: int | str,
        *,
        now: datetime | None = None,
    ) -> StudentReviewService:
        svc = cls(session, now=now)
        await svc.load_participant_and_assignment(participant_id)
        await svc.load_review_mappings()
        svc.calculate_review_progress()
        await svc.load_response_ids()
        log.info(
            "student_review_loaded",
            participant_id=svc.participant.id,
            assignment_id=svc.assignment.id,
            review_phase=svc.review_phase,
            num_reviews_total=svc.num_reviews_total,
            num_reviews_completed=svc.num_reviews_completed,
        )
        return svc

    def bidding_enabled(self) -> bool:
        return bool(self.assignment.bidding_for_reviews_enabled)

    async def load_participant_and_assignment(self, participant_id: int | str) -> None:
        try:
            participant = await self._participants.get_or_raise(participant_id)
            assignment = await self._assignments.get_or_raise(participant.assignment_id)
        except RecordNotFoundError as e:
            log.warning("participant_load_failed", participant_id=str(participant_id), error=str(e))
            raise ParticipantLoadError(
                f"Failed to load participant data: {type(e).__name__}: {e}"
            ) from e

        self.participant = participant
        self.assignment = assignment
        self.topic_id = await self._teams.topic_id_for_user(
            assignment_id=participant.assignment_id, user_id=participant.user_id
        )
        self.review_phase = await self._assignments.current_stage(
            participant.assignment_id, self.topic_id, now=self._now
        )

    async def load_review_mappings(self) -> None:
        reviewer = await self._participants.get_reviewer(self.participant, self.assignment)
        if reviewer is None:
            self.review_mappings = []
            return

        mappings = await self._reviews.maps_for_reviewer(
            reviewer_id=reviewer.id,
            team_reviewing_enabled=self.assignment.team_reviewing_enabled,
        )
        if self.assignment.is_calibrated:
            mappings = sort_for_calibration(mappings)
        self.review_mappings = mappings

    def calculate_review_progress(self) -> None:
        self.num_reviews_total = len(self.review_mappings)
        self.num_reviews_completed = sum(
            1 for m in self.review_mappings if review_status(m) == "submitted"
        )
        # Not-yet-started reviews count as in progress.
        self.num_reviews_in_progress = self.num_reviews_total - self.num_reviews_completed

    async def load_response_ids(self) -> None:
        self.response_ids = await self._reviews.sample_response_ids(self.assignment.id)
