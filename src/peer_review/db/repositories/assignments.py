"""
peer_review.db.repositories.assignments

Repository for `Assignment` entities and their deadlines.

Responsibilities:
- Create and fetch assignments.
- Record due dates and derive the current stage (review phase) of an assignment.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from peer_review.db.errors import RecordNotFoundError
from peer_review.db.models import Assignment, DeadlineType, DueDate, utcnow

STAGE_FINISHED = "Finished"
STAGE_UNKNOWN = "Unknown"


class AssignmentRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        name: str,
        is_calibrated: bool = False,
        bidding_for_reviews_enabled: bool = False,
        team_reviewing_enabled: bool = False,
    ) -> Assignment:
        assignment = Assignment(
            name=name,
            is_calibrated=is_calibrated,
            bidding_for_reviews_enabled=bidding_for_reviews_enabled,
            team_reviewing_enabled=team_reviewing_enabled,
        )
        self._session.add(assignment)
        await self._session.flush()
        return assignment

    async def get(self, assignment_id: int) -> Assignment | None:
        return await self._session.get(Assignment, assignment_id)

    async def get_or_raise(self, assignment_id: int) -> Assignment:
        assignment = await self.get(assignment_id)
        if assignment is None:
            raise RecordNotFoundError("Assignment", assignment_id)
        return assignment

    async def add_due_date(
        self,
        *,
        assignment_id: int,
        deadline_type: DeadlineType,
        due_at: datetime,
        topic_id: int | None = None,
        round: int = 1,
    ) -> DueDate:
        due = DueDate(
            assignment_id=assignment_id,
            topic_id=topic_id,
            deadline_type=deadline_type,
            due_at=due_at,
            round=round,
        )
        self._session.add(due)
        await self._session.flush()
        return due

    async def due_dates(self, assignment_id: int, topic_id: int | None = None) -> list[DueDate]:
        # Topic-specific deadlines override the assignment-wide schedule when present.
        base = select(DueDate).where(DueDate.assignment_id == assignment_id)
        if topic_id is not None:
            stmt = base.where(DueDate.topic_id == topic_id).order_by(DueDate.due_at, DueDate.id)
            topic_dates = list((await self._session.execute(stmt)).scalars().all())
            if topic_dates:
                return topic_dates
        stmt = base.where(DueDate.topic_id.is_(None)).order_by(DueDate.due_at, DueDate.id)
        return list((await self._session.execute(stmt)).scalars().all())

    async def current_stage(
        self,
        assignment_id: int,
        topic_id: int | None = None,
        *,
        now: datetime | None = None,
    ) -> str:
        dates = await self.due_dates(assignment_id, topic_id)
        if not dates:
            return STAGE_UNKNOWN
        now = now or utcnow()
        for due in dates:
            if due.due_at > now:
                return due.deadline_type.value
        return STAGE_FINISHED


# --- Module Notes -----------------------------------------------------------
# `now` is injectable so stage computation is deterministic in tests.
