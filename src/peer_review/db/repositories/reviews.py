"""
peer_review.db.repositories.reviews

Repository for review mappings, responses and sample reviews.

Responsibilities:
- Create review mappings and record (draft or submitted) responses.
- List a reviewer's mappings with their responses eagerly loaded.
- List the sample review response ids of an assignment.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from peer_review.db.models import Response, ReviewResponseMap, SampleReview


class ReviewRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create_map(
        self,
        *,
        reviewer_id: int,
        reviewee_id: int,
        reviewed_object_id: int,
        team_reviewing_enabled: bool = False,
        id: int | None = None,
    ) -> ReviewResponseMap:
        review_map = ReviewResponseMap(
            id=id,
            reviewer_id=reviewer_id,
            reviewee_id=reviewee_id,
            reviewed_object_id=reviewed_object_id,
            team_reviewing_enabled=team_reviewing_enabled,
        )
        self._session.add(review_map)
        await self._session.flush()
        return review_map

    async def add_response(
        self, *, map_id: int, is_submitted: bool = False, round: int = 1
    ) -> Response:
        response = Response(map_id=map_id, is_submitted=is_submitted, round=round)
        self._session.add(response)
        await self._session.flush()
        return response

    async def maps_for_reviewer(
        self, *, reviewer_id: int, team_reviewing_enabled: bool
    ) -> list[ReviewResponseMap]:
        stmt = (
            select(ReviewResponseMap)
            .where(
                ReviewResponseMap.reviewer_id == reviewer_id,
                ReviewResponseMap.team_reviewing_enabled == team_reviewing_enabled,
            )
            .order_by(ReviewResponseMap.id)
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def add_sample_review(self, *, assignment_id: int, response_id: int) -> SampleReview:
        sample = SampleReview(assignment_id=assignment_id, response_id=response_id)
        self._session.add(sample)
        await self._session.flush()
        return sample

    async def sample_response_ids(self, assignment_id: int) -> list[int]:
        stmt = (
            select(SampleReview.response_id)
            .where(SampleReview.assignment_id == assignment_id)
            .order_by(SampleReview.id)
        )
        return list((await self._session.execute(stmt)).scalars().all())


# --- Module Notes -----------------------------------------------------------
# `create_map(id=...)` exists so callers (and tests) can pin mapping ids, which
# matters for calibrated assignments where display order depends on the id.
