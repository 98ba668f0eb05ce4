"""
peer_review.db.repositories.participants

Repository for `AssignmentParticipant` entities.

Responsibilities:
- Create and fetch participants (with `*_or_raise` lookups for service code).
- Resolve the reviewer identity of a participant (itself or its team).
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from peer_review.db.errors import RecordNotFoundError
from peer_review.db.models import Assignment, AssignmentParticipant, Team, TeamUser


# Widest primary key any supported backend stores (signed 64-bit).
_MAX_ID = 2**63


class ParticipantRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        user_id: int,
        assignment_id: int,
        handle: str = "",
        can_submit: bool = True,
        can_review: bool = True,
    ) -> AssignmentParticipant:
        participant = AssignmentParticipant(
            user_id=user_id,
            assignment_id=assignment_id,
            handle=handle,
            can_submit=can_submit,
            can_review=can_review,
        )
        self._session.add(participant)
        await self._session.flush()
        return participant

    async def get(self, participant_id: int) -> AssignmentParticipant | None:
        return await self._session.get(AssignmentParticipant, participant_id)

    async def get_or_raise(self, participant_id: int | str) -> AssignmentParticipant:
        # Ids arrive from URLs as strings; anything non-numeric cannot match a row.
        try:
            key = int(participant_id)
        except (TypeError, ValueError):
            raise RecordNotFoundError("AssignmentParticipant", participant_id) from None
        if not -_MAX_ID <= key < _MAX_ID:
            raise RecordNotFoundError("AssignmentParticipant", participant_id)
        participant = await self.get(key)
        if participant is None:
            raise RecordNotFoundError("AssignmentParticipant", participant_id)
        return participant

    async def get_reviewer(
        self,
        participant: AssignmentParticipant,
        assignment: Assignment,
    ) -> AssignmentParticipant | Team | None:
        if not assignment.team_reviewing_enabled:
            return participant
        stmt = (
            select(Team)
            .join(TeamUser, TeamUser.team_id == Team.id)
            .where(Team.assignment_id == assignment.id, TeamUser.user_id == participant.user_id)
            .order_by(Team.id)
            .limit(1)
        )
        return (await self._session.execute(stmt)).scalar_one_or_none()
