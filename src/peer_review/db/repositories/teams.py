"""
peer_review.db.repositories.teams

Repository for teams and topic signups.

Responsibilities:
- Create teams, add members, create topics and sign teams up for them.
- Look up the topic a user's team holds in an assignment.
"""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from peer_review.db.models import SignedUpTeam, SignUpTopic, Team, TeamUser


class TeamRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, *, assignment_id: int, name: str, user_ids: Sequence[int] = ()) -> Team:
        team = Team(assignment_id=assignment_id, name=name)
        self._session.add(team)
        await self._session.flush()
        for user_id in user_ids:
            self._session.add(TeamUser(team_id=team.id, user_id=user_id))
        await self._session.flush()
        return team

    async def create_topic(self, *, assignment_id: int, topic_name: str) -> SignUpTopic:
        topic = SignUpTopic(assignment_id=assignment_id, topic_name=topic_name)
        self._session.add(topic)
        await self._session.flush()
        return topic

    async def sign_up(
        self, *, team_id: int, topic_id: int, is_waitlisted: bool = False
    ) -> SignedUpTeam:
        signup = SignedUpTeam(team_id=team_id, topic_id=topic_id, is_waitlisted=is_waitlisted)
        self._session.add(signup)
        await self._session.flush()
        return signup

    async def topic_id_for_user(self, *, assignment_id: int, user_id: int) -> int | None:
        # Waitlisted signups do not hold the topic yet.
        stmt = (
            select(SignedUpTeam.topic_id)
            .join(Team, Team.id == SignedUpTeam.team_id)
            .join(TeamUser, TeamUser.team_id == Team.id)
            .where(
                Team.assignment_id == assignment_id,
                TeamUser.user_id == user_id,
                SignedUpTeam.is_waitlisted.is_(False),
            )
            .order_by(SignedUpTeam.id)
            .limit(1)
        )
        return (await self._session.execute(stmt)).scalar_one_or_none()
