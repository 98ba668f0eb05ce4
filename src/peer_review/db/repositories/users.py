from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from peer_review.db.models import User


class UserRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        name: str,
        role: str = "student",
        full_name: str = "",
        email: str = "",
        locale: str | None = None,
    ) -> User:
        user = User(name=name, role=role, full_name=full_name, email=email, locale=locale)
        self._session.add(user)
        await self._session.flush()
        return user

    async def get_by_name(self, name: str) -> User | None:
        stmt = select(User).where(User.name == name)
        return (await self._session.execute(stmt)).scalar_one_or_none()
