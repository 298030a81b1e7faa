"""Profile repository."""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kinchart.models import Profile


class ProfileRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, user_id: str) -> Profile | None:
        return await self.db.get(Profile, user_id)

    async def get_by_email(self, email: str) -> Profile | None:
        result = await self.db.execute(
            select(Profile).where(Profile.email == email.strip().lower()).limit(1)
        )
        return result.scalar_one_or_none()

    async def create(self, user_id: str, email: str, **values: Any) -> Profile:
        profile = Profile(id=user_id, email=email, **values)
        self.db.add(profile)
        await self.db.flush()
        return profile

    async def update(self, profile: Profile, updates: dict[str, Any]) -> Profile:
        for field, value in updates.items():
            if field == "full_name" and value is None:
                continue
            setattr(profile, field, value)
        await self.db.flush()
        return profile
