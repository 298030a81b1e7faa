"""Family member repository."""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kinchart.constants import SELF_RELATION
from kinchart.models import FamilyMember


class FamilyRepository:
    """Family members of one account."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_for_user(self, user_id: str) -> list[FamilyMember]:
        """All family members of the account, oldest first."""
        result = await self.db.execute(
            select(FamilyMember)
            .where(FamilyMember.user_id == user_id)
            .order_by(FamilyMember.created_at.asc(), FamilyMember.id)
        )
        return list(result.scalars().all())

    async def get_for_user(self, user_id: str, member_id: str) -> FamilyMember | None:
        """Get a family member only if it belongs to the account."""
        result = await self.db.execute(
            select(FamilyMember).where(
                FamilyMember.id == member_id,
                FamilyMember.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_self(self, user_id: str) -> FamilyMember | None:
        """The account holder's own row, if the profile has been completed."""
        result = await self.db.execute(
            select(FamilyMember)
            .where(
                FamilyMember.user_id == user_id,
                FamilyMember.relation == SELF_RELATION,
            )
            .order_by(FamilyMember.created_at.asc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def create(self, user_id: str, **values: Any) -> FamilyMember:
        member = FamilyMember(user_id=user_id, **values)
        self.db.add(member)
        await self.db.flush()
        return member

    async def update(self, member: FamilyMember, updates: dict[str, Any]) -> FamilyMember:
        for field, value in updates.items():
            if field == "full_name" and value is None:
                continue
            setattr(member, field, value)
        await self.db.flush()
        return member

    async def delete(self, member: FamilyMember) -> None:
        await self.db.delete(member)
        await self.db.flush()
