"""Onboarding gate: walkthrough flag and profile completeness."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from kinchart.constants import ONBOARDING_FLAG
from kinchart.models import AppFlag
from kinchart.schemas.onboarding import OnboardingStep


async def get_flag(db: AsyncSession, user_id: str, key: str) -> str | None:
    flag = await db.get(AppFlag, (user_id, key))
    return flag.value if flag else None


async def set_flag(db: AsyncSession, user_id: str, key: str, value: str) -> None:
    flag = await db.get(AppFlag, (user_id, key))
    if flag is None:
        db.add(AppFlag(user_id=user_id, key=key, value=value))
    else:
        flag.value = value
    await db.flush()


async def has_seen_onboarding(db: AsyncSession, user_id: str) -> bool:
    return await get_flag(db, user_id, ONBOARDING_FLAG) == "true"


async def mark_onboarding_as_seen(db: AsyncSession, user_id: str) -> None:
    await set_flag(db, user_id, ONBOARDING_FLAG, "true")


def next_step(has_seen: bool, profile_complete: bool) -> OnboardingStep:
    """Profile setup comes first, then the walkthrough, then the app."""
    if not profile_complete:
        return OnboardingStep.PROFILE
    if not has_seen:
        return OnboardingStep.WALKTHROUGH
    return OnboardingStep.HOME
