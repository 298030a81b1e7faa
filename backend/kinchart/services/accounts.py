"""Accounts, bearer sessions and profile completion."""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta, timezone

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from kinchart.config import settings
from kinchart.constants import SELF_RELATION
from kinchart.models import AuthSession, Profile, User
from kinchart.repositories import FamilyRepository, ProfileRepository
from kinchart.schemas.profile import ProfileComplete

logger = logging.getLogger(__name__)


async def get_or_create_user(db: AsyncSession, email: str, verified: bool = True) -> tuple[User, bool]:
    """Find the account for ``email`` or create it.

    Returns:
        The user and whether it was created.
    """
    email = email.strip().lower()
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()
    if user is not None:
        if verified and not user.email_verified:
            user.email_verified = True
            await db.flush()
        return user, False

    user = User(email=email, email_verified=verified)
    db.add(user)
    await db.flush()
    logger.info("Created account %s for %s", user.id, email)
    return user, True


async def open_session(
    db: AsyncSession,
    user: User,
    provider: str,
    now: datetime | None = None,
) -> AuthSession:
    """Issue a new bearer session for the user."""
    now = now or datetime.now(timezone.utc)
    auth_session = AuthSession(
        token=secrets.token_urlsafe(32),
        user_id=user.id,
        provider=provider,
        expires_at=now + timedelta(hours=settings.session_ttl_hours),
        created_at=now,
    )
    db.add(auth_session)
    await db.flush()
    return auth_session


async def close_session(db: AsyncSession, token: str) -> bool:
    """Delete a bearer session. Returns False if it did not exist."""
    result = await db.execute(delete(AuthSession).where(AuthSession.token == token))
    return bool(result.rowcount)


async def is_profile_complete(db: AsyncSession, user_id: str) -> bool:
    """A profile is complete only if it exists and has a non-blank full name."""
    profile = await ProfileRepository(db).get(user_id)
    return profile is not None and profile.is_complete


async def is_email_registered(db: AsyncSession, email: str) -> bool:
    return await ProfileRepository(db).get_by_email(email) is not None


async def complete_profile(db: AsyncSession, user: User, data: ProfileComplete) -> Profile:
    """Create or fill in the profile and make sure the "Self" row exists.

    The "Self" family member mirrors the profile's personal details.
    """
    profiles = ProfileRepository(db)
    family = FamilyRepository(db)
    details = data.model_dump()

    profile = await profiles.get(user.id)
    if profile is None:
        profile = await profiles.create(user.id, user.email, **details)
    else:
        profile = await profiles.update(profile, details)

    member_details = {k: details[k] for k in ("full_name", "dob", "gender", "blood_group")}
    self_row = await family.get_self(user.id)
    if self_row is None:
        await family.create(user.id, relation=SELF_RELATION, **member_details)
    else:
        await family.update(self_row, member_details)

    logger.info("Profile completed for account %s", user.id)
    return profile


async def provision_federated_profile(db: AsyncSession, user: User, full_name: str | None) -> Profile:
    """Profile for a first-time federated sign-in, pre-filled from the provider."""
    if full_name and full_name.strip():
        return await complete_profile(db, user, ProfileComplete(full_name=full_name))

    profiles = ProfileRepository(db)
    profile = await profiles.get(user.id)
    if profile is None:
        profile = await profiles.create(user.id, user.email)
    return profile
