"""Onboarding API routes: walkthrough flag and profile completion."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from kinchart.auth import verify_bearer_token
from kinchart.database import get_db
from kinchart.models import User
from kinchart.schemas.onboarding import OnboardingStatus
from kinchart.schemas.profile import ProfileComplete, ProfileResponse
from kinchart.services import accounts, onboarding
from kinchart.services.errors import report_failure

router = APIRouter(prefix="/onboarding", tags=["onboarding"])


async def _status(db: AsyncSession, user_id: str) -> OnboardingStatus:
    has_seen = await onboarding.has_seen_onboarding(db, user_id)
    complete = await accounts.is_profile_complete(db, user_id)
    return OnboardingStatus(
        has_seen_onboarding=has_seen,
        profile_complete=complete,
        next_step=onboarding.next_step(has_seen, complete),
    )


@router.get("", response_model=OnboardingStatus)
async def get_onboarding_status(
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(verify_bearer_token),
) -> OnboardingStatus:
    """Where the app should send the account next."""
    with report_failure("Failed to load onboarding status"):
        return await _status(db, user_id)


@router.post("/seen", response_model=OnboardingStatus)
async def mark_onboarding_seen(
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(verify_bearer_token),
) -> OnboardingStatus:
    with report_failure("Failed to save onboarding status"):
        await onboarding.mark_onboarding_as_seen(db, user_id)
        return await _status(db, user_id)


@router.post("/profile", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def complete_profile(
    data: ProfileComplete,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(verify_bearer_token),
) -> ProfileResponse:
    """Save the profile and create the account holder's "Self" member."""
    with report_failure("Failed to save profile"):
        user = await db.get(User, user_id)
        profile = await accounts.complete_profile(db, user, data)
    return ProfileResponse.model_validate(profile)
