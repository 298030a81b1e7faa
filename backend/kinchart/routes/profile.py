"""Account profile API routes."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from kinchart.auth import verify_bearer_token
from kinchart.database import get_db
from kinchart.repositories import FamilyRepository, ProfileRepository
from kinchart.schemas.profile import ProfileResponse, ProfileUpdate
from kinchart.services.errors import report_failure

router = APIRouter(prefix="/profile", tags=["profile"])

# Profile fields mirrored onto the "Self" family member
SELF_FIELDS = ("full_name", "dob", "gender", "blood_group")


@router.get("", response_model=ProfileResponse)
async def get_profile(
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(verify_bearer_token),
) -> ProfileResponse:
    with report_failure("Failed to load profile"):
        profile = await ProfileRepository(db).get(user_id)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return ProfileResponse.model_validate(profile)


@router.patch("", response_model=ProfileResponse)
async def update_profile(
    data: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(verify_bearer_token),
) -> ProfileResponse:
    """Update the fields sent in the request body and keep "Self" in sync."""
    profiles = ProfileRepository(db)
    profile = await profiles.get(user_id)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")

    updates = data.model_dump(exclude_unset=True)
    with report_failure("Failed to update profile"):
        profile = await profiles.update(profile, updates)
        self_updates = {k: v for k, v in updates.items() if k in SELF_FIELDS}
        if self_updates:
            family = FamilyRepository(db)
            self_row = await family.get_self(user_id)
            if self_row is not None:
                await family.update(self_row, self_updates)
    return ProfileResponse.model_validate(profile)
