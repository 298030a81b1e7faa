"""Pydantic schemas for the onboarding gate."""

from enum import Enum

from pydantic import BaseModel


class OnboardingStep(str, Enum):
    """Where a signed-in account should land next."""

    WALKTHROUGH = "walkthrough"
    PROFILE = "profile"
    HOME = "home"


class OnboardingStatus(BaseModel):
    has_seen_onboarding: bool
    profile_complete: bool
    next_step: OnboardingStep
