"""Pydantic schemas for the account profile."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict

from kinchart.schemas.common import OptionalText, RequiredText


class ProfileUpdate(BaseModel):
    """Editable profile fields."""

    full_name: RequiredText | None = None
    phone: OptionalText = None
    dob: date | None = None
    gender: OptionalText = None
    blood_group: OptionalText = None
    avatar_url: OptionalText = None


class ProfileComplete(BaseModel):
    """Schema for completing the profile after first sign-in."""

    full_name: RequiredText
    phone: OptionalText = None
    dob: date | None = None
    gender: OptionalText = None
    blood_group: OptionalText = None


class ProfileResponse(BaseModel):
    """Schema for the profile in API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    full_name: str | None
    phone: str | None
    dob: date | None
    gender: str | None
    blood_group: str | None
    avatar_url: str | None
    is_complete: bool
    created_at: datetime
    updated_at: datetime
