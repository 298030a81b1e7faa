"""Pydantic schemas for family members."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict

from kinchart.schemas.common import OptionalText, RequiredText


class FamilyMemberCreate(BaseModel):
    """Schema for adding a family member."""

    full_name: RequiredText
    relation: OptionalText = None
    dob: date | None = None
    gender: OptionalText = None
    blood_group: OptionalText = None


class FamilyMemberUpdate(BaseModel):
    """Schema for editing a family member; only sent fields change."""

    full_name: RequiredText | None = None
    relation: OptionalText = None
    dob: date | None = None
    gender: OptionalText = None
    blood_group: OptionalText = None


class FamilyMemberResponse(BaseModel):
    """Schema for a family member in API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    full_name: str
    relation: str | None
    dob: date | None
    gender: str | None
    blood_group: str | None
    created_at: datetime


class FamilyListResponse(BaseModel):
    """Account's family members, oldest first."""

    items: list[FamilyMemberResponse]
    total: int
    empty_message: str | None = None
