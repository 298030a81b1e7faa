"""Pydantic schemas for doctor visits."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict

from kinchart.schemas.common import OptionalText, RequiredLongText, RequiredText


class VisitStatus(str, Enum):
    """Scheduled appointment or visit that already happened."""

    UPCOMING = "upcoming"
    COMPLETED = "completed"


class VisitCreate(BaseModel):
    """Schema for scheduling or recording a visit."""

    model_config = ConfigDict(use_enum_values=True)

    member_id: str | None = None
    visit_date: datetime
    status: VisitStatus
    visit_type: RequiredText
    reason: RequiredLongText
    doctor_name: OptionalText = None
    hospital_or_clinic_name: OptionalText = None
    specialty: OptionalText = None
    notes: OptionalText = None
    follow_up_date: date | None = None


class VisitUpdate(BaseModel):
    """Schema for editing a visit; only sent fields change."""

    model_config = ConfigDict(use_enum_values=True)

    visit_date: datetime | None = None
    status: VisitStatus | None = None
    visit_type: RequiredText | None = None
    reason: RequiredLongText | None = None
    doctor_name: OptionalText = None
    hospital_or_clinic_name: OptionalText = None
    specialty: OptionalText = None
    notes: OptionalText = None
    follow_up_date: date | None = None


class VisitResponse(BaseModel):
    """Schema for a visit in API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    member_id: str
    visit_date: datetime
    status: VisitStatus
    visit_type: str
    reason: str
    doctor_name: str | None
    hospital_or_clinic_name: str | None
    specialty: str | None
    notes: str | None
    follow_up_date: date | None
    created_at: datetime
