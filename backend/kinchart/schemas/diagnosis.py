"""Pydantic schemas for diagnoses."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, model_validator

from kinchart.schemas.common import OptionalText, RequiredText


class DiagnosisStatus(str, Enum):
    """Clinical status of a diagnosis."""

    ACTIVE = "Active"
    RESOLVED = "Resolved"
    MONITORING = "Monitoring"


class DiagnosisSeverity(str, Enum):
    MILD = "Mild"
    MODERATE = "Moderate"
    SEVERE = "Severe"


class DiagnosisCreate(BaseModel):
    """Schema for recording a diagnosis.

    ``member_id`` defaults to the account's active member.
    """

    model_config = ConfigDict(use_enum_values=True)

    member_id: str | None = None
    title: RequiredText
    description: OptionalText = None
    diagnosed_on: date | None = None
    resolved_on: date | None = None
    status: DiagnosisStatus = DiagnosisStatus.ACTIVE
    severity: DiagnosisSeverity | None = None

    @model_validator(mode="after")
    def _check_dates(self) -> "DiagnosisCreate":
        if self.resolved_on and self.diagnosed_on and self.resolved_on < self.diagnosed_on:
            raise ValueError("resolved_on must not be before diagnosed_on")
        return self


class DiagnosisUpdate(BaseModel):
    """Schema for editing a diagnosis; only sent fields change."""

    model_config = ConfigDict(use_enum_values=True)

    title: RequiredText | None = None
    description: OptionalText = None
    diagnosed_on: date | None = None
    resolved_on: date | None = None
    status: DiagnosisStatus | None = None
    severity: DiagnosisSeverity | None = None

    @model_validator(mode="after")
    def _check_dates(self) -> "DiagnosisUpdate":
        if self.resolved_on and self.diagnosed_on and self.resolved_on < self.diagnosed_on:
            raise ValueError("resolved_on must not be before diagnosed_on")
        return self


class DiagnosisResponse(BaseModel):
    """Schema for a diagnosis in API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    member_id: str
    title: str
    description: str | None
    diagnosed_on: date | None
    resolved_on: date | None
    status: DiagnosisStatus
    severity: DiagnosisSeverity | None
    created_at: datetime
