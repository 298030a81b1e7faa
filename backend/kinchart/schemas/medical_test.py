"""Pydantic schemas for medical tests."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from kinchart.schemas.common import OptionalText, RequiredText


class TestStatus(str, Enum):
    """Overall interpretation of a test."""

    __test__ = False

    NORMAL = "normal"
    ABNORMAL = "abnormal"
    PENDING = "pending"


class TestCategory(str, Enum):
    """Catalog categories tests are filed under."""

    __test__ = False

    BLOOD = "Blood"
    VITALS = "Vitals"
    IMAGING = "Imaging"
    URINE = "Urine"
    PATHOLOGY = "Pathology"
    CARDIOLOGY = "Cardiology"
    OTHER = "Other"


class ParameterResult(BaseModel):
    """One measured parameter of a test."""

    name: str
    value: str = ""
    unit: str = ""
    normalRange: str = ""
    status: str = "normal"


class MedicalTestCreate(BaseModel):
    """Schema for recording a test.

    Either send ``results`` directly, or send ``parameter_values`` (parameter
    name to measured value) and let the catalog template for ``test_name``
    build the results.
    """

    model_config = ConfigDict(use_enum_values=True)

    member_id: str | None = None
    test_name: RequiredText
    test_category: TestCategory
    test_date: datetime
    lab_name: OptionalText = None
    doctor_name: OptionalText = None
    status: TestStatus = TestStatus.NORMAL
    summary: OptionalText = None
    results: dict[str, Any] | None = None
    parameter_values: dict[str, str] | None = Field(
        default=None,
        description="Measured values keyed by catalog parameter name",
    )


class MedicalTestUpdate(BaseModel):
    """Schema for editing a test; only sent fields change."""

    model_config = ConfigDict(use_enum_values=True)

    test_name: RequiredText | None = None
    test_category: TestCategory | None = None
    test_date: datetime | None = None
    lab_name: OptionalText = None
    doctor_name: OptionalText = None
    status: TestStatus | None = None
    summary: OptionalText = None
    results: dict[str, Any] | None = None


class MedicalTestResponse(BaseModel):
    """Schema for a test in API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    member_id: str
    test_name: str
    test_category: TestCategory
    test_date: datetime
    lab_name: str | None
    doctor_name: str | None
    status: TestStatus
    summary: str | None
    results: dict[str, Any] | None
    created_at: datetime
