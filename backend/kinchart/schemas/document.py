"""Pydantic schemas for documents."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict

from kinchart.schemas.common import OptionalText, RequiredText


class DocumentType(str, Enum):
    REPORT = "report"
    PRESCRIPTION = "prescription"
    INVOICE = "invoice"
    OTHER = "other"


class DocumentUpdate(BaseModel):
    """Schema for editing document metadata. The file itself is immutable."""

    model_config = ConfigDict(use_enum_values=True)

    document_type: DocumentType | None = None
    title: RequiredText | None = None
    document_date: date | None = None
    hospital_name: OptionalText = None
    doctor_name: OptionalText = None
    notes: OptionalText = None


class DocumentResponse(BaseModel):
    """Schema for a document in API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    member_id: str
    document_type: DocumentType
    title: str
    document_date: date
    file_url: str
    file_path: str
    file_type: str
    file_size: int
    hospital_name: str | None
    doctor_name: str | None
    notes: str | None
    created_at: datetime


class SignedUrlResponse(BaseModel):
    """Time-limited URL for viewing or sharing a document."""

    signed_url: str
    expires_in: int
    expires_at: datetime
