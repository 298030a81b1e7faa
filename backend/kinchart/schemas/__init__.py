"""Pydantic schemas."""

from kinchart.schemas.active_member import (
    ActiveMember,
    ActiveMemberResponse,
    ActiveMemberSelect,
    MemberType,
)
from kinchart.schemas.common import RecordListResponse
from kinchart.schemas.diagnosis import (
    DiagnosisCreate,
    DiagnosisResponse,
    DiagnosisSeverity,
    DiagnosisStatus,
    DiagnosisUpdate,
)
from kinchart.schemas.document import DocumentResponse, DocumentType, DocumentUpdate
from kinchart.schemas.family import (
    FamilyListResponse,
    FamilyMemberCreate,
    FamilyMemberResponse,
    FamilyMemberUpdate,
)
from kinchart.schemas.medical_test import (
    MedicalTestCreate,
    MedicalTestResponse,
    MedicalTestUpdate,
    TestCategory,
    TestStatus,
)
from kinchart.schemas.visit import VisitCreate, VisitResponse, VisitStatus, VisitUpdate

__all__ = [
    "ActiveMember",
    "ActiveMemberResponse",
    "ActiveMemberSelect",
    "DiagnosisCreate",
    "DiagnosisResponse",
    "DiagnosisSeverity",
    "DiagnosisStatus",
    "DiagnosisUpdate",
    "DocumentResponse",
    "DocumentType",
    "DocumentUpdate",
    "FamilyListResponse",
    "FamilyMemberCreate",
    "FamilyMemberResponse",
    "FamilyMemberUpdate",
    "MedicalTestCreate",
    "MedicalTestResponse",
    "MedicalTestUpdate",
    "MemberType",
    "RecordListResponse",
    "TestCategory",
    "TestStatus",
    "VisitCreate",
    "VisitResponse",
    "VisitStatus",
    "VisitUpdate",
]
