"""Data access repositories."""

from kinchart.repositories.family import FamilyRepository
from kinchart.repositories.profile import ProfileRepository
from kinchart.repositories.records import (
    DiagnosisRepository,
    DocumentRepository,
    MedicalTestRepository,
    MemberRecordRepository,
    VisitRepository,
)

__all__ = [
    "DiagnosisRepository",
    "DocumentRepository",
    "FamilyRepository",
    "MedicalTestRepository",
    "MemberRecordRepository",
    "ProfileRepository",
    "VisitRepository",
]
