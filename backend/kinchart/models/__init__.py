"""SQLAlchemy models."""

from kinchart.models.auth import AuthSession, OtpCode, User
from kinchart.models.diagnosis import Diagnosis
from kinchart.models.document import Document
from kinchart.models.family import FamilyMember
from kinchart.models.flags import AppFlag
from kinchart.models.medical_test import MedicalTest
from kinchart.models.profile import Profile
from kinchart.models.visit import Visit

__all__ = [
    "AppFlag",
    "AuthSession",
    "Diagnosis",
    "Document",
    "FamilyMember",
    "MedicalTest",
    "OtpCode",
    "Profile",
    "User",
    "Visit",
]
