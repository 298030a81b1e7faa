"""Reference catalogs offered by the record forms.

Test categories carry a list of common tests, each with the parameters it
measures, their units and normal ranges. When a test is recorded against a
catalog entry, its ``results`` are built from that template.
"""

from __future__ import annotations

from typing import Any

from kinchart.schemas.catalog import (
    CatalogResponse,
    CategoryInfo,
    CommonTest,
    DocumentTypeInfo,
    ParameterTemplate,
)
from kinchart.schemas.diagnosis import DiagnosisSeverity, DiagnosisStatus
from kinchart.schemas.document import DocumentType
from kinchart.schemas.medical_test import TestCategory, TestStatus


def _p(name: str, unit: str = "", normal_range: str = "") -> dict[str, str]:
    return {"name": name, "unit": unit, "normalRange": normal_range}


TEST_CATEGORIES: dict[TestCategory, dict[str, str]] = {
    TestCategory.BLOOD: {
        "name": "Blood Tests",
        "description": "Lab work & blood panels",
        "examples": "CBC, Lipid Profile, Blood Sugar, Liver Function",
    },
    TestCategory.VITALS: {
        "name": "Vitals",
        "description": "Basic health measurements",
        "examples": "Blood Pressure, Weight, Temperature, Heart Rate",
    },
    TestCategory.IMAGING: {
        "name": "Imaging",
        "description": "Scans & radiology",
        "examples": "X-Ray, MRI, CT Scan, Ultrasound",
    },
    TestCategory.URINE: {
        "name": "Urine Tests",
        "description": "Urinalysis & cultures",
        "examples": "Routine Urine, Urine Culture",
    },
    TestCategory.PATHOLOGY: {
        "name": "Pathology",
        "description": "Tissue & cell analysis",
        "examples": "Biopsy, Histopathology, PAP Smear",
    },
    TestCategory.CARDIOLOGY: {
        "name": "Cardiology",
        "description": "Heart tests",
        "examples": "ECG, Echo, Stress Test, Holter",
    },
    TestCategory.OTHER: {
        "name": "Other Tests",
        "description": "Everything else",
        "examples": "Vision, Hearing, Allergy, Sleep Study",
    },
}

COMMON_TESTS: dict[TestCategory, list[dict[str, Any]]] = {
    TestCategory.BLOOD: [
        {
            "name": "Complete Blood Count (CBC)",
            "parameters": [
                _p("Hemoglobin", "g/dL", "13.5-17.5"),
                _p("WBC Count", "/μL", "4000-11000"),
                _p("RBC Count", "million/μL", "4.5-5.5"),
                _p("Platelets", "/μL", "150000-400000"),
            ],
        },
        {
            "name": "Lipid Profile",
            "parameters": [
                _p("Total Cholesterol", "mg/dL", "<200"),
                _p("LDL", "mg/dL", "<100"),
                _p("HDL", "mg/dL", ">40"),
                _p("Triglycerides", "mg/dL", "<150"),
            ],
        },
        {
            "name": "Blood Sugar",
            "parameters": [
                _p("Fasting Glucose", "mg/dL", "70-100"),
                _p("HbA1c", "%", "<5.7"),
            ],
        },
        {
            "name": "Liver Function Test (LFT)",
            "parameters": [
                _p("SGOT/AST", "U/L", "5-40"),
                _p("SGPT/ALT", "U/L", "7-56"),
                _p("Bilirubin", "mg/dL", "0.3-1.2"),
            ],
        },
        {
            "name": "Kidney Function Test (KFT)",
            "parameters": [
                _p("Creatinine", "mg/dL", "0.7-1.3"),
                _p("Urea", "mg/dL", "15-40"),
            ],
        },
        {
            "name": "Thyroid Profile",
            "parameters": [
                _p("TSH", "mIU/L", "0.4-4.0"),
                _p("T3", "ng/dL", "80-200"),
                _p("T4", "μg/dL", "5-12"),
            ],
        },
        {"name": "Custom Blood Test", "parameters": []},
    ],
    TestCategory.VITALS: [
        {
            "name": "Blood Pressure",
            "parameters": [
                _p("Systolic", "mmHg", "<120"),
                _p("Diastolic", "mmHg", "<80"),
            ],
        },
        {
            "name": "Body Measurements",
            "parameters": [
                _p("Weight", "kg"),
                _p("Height", "cm"),
                _p("BMI", "kg/m²", "18.5-24.9"),
            ],
        },
        {"name": "Temperature", "parameters": [_p("Body Temperature", "°F", "97-99")]},
        {"name": "Heart Rate", "parameters": [_p("Heart Rate", "bpm", "60-100")]},
        {"name": "Oxygen Saturation", "parameters": [_p("SpO2", "%", "95-100")]},
        {"name": "Custom Vital", "parameters": []},
    ],
    TestCategory.IMAGING: [
        {"name": name, "parameters": []}
        for name in (
            "X-Ray",
            "MRI Scan",
            "CT Scan",
            "Ultrasound",
            "PET Scan",
            "Mammography",
            "Custom Imaging",
        )
    ],
    TestCategory.URINE: [
        {
            "name": "Routine Urine Analysis",
            "parameters": [
                _p("Color", "", "Yellow"),
                _p("pH", "", "5-7"),
                _p("Protein", "", "Nil"),
                _p("Glucose", "", "Nil"),
            ],
        },
        {"name": "Urine Culture", "parameters": []},
        {"name": "Custom Urine Test", "parameters": []},
    ],
    TestCategory.PATHOLOGY: [
        {"name": name, "parameters": []}
        for name in ("Biopsy", "Histopathology", "Cytology", "PAP Smear", "Custom Pathology")
    ],
    TestCategory.CARDIOLOGY: [
        {"name": name, "parameters": []}
        for name in (
            "ECG/EKG",
            "Echocardiogram",
            "Stress Test",
            "Holter Monitor",
            "Custom Cardiology",
        )
    ],
    TestCategory.OTHER: [
        {"name": name, "parameters": []}
        for name in (
            "Vision Test",
            "Hearing Test",
            "Allergy Test",
            "Pulmonary Function Test",
            "Sleep Study",
            "Bone Density (DEXA)",
            "Custom Test",
        )
    ],
}

VISIT_TYPES = [
    "Consultation",
    "Follow-up",
    "Emergency",
    "Routine Checkup",
    "Teleconsultation",
    "Other",
]

SPECIALTIES = [
    "General Medicine",
    "Cardiology",
    "Dermatology",
    "Pediatrics",
    "Orthopedics",
    "Gynecology",
    "Neurology",
    "ENT",
    "Psychiatry",
    "Other",
]

DOCUMENT_TYPES: dict[DocumentType, tuple[str, str]] = {
    DocumentType.REPORT: ("Report", "Medical reports, test results"),
    DocumentType.PRESCRIPTION: ("Prescription", "Prescriptions, medications"),
    DocumentType.INVOICE: ("Invoice", "Bills, insurance claims"),
    DocumentType.OTHER: ("Other", "Other documents"),
}


def find_test_template(category: TestCategory, test_name: str) -> dict[str, Any] | None:
    """Catalog entry for a test, matched case-insensitively by name."""
    wanted = test_name.strip().lower()
    for test in COMMON_TESTS.get(category, []):
        if test["name"].lower() == wanted:
            return test
    return None


def build_results(
    category: TestCategory,
    test_name: str,
    summary: str | None = None,
    parameter_values: dict[str, str] | None = None,
) -> dict[str, Any]:
    """Initial ``results`` document for a newly recorded test.

    Tests whose catalog entry lists parameters get one row per parameter with
    its unit and normal range; all others store the summary as findings.
    """
    template = find_test_template(category, test_name)
    parameters = template["parameters"] if template else []
    if not parameters:
        return {"findings": summary or ""}

    values = parameter_values or {}
    return {
        "parameters": [
            {
                "name": param["name"],
                "value": values.get(param["name"], ""),
                "unit": param["unit"],
                "normalRange": param["normalRange"],
                "status": TestStatus.NORMAL.value,
            }
            for param in parameters
        ]
    }


def get_catalog() -> CatalogResponse:
    """All option sets in display order."""
    categories = [
        CategoryInfo(
            id=category.value,
            tests=[
                CommonTest(
                    name=test["name"],
                    parameters=[ParameterTemplate(**param) for param in test["parameters"]],
                )
                for test in COMMON_TESTS[category]
            ],
            **info,
        )
        for category, info in TEST_CATEGORIES.items()
    ]
    return CatalogResponse(
        test_categories=categories,
        test_statuses=[s.value for s in TestStatus],
        visit_types=VISIT_TYPES,
        specialties=SPECIALTIES,
        diagnosis_statuses=[s.value for s in DiagnosisStatus],
        diagnosis_severities=[s.value for s in DiagnosisSeverity],
        document_types=[
            DocumentTypeInfo(id=doc_type.value, label=label, description=description)
            for doc_type, (label, description) in DOCUMENT_TYPES.items()
        ],
    )
