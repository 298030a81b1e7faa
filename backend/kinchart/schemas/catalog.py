"""Pydantic schemas for the reference catalogs."""

from pydantic import BaseModel


class ParameterTemplate(BaseModel):
    name: str
    unit: str = ""
    normalRange: str = ""


class CommonTest(BaseModel):
    """A common test and the parameters it measures."""

    name: str
    parameters: list[ParameterTemplate] = []


class CategoryInfo(BaseModel):
    id: str
    name: str
    description: str
    examples: str
    tests: list[CommonTest]


class DocumentTypeInfo(BaseModel):
    id: str
    label: str
    description: str


class CatalogResponse(BaseModel):
    """Fixed option sets offered by the record forms."""

    test_categories: list[CategoryInfo]
    test_statuses: list[str]
    visit_types: list[str]
    specialties: list[str]
    diagnosis_statuses: list[str]
    diagnosis_severities: list[str]
    document_types: list[DocumentTypeInfo]
