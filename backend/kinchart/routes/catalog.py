"""Reference catalog API routes."""

from fastapi import APIRouter

from kinchart.schemas.catalog import CatalogResponse
from kinchart.services.catalog import get_catalog

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("", response_model=CatalogResponse)
async def read_catalog() -> CatalogResponse:
    """Option sets for the record forms: test categories, visit types and more."""
    return get_catalog()
