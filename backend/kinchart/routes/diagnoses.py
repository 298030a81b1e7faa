"""Diagnosis API routes."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from kinchart.auth import get_member_context, verify_bearer_token
from kinchart.database import get_db
from kinchart.repositories import DiagnosisRepository
from kinchart.schemas.common import RecordListResponse
from kinchart.schemas.diagnosis import DiagnosisCreate, DiagnosisResponse, DiagnosisUpdate
from kinchart.services.errors import report_failure
from kinchart.services.member_context import MemberContext
from kinchart.services.members import (
    get_owned_record,
    resolve_list_member_id,
    resolve_member_id,
)

router = APIRouter(prefix="/diagnoses", tags=["diagnoses"])

EMPTY_MESSAGE = "No diagnoses yet"


@router.get("", response_model=RecordListResponse[DiagnosisResponse])
async def list_diagnoses(
    member_id: str | None = None,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(verify_bearer_token),
    context: MemberContext = Depends(get_member_context),
) -> RecordListResponse[DiagnosisResponse]:
    """List a member's diagnoses, most recently diagnosed first.

    Args:
        member_id: Member to list; defaults to the active member.
    """
    member_id = await resolve_list_member_id(db, context, user_id, member_id)
    diagnoses = []
    if member_id is not None:
        with report_failure("Failed to load diagnoses"):
            diagnoses = await DiagnosisRepository(db).list_for_member(member_id)

    return RecordListResponse[DiagnosisResponse](
        items=[DiagnosisResponse.model_validate(d) for d in diagnoses],
        total=len(diagnoses),
        member_id=member_id,
        empty_message=None if diagnoses else EMPTY_MESSAGE,
    )


@router.post("", response_model=DiagnosisResponse, status_code=status.HTTP_201_CREATED)
async def create_diagnosis(
    data: DiagnosisCreate,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(verify_bearer_token),
    context: MemberContext = Depends(get_member_context),
) -> DiagnosisResponse:
    """Record a diagnosis for the given or active member."""
    member_id = await resolve_member_id(db, context, user_id, data.member_id)
    values = data.model_dump(exclude={"member_id"})
    with report_failure("Failed to save diagnosis"):
        diagnosis = await DiagnosisRepository(db).create(member_id=member_id, **values)
    return DiagnosisResponse.model_validate(diagnosis)


@router.get("/{diagnosis_id}", response_model=DiagnosisResponse)
async def get_diagnosis(
    diagnosis_id: str,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(verify_bearer_token),
) -> DiagnosisResponse:
    diagnosis = await get_owned_record(DiagnosisRepository(db), user_id, diagnosis_id, "Diagnosis")
    return DiagnosisResponse.model_validate(diagnosis)


@router.patch("/{diagnosis_id}", response_model=DiagnosisResponse)
async def update_diagnosis(
    diagnosis_id: str,
    data: DiagnosisUpdate,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(verify_bearer_token),
) -> DiagnosisResponse:
    """Update the fields sent in the request body."""
    repo = DiagnosisRepository(db)
    diagnosis = await get_owned_record(repo, user_id, diagnosis_id, "Diagnosis")
    updates = data.model_dump(exclude_unset=True)
    diagnosed_on = updates.get("diagnosed_on", diagnosis.diagnosed_on)
    resolved_on = updates.get("resolved_on", diagnosis.resolved_on)
    if diagnosed_on and resolved_on and resolved_on < diagnosed_on:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Resolved date cannot be before the diagnosis date",
        )
    with report_failure("Failed to update diagnosis"):
        diagnosis = await repo.update(diagnosis, updates)
    return DiagnosisResponse.model_validate(diagnosis)


@router.delete("/{diagnosis_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_diagnosis(
    diagnosis_id: str,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(verify_bearer_token),
) -> None:
    repo = DiagnosisRepository(db)
    diagnosis = await get_owned_record(repo, user_id, diagnosis_id, "Diagnosis")
    with report_failure("Failed to delete diagnosis"):
        await repo.delete(diagnosis)
