"""Family member API routes."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from kinchart.auth import verify_bearer_token
from kinchart.constants import SELF_RELATION
from kinchart.database import get_db
from kinchart.repositories import (
    DiagnosisRepository,
    DocumentRepository,
    FamilyRepository,
    MedicalTestRepository,
    VisitRepository,
)
from kinchart.schemas.family import (
    FamilyListResponse,
    FamilyMemberCreate,
    FamilyMemberResponse,
    FamilyMemberUpdate,
)
from kinchart.services.errors import report_failure
from kinchart.services.member_context import MemberContextRegistry, get_member_contexts
from kinchart.services.storage import DocumentStorage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/family", tags=["family"])

EMPTY_MESSAGE = "No family members added yet"


async def _get_member_or_404(repo: FamilyRepository, user_id: str, member_id: str):
    member = await repo.get_for_user(user_id, member_id)
    if member is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Family member not found",
        )
    return member


def _reject_self_relation(relation: str | None) -> None:
    if relation is not None and relation.lower() == SELF_RELATION.lower():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="The Self member is managed through your profile",
        )


@router.get("", response_model=FamilyListResponse)
async def list_family_members(
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(verify_bearer_token),
) -> FamilyListResponse:
    """List the account's family members in the order they were added."""
    with report_failure("Failed to load family members"):
        members = await FamilyRepository(db).list_for_user(user_id)

    return FamilyListResponse(
        items=[FamilyMemberResponse.model_validate(m) for m in members],
        total=len(members),
        empty_message=None if members else EMPTY_MESSAGE,
    )


@router.post("", response_model=FamilyMemberResponse, status_code=status.HTTP_201_CREATED)
async def create_family_member(
    data: FamilyMemberCreate,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(verify_bearer_token),
) -> FamilyMemberResponse:
    _reject_self_relation(data.relation)
    with report_failure("Failed to add family member"):
        member = await FamilyRepository(db).create(user_id, **data.model_dump())
    logger.info("Added family member %s to account %s", member.id, user_id)
    return FamilyMemberResponse.model_validate(member)


@router.get("/{member_id}", response_model=FamilyMemberResponse)
async def get_family_member(
    member_id: str,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(verify_bearer_token),
) -> FamilyMemberResponse:
    member = await _get_member_or_404(FamilyRepository(db), user_id, member_id)
    return FamilyMemberResponse.model_validate(member)


@router.patch("/{member_id}", response_model=FamilyMemberResponse)
async def update_family_member(
    member_id: str,
    data: FamilyMemberUpdate,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(verify_bearer_token),
) -> FamilyMemberResponse:
    """Update the fields sent in the request body.

    The relation of the "Self" row cannot change, and no other row can
    become "Self".
    """
    repo = FamilyRepository(db)
    member = await _get_member_or_404(repo, user_id, member_id)
    updates = data.model_dump(exclude_unset=True)
    if "relation" in updates:
        if member.is_self:
            updates.pop("relation")
        else:
            _reject_self_relation(updates["relation"])

    with report_failure("Failed to update family member"):
        member = await repo.update(member, updates)
    return FamilyMemberResponse.model_validate(member)


@router.delete("/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_family_member(
    member_id: str,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(verify_bearer_token),
    registry: MemberContextRegistry = Depends(get_member_contexts),
    storage: DocumentStorage = Depends(get_storage),
) -> None:
    """Delete a family member together with their records and files.

    Files are removed once the rows are committed. Every session of the
    account that had the member selected falls back to "Self".
    """
    repo = FamilyRepository(db)
    member = await _get_member_or_404(repo, user_id, member_id)
    if member.is_self:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="The Self member cannot be deleted",
        )

    with report_failure("Failed to delete family member"):
        for record_repo in (
            DiagnosisRepository(db),
            VisitRepository(db),
            MedicalTestRepository(db),
        ):
            await record_repo.delete_for_member(member_id)
        documents = await DocumentRepository(db).delete_for_member(member_id)
        paths = [d.file_path for d in documents]
        await repo.delete(member)
        await db.commit()

    with report_failure("Failed to remove document files"):
        await storage.remove(paths)

    for account_context in registry.for_user(user_id):
        account_context.active_members.member_deleted(member_id)
    logger.info(
        "Deleted family member %s of account %s (%d documents)",
        member_id,
        user_id,
        len(documents),
    )
