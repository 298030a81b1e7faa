"""Visit API routes.

Visits are listed per member and per status: upcoming appointments and
completed visits are shown as separate lists.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from kinchart.auth import get_member_context, verify_bearer_token
from kinchart.database import get_db
from kinchart.repositories import VisitRepository
from kinchart.schemas.common import RecordListResponse
from kinchart.schemas.visit import VisitCreate, VisitResponse, VisitStatus, VisitUpdate
from kinchart.services.errors import report_failure
from kinchart.services.member_context import MemberContext
from kinchart.services.members import (
    get_owned_record,
    resolve_list_member_id,
    resolve_member_id,
)

router = APIRouter(prefix="/visits", tags=["visits"])


def empty_message(visit_status: VisitStatus | None) -> str:
    if visit_status == VisitStatus.UPCOMING:
        return "No upcoming visits"
    if visit_status == VisitStatus.COMPLETED:
        return "No completed visits"
    return "No visits yet"


@router.get("", response_model=RecordListResponse[VisitResponse])
async def list_visits(
    member_id: str | None = None,
    status_filter: VisitStatus | None = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(verify_bearer_token),
    context: MemberContext = Depends(get_member_context),
) -> RecordListResponse[VisitResponse]:
    """List a member's visits, latest visit date first.

    Args:
        member_id: Member to list; defaults to the active member.
        status_filter: Only upcoming or only completed visits.
    """
    member_id = await resolve_list_member_id(db, context, user_id, member_id)
    visits = []
    if member_id is not None:
        with report_failure("Failed to load visits"):
            visits = await VisitRepository(db).list_for_member(
                member_id,
                status=status_filter.value if status_filter else None,
            )

    return RecordListResponse[VisitResponse](
        items=[VisitResponse.model_validate(v) for v in visits],
        total=len(visits),
        member_id=member_id,
        empty_message=None if visits else empty_message(status_filter),
    )


@router.post("", response_model=VisitResponse, status_code=status.HTTP_201_CREATED)
async def create_visit(
    data: VisitCreate,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(verify_bearer_token),
    context: MemberContext = Depends(get_member_context),
) -> VisitResponse:
    """Schedule or record a visit for the given or active member."""
    member_id = await resolve_member_id(db, context, user_id, data.member_id)
    with report_failure("Failed to save visit"):
        visit = await VisitRepository(db).create(
            member_id=member_id,
            **data.model_dump(exclude={"member_id"}),
        )
    return VisitResponse.model_validate(visit)


@router.get("/{visit_id}", response_model=VisitResponse)
async def get_visit(
    visit_id: str,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(verify_bearer_token),
) -> VisitResponse:
    visit = await get_owned_record(VisitRepository(db), user_id, visit_id, "Visit")
    return VisitResponse.model_validate(visit)


@router.patch("/{visit_id}", response_model=VisitResponse)
async def update_visit(
    visit_id: str,
    data: VisitUpdate,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(verify_bearer_token),
) -> VisitResponse:
    """Update the fields sent in the request body, e.g. mark a visit completed."""
    repo = VisitRepository(db)
    visit = await get_owned_record(repo, user_id, visit_id, "Visit")
    with report_failure("Failed to update visit"):
        visit = await repo.update(visit, data.model_dump(exclude_unset=True))
    return VisitResponse.model_validate(visit)


@router.delete("/{visit_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_visit(
    visit_id: str,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(verify_bearer_token),
) -> None:
    repo = VisitRepository(db)
    visit = await get_owned_record(repo, user_id, visit_id, "Visit")
    with report_failure("Failed to delete visit"):
        await repo.delete(visit)
