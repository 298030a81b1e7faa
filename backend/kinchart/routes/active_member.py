"""Active-member API routes."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from kinchart.auth import get_member_context, verify_bearer_token
from kinchart.database import get_db
from kinchart.schemas.active_member import ActiveMemberResponse, ActiveMemberSelect
from kinchart.services.member_context import MemberContext
from kinchart.services.members import build_active_member

router = APIRouter(prefix="/active-member", tags=["active-member"])


@router.get("", response_model=ActiveMemberResponse)
async def get_active_member(
    context: MemberContext = Depends(get_member_context),
) -> ActiveMemberResponse:
    """Current selection. Defaults to "Self" after sign-in."""
    return ActiveMemberResponse(active_member=context.active_members.get_active_member())


@router.put("", response_model=ActiveMemberResponse)
async def set_active_member(
    data: ActiveMemberSelect,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(verify_bearer_token),
    context: MemberContext = Depends(get_member_context),
) -> ActiveMemberResponse:
    """Switch the member that record lists and new records refer to."""
    member = await build_active_member(db, user_id, data.id, data.type, data.label)
    context.active_members.set_active_member(member)
    return ActiveMemberResponse(active_member=member)
