"""Resolution and ownership checks for member ids.

A member id is either the account's own user id or the id of one of its
family members. Ids belonging to another account are treated as unknown.
"""

from __future__ import annotations

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from kinchart.constants import SELF_LABEL
from kinchart.repositories import FamilyRepository
from kinchart.schemas.active_member import ActiveMember, MemberType
from kinchart.services.member_context import MemberContext


async def owns_member(db: AsyncSession, user_id: str, member_id: str) -> bool:
    if member_id == user_id:
        return True
    return await FamilyRepository(db).get_for_user(user_id, member_id) is not None


async def require_member(db: AsyncSession, user_id: str, member_id: str) -> str:
    """Return ``member_id`` if the account owns it, else raise 404."""
    if not await owns_member(db, user_id, member_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Member not found",
        )
    return member_id


async def resolve_member_id(
    db: AsyncSession,
    context: MemberContext,
    user_id: str,
    member_id: str | None,
) -> str:
    """The member an operation targets: the given id, else the active member.

    Raises:
        HTTPException: 404 if the member is not the account's. 400 if no id
            was given and no member is active.
    """
    if member_id is None:
        active = context.active_members.get_active_member()
        if active is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No active member selected",
            )
        member_id = active.id
    return await require_member(db, user_id, member_id)


async def build_active_member(
    db: AsyncSession,
    user_id: str,
    member_id: str,
    member_type: MemberType,
    label: str | None = None,
) -> ActiveMember:
    """Validate a selection and fill in its default label.

    Raises:
        HTTPException: 404 if the id does not match its type or belongs to
            another account.
    """
    if member_type == MemberType.USER:
        if member_id != user_id:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Member not found")
        return ActiveMember(id=member_id, type=member_type, label=label or SELF_LABEL)

    member = await FamilyRepository(db).get_for_user(user_id, member_id)
    if member is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Member not found")
    return ActiveMember(id=member.id, type=member_type, label=label or member.full_name)


async def resolve_list_member_id(
    db: AsyncSession,
    context: MemberContext,
    user_id: str,
    member_id: str | None,
) -> str | None:
    """Like ``resolve_member_id`` but returns None when nothing is active,
    so the list is simply empty."""
    if member_id is None and context.active_members.get_active_member() is None:
        return None
    return await resolve_member_id(db, context, user_id, member_id)


async def get_owned_record(repo, user_id: str, record_id: str, entity: str):
    """Fetch a record by id, raising 404 unless its member belongs to the account."""
    record = await repo.get_by_id(record_id)
    if record is None or not await owns_member(repo.db, user_id, record.member_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{entity} not found",
        )
    return record
