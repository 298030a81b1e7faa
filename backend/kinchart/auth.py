"""Bearer token authentication via the auth_sessions table."""

from datetime import datetime, timezone

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kinchart.database import get_db
from kinchart.models import AuthSession, User
from kinchart.services.member_context import (
    MemberContext,
    MemberContextRegistry,
    get_member_contexts,
)
from kinchart.services.session_provider import SessionUser, UserSession

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_session(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
    registry: MemberContextRegistry = Depends(get_member_contexts),
) -> UserSession:
    """Validate a bearer token against the auth_sessions table.

    A rejected token loses any member context it still holds.

    Returns:
        The validated session.

    Raises:
        HTTPException: 401 if token is missing, invalid, or expired.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing authentication token",
        )

    token = credentials.credentials
    result = await db.execute(
        select(AuthSession, User)
        .join(User, User.id == AuthSession.user_id)
        .where(
            AuthSession.token == token,
            AuthSession.expires_at > datetime.now(timezone.utc),
        )
    )
    row = result.one_or_none()

    if row is None:
        registry.sign_out(token)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

    auth_session, user = row
    return UserSession(
        user=SessionUser(id=user.id, email=user.email),
        access_token=auth_session.token,
        expires_at=auth_session.expires_at,
    )


async def verify_bearer_token(session: UserSession = Depends(get_current_session)) -> str:
    """Returns the authenticated user_id."""
    return session.user.id


async def get_member_context(
    session: UserSession = Depends(get_current_session),
    registry: MemberContextRegistry = Depends(get_member_contexts),
) -> MemberContext:
    """Publish the request's session and return the account's context."""
    return registry.publish(session)
