"""Sign-in API routes: email one-time codes, Google and sign-out.

A successful sign-in returns a bearer token and publishes the new session to
the account's session provider, which selects "Self" as the active member if
nothing is selected yet.
"""

import logging
import smtplib

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from kinchart.auth import get_current_session, get_member_context
from kinchart.config import settings
from kinchart.database import get_db
from kinchart.models import AuthSession, User
from kinchart.schemas.auth import (
    AuthSessionResponse,
    CurrentSessionResponse,
    EmailRegisteredResponse,
    GoogleSignIn,
    OtpRequest,
    OtpSentResponse,
    OtpVerify,
    SessionUserResponse,
)
from kinchart.services import accounts, otp
from kinchart.services.errors import report_failure
from kinchart.services.google import (
    GoogleTokenVerifier,
    IdentityProviderError,
    InvalidGoogleToken,
    get_google_verifier,
)
from kinchart.services.mailer import OtpMailer, get_mailer
from kinchart.services.member_context import (
    MemberContext,
    MemberContextRegistry,
    get_member_contexts,
)
from kinchart.services.session_provider import SessionUser, UserSession

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


async def _session_response(
    db: AsyncSession,
    registry: MemberContextRegistry,
    user: User,
    auth_session: AuthSession,
) -> AuthSessionResponse:
    session = UserSession(
        user=SessionUser(id=user.id, email=user.email),
        access_token=auth_session.token,
        expires_at=auth_session.expires_at,
    )
    context = registry.publish(session)
    return AuthSessionResponse(
        access_token=auth_session.token,
        expires_at=auth_session.expires_at,
        user=SessionUserResponse(id=user.id, email=user.email),
        profile_complete=await accounts.is_profile_complete(db, user.id),
        active_member=context.active_members.get_active_member(),
    )


@router.post("/otp", response_model=OtpSentResponse)
async def request_otp(
    data: OtpRequest,
    db: AsyncSession = Depends(get_db),
    mailer: OtpMailer = Depends(get_mailer),
) -> OtpSentResponse:
    """Send a one-time sign-in code to the email address."""
    with report_failure("Failed to send code"):
        code = await otp.issue_code(db, data.email)

    try:
        await mailer.send_code(data.email, code)
    except (smtplib.SMTPException, OSError) as e:
        logger.exception("Failed to deliver sign-in code to %s: %s", data.email, e)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to send code",
        ) from e

    return OtpSentResponse(email=data.email, expires_in=settings.otp_ttl_minutes * 60)


@router.post("/otp/verify", response_model=AuthSessionResponse)
async def verify_otp(
    data: OtpVerify,
    db: AsyncSession = Depends(get_db),
    registry: MemberContextRegistry = Depends(get_member_contexts),
) -> AuthSessionResponse:
    """Exchange a one-time code for a bearer session.

    The account is created on its first successful verification.
    """
    with report_failure("Failed to verify code"):
        check = await otp.verify_code(db, data.email, data.token)
        if not check.ok:
            # keep the attempt count
            await db.commit()
        else:
            user, _ = await accounts.get_or_create_user(db, data.email)
            auth_session = await accounts.open_session(db, user, provider="email")

    if not check.ok:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=check.message)

    logger.info("Email sign-in for account %s", user.id)
    return await _session_response(db, registry, user, auth_session)


@router.post("/google", response_model=AuthSessionResponse)
async def sign_in_with_google(
    data: GoogleSignIn,
    db: AsyncSession = Depends(get_db),
    registry: MemberContextRegistry = Depends(get_member_contexts),
    verifier: GoogleTokenVerifier = Depends(get_google_verifier),
) -> AuthSessionResponse:
    """Sign in with a Google ID token.

    First-time accounts get a profile pre-filled with the Google name.
    """
    try:
        identity = await verifier.verify(data.id_token)
    except InvalidGoogleToken as e:
        logger.info("Rejected Google token: %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid Google token",
        ) from e
    except IdentityProviderError as e:
        logger.exception("Google sign-in failed: %s", e)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Google sign-in failed",
        ) from e

    with report_failure("Google sign-in failed"):
        user, created = await accounts.get_or_create_user(db, identity.email)
        if created:
            await accounts.provision_federated_profile(db, user, identity.name)
        auth_session = await accounts.open_session(db, user, provider="google")

    logger.info("Google sign-in for account %s (new=%s)", user.id, created)
    return await _session_response(db, registry, user, auth_session)


@router.post("/sign-out", status_code=status.HTTP_204_NO_CONTENT)
async def sign_out(
    session: UserSession = Depends(get_current_session),
    db: AsyncSession = Depends(get_db),
    registry: MemberContextRegistry = Depends(get_member_contexts),
) -> None:
    """Revoke the bearer token and clear its active member.

    Other sessions of the same account keep their selection.
    """
    with report_failure("Failed to sign out"):
        await accounts.close_session(db, session.access_token)
    registry.sign_out(session.access_token)


@router.get("/session", response_model=CurrentSessionResponse)
async def get_session(
    session: UserSession = Depends(get_current_session),
    context: MemberContext = Depends(get_member_context),
) -> CurrentSessionResponse:
    return CurrentSessionResponse(
        user=SessionUserResponse(id=session.user.id, email=session.user.email),
        expires_at=session.expires_at,
        active_member=context.active_members.get_active_member(),
    )


@router.get("/email-registered", response_model=EmailRegisteredResponse)
async def email_registered(
    email: str = Query(..., min_length=3),
    db: AsyncSession = Depends(get_db),
) -> EmailRegisteredResponse:
    """Whether an account with a profile already uses this email."""
    email = email.strip().lower()
    with report_failure("Failed to check email"):
        registered = await accounts.is_email_registered(db, email)
    return EmailRegisteredResponse(email=email, registered=registered)
