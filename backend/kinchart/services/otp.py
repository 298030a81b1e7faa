"""Email one-time codes.

Only a hash of each code is stored. Requesting a new code retires the
previous ones, and a code allows a limited number of wrong guesses before a
new one must be requested.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from kinchart.config import settings
from kinchart.models import OtpCode

logger = logging.getLogger(__name__)


def generate_code(length: int) -> str:
    return "".join(str(secrets.randbelow(10)) for _ in range(length))


def hash_code(email: str, code: str, secret: str | None = None) -> str:
    """HMAC-SHA256 of the code, keyed with the server secret."""
    key = (secret if secret is not None else settings.otp_hash_secret).encode("utf-8")
    return hmac.new(key, f"{email}:{code}".encode("utf-8"), hashlib.sha256).hexdigest()


@dataclass(frozen=True)
class OtpCheck:
    """Outcome of a verification attempt."""

    ok: bool
    message: str = ""
    attempts_remaining: int = 0


async def issue_code(db: AsyncSession, email: str, now: datetime | None = None) -> str:
    """Create a new code for ``email`` and retire any outstanding ones.

    Returns:
        The plain-text code, to be delivered to the user.
    """
    now = now or datetime.now(timezone.utc)
    await db.execute(
        update(OtpCode)
        .where(OtpCode.email == email, OtpCode.consumed_at.is_(None))
        .values(consumed_at=now)
    )

    code = generate_code(settings.otp_length)
    db.add(
        OtpCode(
            email=email,
            code_hash=hash_code(email, code),
            expires_at=now + timedelta(minutes=settings.otp_ttl_minutes),
            created_at=now,
        )
    )
    await db.flush()
    return code


async def verify_code(db: AsyncSession, email: str, token: str, now: datetime | None = None) -> OtpCheck:
    """Check ``token`` against the latest outstanding code for ``email``.

    Every call against a live code counts as an attempt, and a matching code
    is consumed.
    """
    now = now or datetime.now(timezone.utc)
    result = await db.execute(
        select(OtpCode)
        .where(
            OtpCode.email == email,
            OtpCode.consumed_at.is_(None),
            OtpCode.expires_at > now,
        )
        .order_by(OtpCode.created_at.desc())
        .limit(1)
    )
    otp = result.scalar_one_or_none()
    if otp is None:
        return OtpCheck(ok=False, message="Code expired or not found. Please request a new code.")

    max_attempts = settings.otp_max_attempts
    if otp.attempts >= max_attempts:
        return OtpCheck(
            ok=False,
            message="Too many attempts. Please request a new code.",
        )

    otp.attempts += 1
    remaining = max_attempts - otp.attempts

    if not hmac.compare_digest(otp.code_hash, hash_code(email, token)):
        await db.flush()
        logger.info("Wrong sign-in code for %s (%d attempts remaining)", email, remaining)
        if remaining <= 0:
            return OtpCheck(ok=False, message="Too many attempts. Please request a new code.")
        noun = "attempt" if remaining == 1 else "attempts"
        return OtpCheck(
            ok=False,
            message=f"Invalid code. {remaining} {noun} remaining.",
            attempts_remaining=remaining,
        )

    otp.consumed_at = now
    await db.flush()
    return OtpCheck(ok=True, attempts_remaining=remaining)
