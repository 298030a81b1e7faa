"""Pydantic schemas for sign-in and sessions."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from kinchart.schemas.active_member import ActiveMember


def _normalize_email(value: object) -> object:
    return value.strip().lower() if isinstance(value, str) else value


class OtpRequest(BaseModel):
    """Request an email one-time code."""

    email: EmailStr

    normalize_email = field_validator("email", mode="before")(_normalize_email)


class OtpVerify(BaseModel):
    """Exchange an email one-time code for a session."""

    email: EmailStr
    token: str = Field(min_length=4, max_length=12)

    normalize_email = field_validator("email", mode="before")(_normalize_email)

    @field_validator("token", mode="before")
    @classmethod
    def _strip_token(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value


class GoogleSignIn(BaseModel):
    """Sign in with a Google ID token obtained on the device."""

    id_token: str = Field(min_length=1)


class OtpSentResponse(BaseModel):
    email: str
    expires_in: int = Field(description="Seconds until the code expires")


class SessionUserResponse(BaseModel):
    id: str
    email: str | None


class AuthSessionResponse(BaseModel):
    """Bearer session returned at sign-in."""

    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: SessionUserResponse
    profile_complete: bool
    active_member: ActiveMember | None


class CurrentSessionResponse(BaseModel):
    """Session behind the request's bearer token."""

    user: SessionUserResponse
    expires_at: datetime | None
    active_member: ActiveMember | None


class EmailRegisteredResponse(BaseModel):
    email: str
    registered: bool
