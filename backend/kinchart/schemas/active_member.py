"""Pydantic schemas for the active-member selection."""

from enum import Enum

from pydantic import BaseModel, ConfigDict

from kinchart.schemas.common import OptionalText, RequiredText


class MemberType(str, Enum):
    """Identifier space of an active member id."""

    USER = "user"
    FAMILY = "family"


class ActiveMember(BaseModel):
    """Member that record listing and creation operate on."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: MemberType
    label: str


class ActiveMemberSelect(BaseModel):
    """Schema for switching the active member.

    ``label`` defaults to "Self" for the account holder and to the family
    member's full name otherwise.
    """

    id: RequiredText
    type: MemberType
    label: OptionalText = None


class ActiveMemberResponse(BaseModel):
    """Current selection; ``active_member`` is null before a session exists."""

    active_member: ActiveMember | None
