"""Shared schema helpers."""

from typing import Annotated, Generic, TypeVar

from pydantic import BaseModel, BeforeValidator, Field, StringConstraints


def _blank_to_none(value: object) -> object:
    """Trim strings and turn blank ones into None."""
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


# Optional free-text field: surrounding whitespace removed, "" stored as null
OptionalText = Annotated[str | None, BeforeValidator(_blank_to_none)]

# Required text field: trimmed, must not be blank
RequiredText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
RequiredLongText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

ItemT = TypeVar("ItemT")


class RecordListResponse(BaseModel, Generic[ItemT]):
    """Records of one member, newest first.

    An empty list is a normal result; ``empty_message`` is the text to show in
    its place.
    """

    items: list[ItemT]
    total: int
    member_id: str | None = Field(description="Member the list was filtered by")
    empty_message: str | None = None
