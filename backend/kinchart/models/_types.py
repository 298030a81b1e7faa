"""Column helpers shared by the models."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB

# JSONB on PostgreSQL, plain JSON elsewhere
JsonColumn = JSON().with_variant(JSONB(), "postgresql")


def new_id() -> str:
    """Generate a text primary key."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
