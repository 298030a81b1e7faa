"""Family member model."""

from datetime import date, datetime

from sqlalchemy import Date, DateTime, ForeignKey, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from kinchart.constants import SELF_RELATION
from kinchart.database import Base
from kinchart.models._types import new_id, utcnow


class FamilyMember(Base):
    """Person whose records the account holder keeps.

    The account holder's own row carries relation "Self" and is created when
    the profile is completed.
    """

    __tablename__ = "family_members"

    id: Mapped[str] = mapped_column(Text, primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(
        Text,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    relation: Mapped[str | None] = mapped_column(String(64), nullable=True)
    dob: Mapped[date | None] = mapped_column(Date, nullable=True)
    gender: Mapped[str | None] = mapped_column(String(32), nullable=True)
    blood_group: Mapped[str | None] = mapped_column(String(8), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
    )

    __table_args__ = (Index("idx_family_user_created", "user_id", "created_at"),)

    @property
    def is_self(self) -> bool:
        return self.relation == SELF_RELATION

    def __repr__(self) -> str:
        return f"<FamilyMember(id={self.id}, name={self.full_name}, relation={self.relation})>"
