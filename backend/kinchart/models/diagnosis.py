"""Diagnosis record model."""

from datetime import date, datetime

from sqlalchemy import Date, DateTime, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from kinchart.database import Base
from kinchart.models._types import new_id, utcnow


class Diagnosis(Base):
    """Condition diagnosed for a member."""

    __tablename__ = "diagnoses"

    id: Mapped[str] = mapped_column(Text, primary_key=True, default=new_id)
    member_id: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        index=True,
        comment="Account user id or family member id",
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    diagnosed_on: Mapped[date | None] = mapped_column(Date, nullable=True)
    resolved_on: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default="Active",
        comment="Active, Resolved or Monitoring",
    )
    severity: Mapped[str | None] = mapped_column(
        String(32),
        nullable=True,
        comment="Mild, Moderate or Severe",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
    )

    __table_args__ = (Index("idx_diagnosis_member_date", "member_id", "diagnosed_on"),)

    def __repr__(self) -> str:
        return f"<Diagnosis(id={self.id}, title={self.title}, status={self.status})>"
