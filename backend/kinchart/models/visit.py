"""Doctor visit record model."""

from datetime import date, datetime

from sqlalchemy import Date, DateTime, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from kinchart.database import Base
from kinchart.models._types import new_id, utcnow


class Visit(Base):
    """Upcoming appointment or completed visit."""

    __tablename__ = "visits"

    id: Mapped[str] = mapped_column(Text, primary_key=True, default=new_id)
    member_id: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    visit_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        comment="upcoming or completed",
    )
    visit_type: Mapped[str] = mapped_column(String(64), nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    doctor_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    hospital_or_clinic_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    specialty: Mapped[str | None] = mapped_column(String(128), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    follow_up_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
    )

    __table_args__ = (Index("idx_visit_member_status", "member_id", "status"),)

    def __repr__(self) -> str:
        return f"<Visit(id={self.id}, type={self.visit_type}, status={self.status})>"
