"""Uploaded document model."""

from datetime import date, datetime

from sqlalchemy import Date, DateTime, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from kinchart.database import Base
from kinchart.models._types import new_id, utcnow


class Document(Base):
    """Medical document whose bytes live in the documents bucket."""

    __tablename__ = "documents"

    id: Mapped[str] = mapped_column(Text, primary_key=True, default=new_id)
    member_id: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    document_type: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        comment="report, prescription, invoice or other",
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    document_date: Mapped[date] = mapped_column(Date, nullable=False)
    file_url: Mapped[str] = mapped_column(Text, nullable=False)
    file_path: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Object path inside the bucket: <member_id>/<timestamp>.<ext>",
    )
    file_type: Mapped[str] = mapped_column(String(16), nullable=False)
    file_size: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    hospital_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    doctor_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
    )

    __table_args__ = (Index("idx_document_member_date", "member_id", "document_date"),)

    def __repr__(self) -> str:
        return f"<Document(id={self.id}, title={self.title}, type={self.document_type})>"
