"""Repositories for member-scoped health records.

Every record table has the same shape: a ``member_id`` (account user id or
family member id), a recency column the lists are ordered by, and single-row
inserts, updates and deletes. ``MemberRecordRepository`` implements that once;
the subclasses only name the model and its recency column.
"""

from __future__ import annotations

from typing import Any, ClassVar, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kinchart.models import Diagnosis, Document, MedicalTest, Visit

ModelT = TypeVar("ModelT", Diagnosis, Visit, MedicalTest, Document)


class MemberRecordRepository(Generic[ModelT]):
    """Filter-and-order reads plus single-row writes for one record table."""

    model: ClassVar[type]
    recency_column: ClassVar[str]

    def __init__(self, db: AsyncSession):
        """Initialize repository with database session.

        Args:
            db: Async SQLAlchemy session.
        """
        self.db = db

    async def list_for_member(self, member_id: str, **filters: Any) -> list[ModelT]:
        """List a member's records, most recent first.

        Args:
            member_id: Account user id or family member id.
            **filters: Column equality filters; ``None`` values are ignored.

        Returns:
            Matching rows ordered by the recency column (nulls last), then by
            creation time.
        """
        recency = getattr(self.model, self.recency_column)
        query = select(self.model).where(self.model.member_id == member_id)
        for field, value in filters.items():
            if value is not None:
                query = query.where(getattr(self.model, field) == value)
        query = query.order_by(recency.desc().nullslast(), self.model.created_at.desc())

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_by_id(self, record_id: str) -> ModelT | None:
        result = await self.db.execute(select(self.model).where(self.model.id == record_id))
        return result.scalar_one_or_none()

    async def create(self, **values: Any) -> ModelT:
        record = self.model(**values)
        self.db.add(record)
        await self.db.flush()
        return record

    async def update(self, record: ModelT, updates: dict[str, Any]) -> ModelT:
        """Apply a partial update.

        ``None`` is skipped for NOT NULL columns so that clearing a required
        field leaves it unchanged instead of failing the write.
        """
        columns = self.model.__table__.columns
        for field, value in updates.items():
            if value is None and not columns[field].nullable:
                continue
            setattr(record, field, value)
        await self.db.flush()
        return record

    async def delete(self, record: ModelT) -> None:
        await self.db.delete(record)
        await self.db.flush()

    async def delete_for_member(self, member_id: str) -> list[ModelT]:
        """Delete every record of a member and return the deleted rows."""
        records = await self.list_for_member(member_id)
        for record in records:
            await self.db.delete(record)
        await self.db.flush()
        return records


class DiagnosisRepository(MemberRecordRepository[Diagnosis]):
    model = Diagnosis
    recency_column = "diagnosed_on"


class VisitRepository(MemberRecordRepository[Visit]):
    model = Visit
    recency_column = "visit_date"


class MedicalTestRepository(MemberRecordRepository[MedicalTest]):
    model = MedicalTest
    recency_column = "test_date"


class DocumentRepository(MemberRecordRepository[Document]):
    model = Document
    recency_column = "document_date"
