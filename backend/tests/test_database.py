"""Tests for database setup, models and repositories."""

from datetime import date

import pytest

from kinchart.database import Base
from kinchart.models import Diagnosis, Document, FamilyMember, MedicalTest, Profile, Visit
from kinchart.repositories import DiagnosisRepository, FamilyRepository, ProfileRepository


class TestModels:
    def test_all_tables_registered(self):
        assert {
            "users",
            "auth_sessions",
            "otp_codes",
            "profiles",
            "app_flags",
            "family_members",
            "diagnoses",
            "visits",
            "tests",
            "documents",
        } <= set(Base.metadata.tables)

    @pytest.mark.parametrize("model", [Diagnosis, Visit, MedicalTest, Document])
    def test_record_tables_are_member_scoped(self, model):
        column = model.__table__.columns["member_id"]
        assert column.nullable is False
        assert column.index is True

    def test_profile_completeness(self):
        assert Profile(id="u1", email="a@b.c", full_name="Asha").is_complete is True
        assert Profile(id="u1", email="a@b.c", full_name="   ").is_complete is False
        assert Profile(id="u1", email="a@b.c").is_complete is False

    def test_family_member_is_self(self):
        assert FamilyMember(full_name="Asha", relation="Self").is_self is True
        assert FamilyMember(full_name="Mom", relation="Mother").is_self is False

    def test_repr_includes_identifiers(self):
        diagnosis = Diagnosis(id="d1", member_id="m1", title="Asthma", status="Active")
        assert "d1" in repr(diagnosis)
        assert "Asthma" in repr(diagnosis)


class TestRecordRepository:
    @pytest.mark.asyncio
    async def test_list_filters_by_member(self, db_session):
        repo = DiagnosisRepository(db_session)
        await repo.create(member_id="m1", title="Asthma")
        await repo.create(member_id="m2", title="Flu")

        rows = await repo.list_for_member("m1")

        assert [r.title for r in rows] == ["Asthma"]
        assert rows[0].status == "Active"

    @pytest.mark.asyncio
    async def test_list_ignores_none_filters(self, db_session):
        repo = DiagnosisRepository(db_session)
        await repo.create(member_id="m1", title="Asthma", status="Resolved")

        assert len(await repo.list_for_member("m1", status=None)) == 1
        assert len(await repo.list_for_member("m1", status="Active")) == 0

    @pytest.mark.asyncio
    async def test_update_skips_none_for_required_columns(self, db_session):
        repo = DiagnosisRepository(db_session)
        record = await repo.create(member_id="m1", title="Asthma", description="wheeze")

        await repo.update(record, {"title": None, "description": None})

        assert record.title == "Asthma"
        assert record.description is None

    @pytest.mark.asyncio
    async def test_delete_for_member_returns_rows(self, db_session):
        repo = DiagnosisRepository(db_session)
        await repo.create(member_id="m1", title="A", diagnosed_on=date(2020, 1, 1))
        await repo.create(member_id="m1", title="B")
        await repo.create(member_id="m2", title="C")

        deleted = await repo.delete_for_member("m1")

        assert sorted(r.title for r in deleted) == ["A", "B"]
        assert await repo.list_for_member("m1") == []
        assert len(await repo.list_for_member("m2")) == 1


class TestFamilyAndProfileRepositories:
    @pytest.mark.asyncio
    async def test_get_for_user_checks_owner(self, db_session, user):
        repo = FamilyRepository(db_session)
        member = await repo.create(user.id, full_name="Mom")

        assert (await repo.get_for_user(user.id, member.id)).full_name == "Mom"
        assert await repo.get_for_user("someone-else", member.id) is None

    @pytest.mark.asyncio
    async def test_get_self(self, db_session, user):
        repo = FamilyRepository(db_session)
        assert await repo.get_self(user.id) is None
        await repo.create(user.id, full_name="Mom", relation="Mother")
        await repo.create(user.id, full_name="Asha", relation="Self")

        assert (await repo.get_self(user.id)).full_name == "Asha"

    @pytest.mark.asyncio
    async def test_profile_lookup_by_email_normalises(self, db_session, user):
        repo = ProfileRepository(db_session)
        await repo.create(user.id, "owner@example.com", full_name="Owner")

        assert (await repo.get_by_email("  OWNER@example.com ")).id == user.id
        assert await repo.get_by_email("nobody@example.com") is None
