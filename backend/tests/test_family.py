"""Tests for family member API routes."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import select

from kinchart.models import AuthSession, Diagnosis, FamilyMember


async def add_member(client, headers, name, relation=None):
    response = await client.post(
        "/api/family",
        json={"full_name": name, "relation": relation},
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()


class TestFamilyList:
    @pytest.mark.asyncio
    async def test_empty_list_has_message(self, client, auth_headers):
        response = await client.get("/api/family", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["items"] == []
        assert data["total"] == 0
        assert data["empty_message"] == "No family members added yet"

    @pytest.mark.asyncio
    async def test_listed_oldest_first(self, client, auth_headers):
        await add_member(client, auth_headers, "Mom", "Mother")
        await add_member(client, auth_headers, "Dad", "Father")
        await add_member(client, auth_headers, "Kid", "Son")

        response = await client.get("/api/family", headers=auth_headers)
        names = [m["full_name"] for m in response.json()["items"]]
        assert names == ["Mom", "Dad", "Kid"]
        assert response.json()["empty_message"] is None

    @pytest.mark.asyncio
    async def test_other_accounts_members_hidden(self, client, auth_headers, other_headers):
        await add_member(client, auth_headers, "Mom")
        response = await client.get("/api/family", headers=other_headers)
        assert response.json()["items"] == []


class TestFamilyCrud:
    @pytest.mark.asyncio
    async def test_create_trims_and_blanks_to_null(self, client, auth_headers):
        response = await client.post(
            "/api/family",
            json={"full_name": "  Mom  ", "relation": "", "blood_group": " O+ "},
            headers=auth_headers,
        )
        assert response.status_code == 201
        data = response.json()
        assert data["full_name"] == "Mom"
        assert data["relation"] is None
        assert data["blood_group"] == "O+"

    @pytest.mark.asyncio
    async def test_create_requires_name(self, client, auth_headers):
        response = await client.post("/api/family", json={"full_name": "   "}, headers=auth_headers)
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_cannot_add_second_self(self, client, auth_headers):
        response = await client.post(
            "/api/family",
            json={"full_name": "Me again", "relation": "self"},
            headers=auth_headers,
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_get_and_update(self, client, auth_headers, family_member):
        response = await client.patch(
            f"/api/family/{family_member['id']}",
            json={"dob": "1960-09-02", "gender": "Female"},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert response.json()["dob"] == "1960-09-02"
        assert response.json()["full_name"] == "Mom"

        response = await client.get(f"/api/family/{family_member['id']}", headers=auth_headers)
        assert response.json()["gender"] == "Female"

    @pytest.mark.asyncio
    async def test_other_account_gets_404(self, client, other_headers, family_member):
        response = await client.get(f"/api/family/{family_member['id']}", headers=other_headers)
        assert response.status_code == 404
        assert response.json()["detail"] == "Family member not found"

        response = await client.delete(f"/api/family/{family_member['id']}", headers=other_headers)
        assert response.status_code == 404


class TestFamilyDelete:
    @pytest.mark.asyncio
    async def test_delete_removes_member(self, client, auth_headers, family_member):
        response = await client.delete(f"/api/family/{family_member['id']}", headers=auth_headers)
        assert response.status_code == 204

        response = await client.get(f"/api/family/{family_member['id']}", headers=auth_headers)
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_deleting_active_member_reverts_to_self(self, client, user, auth_headers, family_member):
        await client.put(
            "/api/active-member",
            json={"id": family_member["id"], "type": "family", "label": "Mom"},
            headers=auth_headers,
        )

        await client.delete(f"/api/family/{family_member['id']}", headers=auth_headers)

        response = await client.get("/api/active-member", headers=auth_headers)
        assert response.json()["active_member"] == {"id": user.id, "type": "user", "label": "Self"}

    @pytest.mark.asyncio
    async def test_deleting_inactive_member_keeps_selection(self, client, auth_headers, family_member):
        dad = await add_member(client, auth_headers, "Dad", "Father")
        await client.put(
            "/api/active-member",
            json={"id": dad["id"], "type": "family"},
            headers=auth_headers,
        )

        await client.delete(f"/api/family/{family_member['id']}", headers=auth_headers)

        response = await client.get("/api/active-member", headers=auth_headers)
        assert response.json()["active_member"]["id"] == dad["id"]

    @pytest.mark.asyncio
    async def test_delete_removes_members_records(self, client, auth_headers, family_member, db_session):
        member_id = family_member["id"]
        await client.post(
            "/api/diagnoses",
            json={"member_id": member_id, "title": "Asthma"},
            headers=auth_headers,
        )

        await client.delete(f"/api/family/{member_id}", headers=auth_headers)

        # The member no longer exists, so its id is no longer accepted
        response = await client.get(f"/api/diagnoses?member_id={member_id}", headers=auth_headers)
        assert response.status_code == 404

        result = await db_session.execute(select(Diagnosis).where(Diagnosis.member_id == member_id))
        assert result.scalars().all() == []

    @pytest.mark.asyncio
    async def test_files_kept_when_delete_is_not_committed(
        self, client, auth_headers, family_member, storage, db_session, fail_commits
    ):
        response = await client.post(
            "/api/documents",
            data={"document_type": "report", "member_id": family_member["id"]},
            files={"file": ("report.pdf", b"%PDF-1.4", "application/pdf")},
            headers=auth_headers,
        )
        path = response.json()["file_path"]

        fail_commits()
        response = await client.delete(f"/api/family/{family_member['id']}", headers=auth_headers)

        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to delete family member"
        assert storage.exists(path)
        assert await db_session.get(FamilyMember, family_member["id"]) is not None

    @pytest.mark.asyncio
    async def test_deleting_member_resets_every_session_that_selected_it(
        self, client, user, auth_headers, family_member, session_maker
    ):
        async with session_maker() as session:
            session.add(
                AuthSession(
                    token="owner-tablet-token",
                    user_id=user.id,
                    provider="email",
                    expires_at=datetime.now(timezone.utc) + timedelta(hours=1),
                )
            )
            await session.commit()
        tablet = {"Authorization": "Bearer owner-tablet-token"}
        for headers in (auth_headers, tablet):
            await client.put(
                "/api/active-member",
                json={"id": family_member["id"], "type": "family"},
                headers=headers,
            )

        await client.delete(f"/api/family/{family_member['id']}", headers=auth_headers)

        response = await client.get("/api/active-member", headers=tablet)
        assert response.json()["active_member"] == {"id": user.id, "type": "user", "label": "Self"}
    @pytest.mark.asyncio
    async def test_self_member_cannot_be_deleted(self, client, auth_headers):
        await client.post("/api/onboarding/profile", json={"full_name": "Asha"}, headers=auth_headers)
        members = (await client.get("/api/family", headers=auth_headers)).json()["items"]
        self_row = next(m for m in members if m["relation"] == "Self")

        response = await client.delete(f"/api/family/{self_row['id']}", headers=auth_headers)
        assert response.status_code == 400
