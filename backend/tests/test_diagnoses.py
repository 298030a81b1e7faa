"""Tests for diagnosis API routes."""

import pytest


class TestListDiagnoses:
    @pytest.mark.asyncio
    async def test_member_without_diagnoses_gets_empty_list(self, client, auth_headers, family_member):
        response = await client.get(
            f"/api/diagnoses?member_id={family_member['id']}",
            headers=auth_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["items"] == []
        assert data["total"] == 0
        assert data["member_id"] == family_member["id"]
        assert data["empty_message"] == "No diagnoses yet"

    @pytest.mark.asyncio
    async def test_defaults_to_active_member(self, client, user, auth_headers, family_member):
        await client.post("/api/diagnoses", json={"title": "Migraine"}, headers=auth_headers)
        await client.post(
            "/api/diagnoses",
            json={"title": "Hypertension", "member_id": family_member["id"]},
            headers=auth_headers,
        )

        response = await client.get("/api/diagnoses", headers=auth_headers)
        data = response.json()
        assert data["member_id"] == user.id
        assert [d["title"] for d in data["items"]] == ["Migraine"]

        await client.put(
            "/api/active-member",
            json={"id": family_member["id"], "type": "family"},
            headers=auth_headers,
        )
        response = await client.get("/api/diagnoses", headers=auth_headers)
        assert [d["title"] for d in response.json()["items"]] == ["Hypertension"]

    @pytest.mark.asyncio
    async def test_ordered_by_diagnosis_date_newest_first(self, client, auth_headers):
        for title, when in [("Old", "2019-01-01"), ("New", "2024-05-01"), ("Mid", "2021-03-10")]:
            await client.post(
                "/api/diagnoses",
                json={"title": title, "diagnosed_on": when},
                headers=auth_headers,
            )
        await client.post("/api/diagnoses", json={"title": "Undated"}, headers=auth_headers)

        response = await client.get("/api/diagnoses", headers=auth_headers)
        assert [d["title"] for d in response.json()["items"]] == ["New", "Mid", "Old", "Undated"]

    @pytest.mark.asyncio
    async def test_other_accounts_member_is_404(self, client, other_headers, family_member):
        response = await client.get(
            f"/api/diagnoses?member_id={family_member['id']}",
            headers=other_headers,
        )
        assert response.status_code == 404
        assert response.json()["detail"] == "Member not found"


class TestDiagnosisCrud:
    @pytest.mark.asyncio
    async def test_create_defaults(self, client, user, auth_headers):
        response = await client.post(
            "/api/diagnoses",
            json={"title": " Asthma ", "severity": "Mild"},
            headers=auth_headers,
        )
        assert response.status_code == 201
        data = response.json()
        assert data["title"] == "Asthma"
        assert data["status"] == "Active"
        assert data["severity"] == "Mild"
        assert data["member_id"] == user.id

    @pytest.mark.asyncio
    async def test_create_rejects_bad_status(self, client, auth_headers):
        response = await client.post(
            "/api/diagnoses",
            json={"title": "Asthma", "status": "Cured"},
            headers=auth_headers,
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_create_rejects_resolution_before_diagnosis(self, client, auth_headers):
        response = await client.post(
            "/api/diagnoses",
            json={"title": "Flu", "diagnosed_on": "2024-02-10", "resolved_on": "2024-02-01"},
            headers=auth_headers,
        )

    @pytest.mark.asyncio
    async def test_update_rejects_resolution_before_stored_diagnosis_date(self, client, auth_headers):
        created = (
            await client.post(
                "/api/diagnoses",
                json={"title": "Flu", "diagnosed_on": "2024-02-10"},
                headers=auth_headers,
            )
        ).json()

        response = await client.patch(
            f"/api/diagnoses/{created['id']}",
            json={"resolved_on": "2024-02-01"},
            headers=auth_headers,
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Resolved date cannot be before the diagnosis date"

        response = await client.patch(
            f"/api/diagnoses/{created['id']}",
            json={"diagnosed_on": "2024-03-01", "resolved_on": "2024-02-01"},
            headers=auth_headers,
        )
        assert response.status_code == 422

        response = await client.get(f"/api/diagnoses/{created['id']}", headers=auth_headers)
        assert response.json()["resolved_on"] is None
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_update_and_delete(self, client, auth_headers):
        created = (
            await client.post("/api/diagnoses", json={"title": "Flu"}, headers=auth_headers)
        ).json()

        response = await client.patch(
            f"/api/diagnoses/{created['id']}",
            json={"status": "Resolved", "resolved_on": "2024-03-01"},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert response.json()["status"] == "Resolved"
        assert response.json()["title"] == "Flu"

        response = await client.delete(f"/api/diagnoses/{created['id']}", headers=auth_headers)
        assert response.status_code == 204

        response = await client.get(f"/api/diagnoses/{created['id']}", headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["detail"] == "Diagnosis not found"

    @pytest.mark.asyncio
    async def test_other_account_cannot_read_record(self, client, auth_headers, other_headers):
        created = (
            await client.post("/api/diagnoses", json={"title": "Flu"}, headers=auth_headers)
        ).json()

        response = await client.get(f"/api/diagnoses/{created['id']}", headers=other_headers)
        assert response.status_code == 404
