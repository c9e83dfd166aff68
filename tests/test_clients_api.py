"""Tests for the /api/clients endpoints."""

from typing import Any, Dict

import pytest
from httpx import AsyncClient

from fakes import FakeSupabase


def _client_payload(**overrides: Any) -> Dict[str, Any]:
    payload = {
        "contactPerson": "Siti Rahma",
        "contactEmail": "siti@example.com",
        "contactPhone": "+62 811 000 111",
        "address": "Jl. Merdeka 1",
        "city": "Bandung",
        "province": "Jawa Barat",
    }
    payload.update(overrides)
    return payload


async def _create_client(client: AsyncClient, **overrides: Any) -> Dict[str, Any]:
    response = await client.post("/api/clients", json=_client_payload(**overrides))
    assert response.status_code == 201, response.text
    return response.json()


# ===================================================================
# Client CRUD
# ===================================================================


class TestClientCrud:

    @pytest.mark.anyio
    async def test_create_applies_defaults(self, client: AsyncClient) -> None:
        data = await _create_client(client)
        assert data["clientType"] == "INDIVIDUAL"
        assert data["category"] == "RESIDENTIAL"
        assert data["status"] == "ACTIVE"
        assert data["country"] == "Indonesia"
        assert data["totalProjects"] == 0
        assert data["totalContractValue"] == 0

    @pytest.mark.anyio
    async def test_create_requires_contact_fields(self, client: AsyncClient) -> None:
        payload = _client_payload()
        del payload["province"]
        response = await client.post("/api/clients", json=payload)
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request body"

    @pytest.mark.anyio
    async def test_duplicate_email(self, client: AsyncClient) -> None:
        await _create_client(client)
        response = await client.post("/api/clients", json=_client_payload(contactPerson="Other"))
        assert response.status_code == 400
        assert response.json() == {"error": "Contact email already exists"}

    @pytest.mark.anyio
    async def test_get_missing(self, client: AsyncClient) -> None:
        response = await client.get("/api/clients/99")
        assert response.status_code == 404
        assert response.json() == {"error": "Client not found"}

    @pytest.mark.anyio
    async def test_update_fields(self, client: AsyncClient) -> None:
        created = await _create_client(client)
        response = await client.put(f"/api/clients/{created['id']}", json={
            "clientType": "COMPANY", "companyName": "PT Maju", "creditLimit": 25000,
        })
        assert response.status_code == 200
        data = response.json()
        assert data["clientType"] == "COMPANY"
        assert data["companyName"] == "PT Maju"
        assert data["creditLimit"] == 25000
        assert data["contactPerson"] == "Siti Rahma"

    @pytest.mark.anyio
    async def test_update_to_taken_email(self, client: AsyncClient) -> None:
        await _create_client(client)
        other = await _create_client(client, contactEmail="andi@example.com")
        response = await client.put(f"/api/clients/{other['id']}", json={"contactEmail": "siti@example.com"})
        assert response.status_code == 400
        assert response.json() == {"error": "Contact email already taken by another client"}

    @pytest.mark.anyio
    async def test_update_keeping_own_email(self, client: AsyncClient) -> None:
        created = await _create_client(client)
        response = await client.put(f"/api/clients/{created['id']}", json={
            "contactEmail": "siti@example.com", "city": "Jakarta",
        })
        assert response.status_code == 200
        assert response.json()["city"] == "Jakarta"

    @pytest.mark.anyio
    async def test_delete(self, client: AsyncClient) -> None:
        created = await _create_client(client)
        response = await client.delete(f"/api/clients/{created['id']}")
        assert response.json() == {"message": "Client deleted successfully"}
        assert (await client.get(f"/api/clients/{created['id']}")).status_code == 404

    @pytest.mark.anyio
    async def test_delete_blocked_by_projects(self, client: AsyncClient) -> None:
        created = await _create_client(client)
        await client.post("/api/projects", json={"name": "Villa", "clientId": created["id"]})
        response = await client.delete(f"/api/clients/{created['id']}")
        assert response.status_code == 400
        assert response.json() == {
            "error": "Cannot delete client with existing projects. "
                     "Please reassign or delete related projects first."
        }


# ===================================================================
# Filters and project statistics
# ===================================================================


class TestClientListing:

    @pytest.mark.anyio
    async def test_filters(self, client: AsyncClient) -> None:
        await _create_client(client, contactEmail="a@example.com", clientType="COMPANY", category="COMMERCIAL")
        await _create_client(client, contactEmail="b@example.com", status="INACTIVE")

        by_type = (await client.get("/api/clients", params={"type": "COMPANY"})).json()
        assert [c["contactEmail"] for c in by_type] == ["a@example.com"]

        by_status = (await client.get("/api/clients", params={"status": "INACTIVE"})).json()
        assert [c["contactEmail"] for c in by_status] == ["b@example.com"]

        by_category = (await client.get("/api/clients", params={"category": "COMMERCIAL"})).json()
        assert [c["contactEmail"] for c in by_category] == ["a@example.com"]

        everything = (await client.get("/api/clients", params={"type": "all", "status": "all"})).json()
        assert [c["contactEmail"] for c in everything] == ["b@example.com", "a@example.com"]

    @pytest.mark.anyio
    async def test_search_is_case_insensitive(self, client: AsyncClient) -> None:
        await _create_client(client, contactEmail="a@example.com", companyName="PT Bangun Jaya")
        await _create_client(client, contactEmail="b@example.com", city="Surabaya")
        await _create_client(client, contactEmail="c@example.com", contactPerson="Joko")

        assert [c["contactEmail"] for c in (await client.get(
            "/api/clients", params={"search": "bangun"}
        )).json()] == ["a@example.com"]
        assert [c["contactEmail"] for c in (await client.get(
            "/api/clients", params={"search": "SURA"}
        )).json()] == ["b@example.com"]
        assert [c["contactEmail"] for c in (await client.get(
            "/api/clients", params={"search": "joko"}
        )).json()] == ["c@example.com"]

    @pytest.mark.anyio
    async def test_project_statistics(self, client: AsyncClient, catalog: FakeSupabase) -> None:
        owner = await _create_client(client)
        template = (await client.post("/api/templates", json={
            "name": "Unit", "assemblies": [{"assemblyId": 2, "quantity": 2}],
        })).json()
        for name, status in [("A", "IN_PROGRESS"), ("B", "APPROVED"), ("C", "COMPLETED"), ("D", "CANCELLED")]:
            response = await client.post("/api/projects", json={
                "name": name, "status": status, "clientId": owner["id"], "fromTemplateId": template["id"],
            })
            assert response.status_code == 201

        listed = (await client.get("/api/clients")).json()[0]
        assert listed["totalProjects"] == 4
        assert listed["activeProjects"] == 2
        assert listed["completedProjects"] == 1
        assert listed["totalContractValue"] == pytest.approx(1200)
        assert listed["outstandingBalance"] == pytest.approx(600)

        detail = (await client.get(f"/api/clients/{owner['id']}")).json()
        assert detail["totalProjects"] == 4
        assert sorted(p["name"] for p in detail["projects"]) == ["A", "B", "C", "D"]
        assert all(p["totalPrice"] == pytest.approx(300) for p in detail["projects"])
