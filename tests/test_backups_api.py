"""Tests for the /api/backups endpoints (Supabase Storage backend)."""

import json
from datetime import datetime, timezone

import pytest
from httpx import AsyncClient

from fakes import FakeSupabase
from quickbom.main import app
from quickbom.modules.backups.routes import get_backup_service
from quickbom.modules.backups.service import BackupService, make_backup_id, timestamp_from_id
from quickbom.modules.backups.storage import SupabaseStorage


@pytest.fixture
def backups(catalog: FakeSupabase):
    """Route backups through the fake's storage regardless of local AWS settings."""
    app.dependency_overrides[get_backup_service] = lambda: BackupService(
        catalog, storage=SupabaseStorage(catalog, "backups")
    )
    yield catalog.storage.from_("backups")
    app.dependency_overrides.pop(get_backup_service, None)


def _store(bucket, backup_id: str, **tables) -> None:
    payload = {"version": "1.0", "timestamp": "2020-01-01T00:00:00+00:00", **tables}
    bucket.upload(f"{backup_id}.json", json.dumps(payload).encode("utf-8"))


class TestBackupIds:

    def test_named_backup_id_is_sanitised(self) -> None:
        now = datetime(2026, 5, 4, 13, 7, 9, 123456, tzinfo=timezone.utc)
        assert make_backup_id("Before import!", now) == "manual_Before_import__2026-05-04T13-07-09-123Z"

    def test_unnamed_backup_is_daily(self) -> None:
        now = datetime(2026, 5, 4, 13, 7, 9, tzinfo=timezone.utc)
        assert make_backup_id(None, now) == "daily_backup_2026-05-04"

    def test_timestamp_round_trips_through_id(self) -> None:
        now = datetime(2026, 5, 4, 13, 7, 9, 123000, tzinfo=timezone.utc)
        assert timestamp_from_id(make_backup_id("x", now)) == now
        assert timestamp_from_id("daily_backup_2026-05-04") == datetime(2026, 5, 4, tzinfo=timezone.utc)
        assert timestamp_from_id("something_else") is None


class TestBackups:

    @pytest.mark.anyio
    async def test_create_named_backup(self, client: AsyncClient, backups) -> None:
        response = await client.post("/api/backups", json={"name": "pre release"})
        assert response.status_code == 201
        data = response.json()
        assert data["id"].startswith("manual_pre_release_")
        assert data["status"] == "success"
        assert data["size"] > 0
        assert f"{data['id']}.json" in backups.files

    @pytest.mark.anyio
    async def test_create_daily_backup(self, client: AsyncClient, backups) -> None:
        response = await client.post("/api/backups")
        today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        assert response.json()["id"] == f"daily_backup_{today}"

    @pytest.mark.anyio
    async def test_get_backup_contents(self, client: AsyncClient, backups) -> None:
        created = (await client.post("/api/backups", json={"name": "snap"})).json()
        response = await client.get(f"/api/backups/{created['id']}")
        assert response.status_code == 200
        data = response.json()
        assert [m["name"] for m in data["materials"]] == ["Cable 2.5mm", "Breaker 16A", "PVC Pipe"]
        assert len(data["assemblyMaterials"]) == 4

    @pytest.mark.anyio
    async def test_get_missing_backup(self, client: AsyncClient, backups) -> None:
        response = await client.get("/api/backups/nope")
        assert response.status_code == 404
        assert response.json() == {"error": "Backup not found"}

    @pytest.mark.anyio
    async def test_list_newest_first(self, client: AsyncClient, backups) -> None:
        _store(backups, "daily_backup_2020-01-01")
        _store(backups, "daily_backup_2021-06-30")
        created = (await client.post("/api/backups", json={"name": "latest"})).json()
        response = await client.get("/api/backups")
        assert [b["id"] for b in response.json()] == [
            created["id"], "daily_backup_2021-06-30", "daily_backup_2020-01-01",
        ]

    @pytest.mark.anyio
    async def test_stats(self, client: AsyncClient, backups) -> None:
        _store(backups, "daily_backup_2020-01-01")
        await client.post("/api/backups", json={"name": "now"})
        data = (await client.get("/api/backups/stats")).json()
        assert data["totalBackups"] == 2
        assert data["recentBackups"] == 1
        assert data["totalSize"] > 0
        assert data["lastBackup"] is not None

    @pytest.mark.anyio
    async def test_cleanup_removes_expired(self, client: AsyncClient, backups) -> None:
        _store(backups, "daily_backup_2020-01-01")
        _store(backups, "daily_backup_2020-01-02")
        created = (await client.post("/api/backups", json={"name": "keep"})).json()
        response = await client.post("/api/backups/cleanup")
        assert response.json() == {"deleted": 2}
        assert list(backups.files) == [f"{created['id']}.json"]

    @pytest.mark.anyio
    async def test_delete(self, client: AsyncClient, backups) -> None:
        _store(backups, "daily_backup_2020-01-01")
        response = await client.delete("/api/backups/daily_backup_2020-01-01")
        assert response.status_code == 200
        assert backups.files == {}
        assert (await client.delete("/api/backups/daily_backup_2020-01-01")).status_code == 404

    @pytest.mark.anyio
    async def test_restore(self, client: AsyncClient, backups, catalog: FakeSupabase) -> None:
        created = (await client.post("/api/backups", json={"name": "baseline"})).json()

        await client.put("/api/materials/3", json={"price": 999})
        catalog.tables["assembly_materials"] = []

        response = await client.post(f"/api/backups/{created['id']}/restore")
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["restored"] == {"materials": 3, "assemblyCategories": 2, "assemblies": 4, "templates": 0}

        material = (await client.get("/api/materials/3")).json()
        assert material["price"] == 20
        assembly = (await client.get("/api/assemblies/3")).json()
        assert assembly["unitCost"] == pytest.approx(100)

    @pytest.mark.anyio
    async def test_restore_missing(self, client: AsyncClient, backups) -> None:
        response = await client.post("/api/backups/ghost/restore")
        assert response.status_code == 404

    @pytest.mark.anyio
    async def test_non_json_backup_is_corrupt(self, client: AsyncClient, backups) -> None:
        backups.upload("daily_backup_2020-01-01.json", b"not json at all")
        response = await client.get("/api/backups/daily_backup_2020-01-01")
        assert response.status_code == 422
        assert response.json() == {"error": "Backup file is corrupt"}

    @pytest.mark.anyio
    async def test_json_list_backup_is_corrupt(self, client: AsyncClient, backups) -> None:
        backups.upload("daily_backup_2020-01-02.json", b"[1, 2]")
        response = await client.get("/api/backups/daily_backup_2020-01-02")
        assert response.status_code == 422
        assert response.json() == {"error": "Backup file is corrupt"}

    @pytest.mark.anyio
    async def test_restore_of_corrupt_backup_fails_before_writing(
        self, client: AsyncClient, backups, catalog: FakeSupabase
    ) -> None:
        backups.upload("daily_backup_2020-01-03.json", b"[1, 2]")
        response = await client.post("/api/backups/daily_backup_2020-01-03/restore")
        assert response.status_code == 422
        assert len(catalog.tables["materials"]) == 3
