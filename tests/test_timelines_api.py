"""Tests for project timelines, tasks and milestones."""

from typing import Any, Dict

import pytest
from httpx import AsyncClient

from fakes import FakeSupabase


async def _project(client: AsyncClient, name: str = "Tower") -> Dict[str, Any]:
    response = await client.post("/api/projects", json={"name": name})
    assert response.status_code == 201, response.text
    return response.json()


async def _timeline(client: AsyncClient, **body: Any) -> Dict[str, Any]:
    project = await _project(client)
    payload = {"startDate": "2026-03-01", "endDate": "2026-03-31", **body}
    response = await client.post(f"/api/projects/{project['id']}/timeline", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["timeline"]


# ===================================================================
# Project timeline
# ===================================================================


class TestProjectTimeline:

    @pytest.mark.anyio
    async def test_missing_project(self, client: AsyncClient) -> None:
        response = await client.get("/api/projects/42/timeline")
        assert response.status_code == 404
        assert response.json() == {"error": "Project not found"}

    @pytest.mark.anyio
    async def test_lookup_without_timeline(self, client: AsyncClient) -> None:
        project = await _project(client)
        data = (await client.get(f"/api/projects/{project['id']}/timeline")).json()
        assert data["exists"] is False
        assert data["message"] == "No timeline found for this project"
        assert data["timeline"] is None

    @pytest.mark.anyio
    async def test_create_defaults(self, client: AsyncClient) -> None:
        project = await _project(client)
        response = await client.post(f"/api/projects/{project['id']}/timeline", json={
            "startDate": "2026-03-01", "endDate": "2026-03-31",
        })
        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Timeline created successfully"
        timeline = body["timeline"]
        assert timeline["projectId"] == project["id"]
        assert timeline["duration"] == 30
        assert timeline["workingDays"]["friday"] is True
        assert timeline["workingDays"]["saturday"] is False
        assert timeline["holidays"] == []
        assert timeline["status"] == "PLANNING"
        assert timeline["milestones"] == [] and timeline["tasks"] == []

    @pytest.mark.anyio
    async def test_open_ended_timeline_has_no_duration(self, client: AsyncClient) -> None:
        project = await _project(client)
        response = await client.post(f"/api/projects/{project['id']}/timeline", json={"startDate": "2026-03-01"})
        assert response.json()["timeline"]["duration"] is None

    @pytest.mark.anyio
    async def test_start_date_required(self, client: AsyncClient) -> None:
        project = await _project(client)
        response = await client.post(f"/api/projects/{project['id']}/timeline", json={})
        assert response.status_code == 400

    @pytest.mark.anyio
    async def test_end_before_start(self, client: AsyncClient) -> None:
        project = await _project(client)
        response = await client.post(f"/api/projects/{project['id']}/timeline", json={
            "startDate": "2026-03-10", "endDate": "2026-03-01",
        })
        assert response.status_code == 400
        assert response.json() == {"error": "End date cannot be before start date"}

    @pytest.mark.anyio
    async def test_second_timeline_conflicts(self, client: AsyncClient) -> None:
        timeline = await _timeline(client)
        response = await client.post(f"/api/projects/{timeline['projectId']}/timeline", json={
            "startDate": "2026-04-01",
        })
        assert response.status_code == 409
        assert response.json() == {"error": "Timeline already exists for this project"}

    @pytest.mark.anyio
    async def test_update_recomputes_duration(self, client: AsyncClient) -> None:
        timeline = await _timeline(client)
        response = await client.put(f"/api/projects/{timeline['projectId']}/timeline", json={
            "endDate": "2026-04-10", "status": "IN_PROGRESS", "progress": 15,
        })
        body = response.json()
        assert body["message"] == "Timeline updated successfully"
        assert body["timeline"]["duration"] == 40
        assert body["timeline"]["status"] == "IN_PROGRESS"
        assert body["timeline"]["progress"] == 15

    @pytest.mark.anyio
    async def test_update_without_timeline(self, client: AsyncClient) -> None:
        project = await _project(client)
        response = await client.put(f"/api/projects/{project['id']}/timeline", json={"progress": 5})
        assert response.status_code == 404
        assert response.json() == {"error": "Timeline not found for this project"}

    @pytest.mark.anyio
    async def test_delete_cascades(self, client: AsyncClient, fake: FakeSupabase) -> None:
        timeline = await _timeline(client)
        await client.post(f"/api/timeline/{timeline['id']}/milestones", json={"name": "M", "dueDate": "2026-03-15"})
        await client.post(f"/api/timeline/{timeline['id']}/tasks", json={
            "name": "T", "plannedStart": "2026-03-02", "duration": 3,
        })
        response = await client.delete(f"/api/projects/{timeline['projectId']}/timeline")
        assert response.json() == {"message": "Project timeline deleted successfully"}
        assert fake.tables["project_timelines"] == []
        assert fake.tables["project_tasks"] == []
        assert fake.tables["project_milestones"] == []


# ===================================================================
# Timeline by id
# ===================================================================


class TestTimelineById:

    @pytest.mark.anyio
    async def test_get_missing(self, client: AsyncClient) -> None:
        response = await client.get("/api/timeline/nope")
        assert response.status_code == 404
        assert response.json() == {"error": "Timeline not found"}

    @pytest.mark.anyio
    async def test_get_includes_milestones_and_tasks(self, client: AsyncClient) -> None:
        timeline = await _timeline(client)
        tid = timeline["id"]
        late = (await client.post(f"/api/timeline/{tid}/milestones", json={
            "name": "Handover", "dueDate": "2026-03-30",
        })).json()["milestone"]
        early = (await client.post(f"/api/timeline/{tid}/milestones", json={
            "name": "Foundation", "dueDate": "2026-03-10",
        })).json()["milestone"]
        await client.post(f"/api/timeline/{tid}/tasks", json={
            "name": "Pour", "plannedStart": "2026-03-05", "duration": 2, "milestoneId": early["id"],
        })
        await client.post(f"/api/timeline/{tid}/tasks", json={
            "name": "Dig", "plannedStart": "2026-03-01", "duration": 4, "milestoneId": early["id"],
        })

        data = (await client.get(f"/api/timeline/{tid}")).json()
        assert [m["name"] for m in data["milestones"]] == ["Foundation", "Handover"]
        assert [t["name"] for t in data["milestones"][0]["tasks"]] == ["Dig", "Pour"]
        assert data["milestones"][1]["id"] == late["id"]
        assert data["milestones"][1]["tasks"] == []
        assert [t["name"] for t in data["tasks"]] == ["Dig", "Pour"]

    @pytest.mark.anyio
    async def test_update_and_delete(self, client: AsyncClient) -> None:
        timeline = await _timeline(client)
        response = await client.put(f"/api/timeline/{timeline['id']}", json={
            "startDate": "2026-03-11", "holidays": ["2026-03-20"],
        })
        assert response.json()["timeline"]["duration"] == 20
        assert response.json()["timeline"]["holidays"] == ["2026-03-20"]

        response = await client.delete(f"/api/timeline/{timeline['id']}")
        assert response.json() == {"message": "Timeline deleted successfully"}
        assert (await client.get(f"/api/timeline/{timeline['id']}")).status_code == 404


# ===================================================================
# Tasks
# ===================================================================


class TestTasks:

    @pytest.mark.anyio
    async def test_create_defaults(self, client: AsyncClient) -> None:
        timeline = await _timeline(client)
        response = await client.post(f"/api/timeline/{timeline['id']}/tasks", json={
            "name": "Wiring", "plannedStart": "2026-03-02", "duration": 5, "milestoneId": "",
        })
        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Task created successfully"
        task = body["task"]
        assert task["plannedEnd"] == "2026-03-07"
        assert task["taskType"] == "CONSTRUCTION"
        assert task["priority"] == "MEDIUM"
        assert task["status"] == "PLANNING"
        assert task["milestoneId"] is None
        assert task["timelineId"] == timeline["id"]

    @pytest.mark.anyio
    async def test_create_requires_fields(self, client: AsyncClient) -> None:
        timeline = await _timeline(client)
        response = await client.post(f"/api/timeline/{timeline['id']}/tasks", json={"name": "No dates"})
        assert response.status_code == 400

    @pytest.mark.anyio
    async def test_create_in_missing_timeline(self, client: AsyncClient) -> None:
        response = await client.post("/api/timeline/ghost/tasks", json={
            "name": "Lost", "plannedStart": "2026-03-02", "duration": 1,
        })
        assert response.status_code == 404
        assert response.json() == {"error": "Timeline not found"}

    @pytest.mark.anyio
    async def test_milestone_must_belong_to_timeline(self, client: AsyncClient) -> None:
        first = await _timeline(client)
        second = await _timeline(client)
        milestone = (await client.post(f"/api/timeline/{first['id']}/milestones", json={
            "name": "Elsewhere", "dueDate": "2026-03-20",
        })).json()["milestone"]
        response = await client.post(f"/api/timeline/{second['id']}/tasks", json={
            "name": "Mixed", "plannedStart": "2026-03-02", "duration": 1, "milestoneId": milestone["id"],
        })
        assert response.status_code == 404
        assert response.json() == {"error": "Milestone not found"}

    @pytest.mark.anyio
    async def test_update_moves_planned_end(self, client: AsyncClient) -> None:
        timeline = await _timeline(client)
        task = (await client.post(f"/api/timeline/{timeline['id']}/tasks", json={
            "name": "Roof", "plannedStart": "2026-03-02", "duration": 5,
        })).json()["task"]
        url = f"/api/timeline/{timeline['id']}/tasks/{task['id']}"

        body = (await client.put(url, json={"plannedStart": "2026-03-10"})).json()
        assert body["message"] == "Task updated successfully"
        assert body["task"]["plannedEnd"] == "2026-03-15"

        body = (await client.put(url, json={"duration": 2, "priority": "CRITICAL", "progress": 50})).json()
        assert body["task"]["plannedEnd"] == "2026-03-12"
        assert body["task"]["priority"] == "CRITICAL"
        assert body["task"]["progress"] == 50

    @pytest.mark.anyio
    async def test_task_scoped_to_timeline(self, client: AsyncClient) -> None:
        first = await _timeline(client)
        second = await _timeline(client)
        task = (await client.post(f"/api/timeline/{first['id']}/tasks", json={
            "name": "Scoped", "plannedStart": "2026-03-02", "duration": 1,
        })).json()["task"]
        response = await client.put(f"/api/timeline/{second['id']}/tasks/{task['id']}", json={"name": "x"})
        assert response.status_code == 404
        assert response.json() == {"error": "Task not found"}
        response = await client.delete(f"/api/timeline/{second['id']}/tasks/{task['id']}")
        assert response.status_code == 404

    @pytest.mark.anyio
    async def test_list_and_delete(self, client: AsyncClient) -> None:
        timeline = await _timeline(client)
        tid = timeline["id"]
        later = (await client.post(f"/api/timeline/{tid}/tasks", json={
            "name": "Paint", "plannedStart": "2026-03-20", "duration": 3,
        })).json()["task"]
        await client.post(f"/api/timeline/{tid}/tasks", json={
            "name": "Frame", "plannedStart": "2026-03-03", "duration": 3,
        })
        assert [t["name"] for t in (await client.get(f"/api/timeline/{tid}/tasks")).json()] == ["Frame", "Paint"]

        response = await client.delete(f"/api/timeline/{tid}/tasks/{later['id']}")
        assert response.json() == {"message": "Task deleted successfully"}
        assert [t["name"] for t in (await client.get(f"/api/timeline/{tid}/tasks")).json()] == ["Frame"]


# ===================================================================
# Milestones
# ===================================================================


class TestMilestones:

    @pytest.mark.anyio
    async def test_create(self, client: AsyncClient) -> None:
        timeline = await _timeline(client)
        response = await client.post(f"/api/timeline/{timeline['id']}/milestones", json={
            "name": "Topping out", "dueDate": "2026-03-25", "dependsOn": ["m-1"],
        })
        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Milestone created successfully"
        assert body["milestone"]["dependsOn"] == ["m-1"]
        assert body["milestone"]["status"] == "PLANNING"
        assert body["milestone"]["tasks"] == []

    @pytest.mark.anyio
    async def test_create_requires_due_date(self, client: AsyncClient) -> None:
        timeline = await _timeline(client)
        response = await client.post(f"/api/timeline/{timeline['id']}/milestones", json={"name": "Undated"})
        assert response.status_code == 400

    @pytest.mark.anyio
    async def test_update(self, client: AsyncClient) -> None:
        timeline = await _timeline(client)
        milestone = (await client.post(f"/api/timeline/{timeline['id']}/milestones", json={
            "name": "Inspection", "dueDate": "2026-03-25",
        })).json()["milestone"]
        response = await client.put(f"/api/timeline/{timeline['id']}/milestones/{milestone['id']}", json={
            "status": "COMPLETED", "progress": 100, "dueDate": "2026-03-27",
        })
        body = response.json()
        assert body["message"] == "Milestone updated successfully"
        assert body["milestone"]["status"] == "COMPLETED"
        assert body["milestone"]["dueDate"] == "2026-03-27"

    @pytest.mark.anyio
    async def test_update_missing(self, client: AsyncClient) -> None:
        timeline = await _timeline(client)
        response = await client.put(f"/api/timeline/{timeline['id']}/milestones/none", json={"progress": 1})
        assert response.status_code == 404
        assert response.json() == {"error": "Milestone not found"}

    @pytest.mark.anyio
    async def test_delete_detaches_tasks(self, client: AsyncClient) -> None:
        timeline = await _timeline(client)
        tid = timeline["id"]
        milestone = (await client.post(f"/api/timeline/{tid}/milestones", json={
            "name": "Phase 1", "dueDate": "2026-03-15",
        })).json()["milestone"]
        await client.post(f"/api/timeline/{tid}/tasks", json={
            "name": "Survey", "plannedStart": "2026-03-02", "duration": 1, "milestoneId": milestone["id"],
        })
        listed = (await client.get(f"/api/timeline/{tid}/milestones")).json()
        assert [t["name"] for t in listed[0]["tasks"]] == ["Survey"]

        response = await client.delete(f"/api/timeline/{tid}/milestones/{milestone['id']}")
        assert response.json() == {"message": "Milestone deleted successfully"}
        tasks = (await client.get(f"/api/timeline/{tid}/tasks")).json()
        assert tasks[0]["milestoneId"] is None
        assert (await client.get(f"/api/timeline/{tid}/milestones")).json() == []
