from supabase import Client
from quickbom.core.errors import is_unique_violation
from quickbom.core.time import utc_now
from quickbom.modules.timelines.schemas import (
    TimelineCreate, TimelineUpdate, TimelineResponse, ProjectTimelineLookup,
    TaskCreate, TaskUpdate, TaskResponse,
    MilestoneCreate, MilestoneUpdate, MilestoneResponse,
)
from datetime import date, timedelta
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
import logging
import uuid

logger = logging.getLogger(__name__)

TIMELINES = "project_timelines"
MILESTONES = "project_milestones"
TASKS = "project_tasks"


def span_days(start: Optional[date], end: Optional[date]) -> Optional[int]:
    """Days from start to end; 400 when end comes first."""
    if start is None or end is None:
        return None
    if end < start:
        raise HTTPException(status_code=400, detail="End date cannot be before start date")
    return (end - start).days


def _as_date(value: Any) -> Optional[date]:
    if value is None or isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


class TimelineService:
    """Project timelines with their milestones and tasks."""

    def __init__(self, supabase: Client):
        self.supabase = supabase

    # Lookups

    def _check_project(self, project_id: int) -> None:
        result = self.supabase.table("projects").select("id").eq("id", project_id).maybe_single().execute()
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="Project not found")

    def _timeline_for_project(self, project_id: int) -> Optional[Dict[str, Any]]:
        result = self.supabase.table(TIMELINES).select("*").eq("project_id", project_id).maybe_single().execute()
        return result.data if result and result.data else None

    def _timeline_row(self, timeline_id: str) -> Dict[str, Any]:
        result = self.supabase.table(TIMELINES).select("*").eq("id", timeline_id).maybe_single().execute()
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="Timeline not found")
        return result.data

    def _child_row(self, table: str, timeline_id: str, row_id: str, not_found: str) -> Dict[str, Any]:
        result = self.supabase.table(table)\
            .select("*")\
            .eq("id", row_id)\
            .eq("timeline_id", timeline_id)\
            .maybe_single()\
            .execute()
        if not result or not result.data:
            raise HTTPException(status_code=404, detail=not_found)
        return result.data

    def _tasks(self, timeline_id: str) -> List[TaskResponse]:
        result = self.supabase.table(TASKS)\
            .select("*")\
            .eq("timeline_id", timeline_id)\
            .order("planned_start")\
            .execute()
        return [TaskResponse(**row) for row in result.data or []]

    def _milestones(self, timeline_id: str, tasks: List[TaskResponse]) -> List[MilestoneResponse]:
        result = self.supabase.table(MILESTONES)\
            .select("*")\
            .eq("timeline_id", timeline_id)\
            .order("due_date")\
            .execute()
        return [
            MilestoneResponse(**row, tasks=[t for t in tasks if t.milestone_id == row["id"]])
            for row in result.data or []
        ]

    def _assemble(self, row: Dict[str, Any]) -> TimelineResponse:
        tasks = self._tasks(row["id"])
        return TimelineResponse(**row, milestones=self._milestones(row["id"], tasks), tasks=tasks)

    # Timelines

    def get_project_timeline(self, project_id: int) -> ProjectTimelineLookup:
        try:
            self._check_project(project_id)
            row = self._timeline_for_project(project_id)
            if row is None:
                return ProjectTimelineLookup(exists=False, message="No timeline found for this project")
            return ProjectTimelineLookup(exists=True, timeline=self._assemble(row))
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching timeline of project {project_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch timeline")

    def create_project_timeline(self, project_id: int, data: TimelineCreate) -> TimelineResponse:
        try:
            self._check_project(project_id)
            if self._timeline_for_project(project_id) is not None:
                raise HTTPException(status_code=409, detail="Timeline already exists for this project")
            row = data.model_dump(mode="json")
            row.update({
                "id": str(uuid.uuid4()),
                "project_id": project_id,
                "duration": span_days(data.start_date, data.end_date),
                "progress": 0,
                "status": "PLANNING",
            })
            result = self.supabase.table(TIMELINES).insert(row).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create timeline")
            logger.info(f"Created timeline {row['id']} for project {project_id}")
            return TimelineResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            if is_unique_violation(e):
                raise HTTPException(status_code=409, detail="Timeline already exists for this project")
            logger.error(f"Error creating timeline for project {project_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to create timeline")

    def _update(self, row: Dict[str, Any], data: TimelineUpdate) -> TimelineResponse:
        changes = data.model_dump(mode="json", exclude_unset=True, exclude_none=True)
        if not changes:
            return self._assemble(row)
        start = data.start_date or _as_date(row.get("start_date"))
        end = data.end_date or _as_date(row.get("end_date"))
        if "start_date" in changes or "end_date" in changes:
            changes["duration"] = span_days(start, end)
        changes["updated_at"] = utc_now()
        result = self.supabase.table(TIMELINES).update(changes).eq("id", row["id"]).execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Timeline not found")
        return self._assemble(result.data[0])

    def _delete(self, row: Dict[str, Any]) -> None:
        self.supabase.table(TASKS).delete().eq("timeline_id", row["id"]).execute()
        self.supabase.table(MILESTONES).delete().eq("timeline_id", row["id"]).execute()
        self.supabase.table(TIMELINES).delete().eq("id", row["id"]).execute()
        logger.info(f"Deleted timeline {row['id']}")

    def _require_project_timeline(self, project_id: int) -> Dict[str, Any]:
        row = self._timeline_for_project(project_id)
        if row is None:
            raise HTTPException(status_code=404, detail="Timeline not found for this project")
        return row

    def update_project_timeline(self, project_id: int, data: TimelineUpdate) -> TimelineResponse:
        try:
            return self._update(self._require_project_timeline(project_id), data)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating timeline of project {project_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update timeline")

    def delete_project_timeline(self, project_id: int) -> None:
        try:
            self._delete(self._require_project_timeline(project_id))
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error deleting timeline of project {project_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete timeline")

    def get_timeline(self, timeline_id: str) -> TimelineResponse:
        try:
            return self._assemble(self._timeline_row(timeline_id))
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching timeline {timeline_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch timeline")

    def update_timeline(self, timeline_id: str, data: TimelineUpdate) -> TimelineResponse:
        try:
            return self._update(self._timeline_row(timeline_id), data)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating timeline {timeline_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update timeline")

    def delete_timeline(self, timeline_id: str) -> None:
        try:
            self._delete(self._timeline_row(timeline_id))
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error deleting timeline {timeline_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete timeline")

    # Tasks

    def _check_milestone(self, timeline_id: str, milestone_id: Optional[str]) -> None:
        if milestone_id is not None:
            self._child_row(MILESTONES, timeline_id, milestone_id, "Milestone not found")

    def list_tasks(self, timeline_id: str) -> List[TaskResponse]:
        try:
            self._timeline_row(timeline_id)
            return self._tasks(timeline_id)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error listing tasks of timeline {timeline_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch tasks")

    def create_task(self, timeline_id: str, data: TaskCreate) -> TaskResponse:
        try:
            self._timeline_row(timeline_id)
            self._check_milestone(timeline_id, data.milestone_id)
            planned_end = data.planned_end or data.planned_start + timedelta(days=data.duration)
            span_days(data.planned_start, planned_end)
            row = data.model_dump(mode="json")
            row.update({
                "id": str(uuid.uuid4()),
                "timeline_id": timeline_id,
                "planned_end": planned_end.isoformat(),
            })
            result = self.supabase.table(TASKS).insert(row).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create task")
            return TaskResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating task in timeline {timeline_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to create task")

    def update_task(self, timeline_id: str, task_id: str, data: TaskUpdate) -> TaskResponse:
        """Partial update; planned_end follows planned_start/duration unless given."""
        try:
            existing = self._child_row(TASKS, timeline_id, task_id, "Task not found")
            changes = data.model_dump(mode="json", exclude_unset=True)
            if not changes:
                return TaskResponse(**existing)
            if "milestone_id" in changes:
                self._check_milestone(timeline_id, changes["milestone_id"])
            start = data.planned_start or _as_date(existing["planned_start"])
            if data.planned_end is not None:
                end = data.planned_end
            elif "planned_start" in changes or "duration" in changes:
                end = start + timedelta(days=data.duration or existing["duration"])
                changes["planned_end"] = end.isoformat()
            else:
                end = _as_date(existing["planned_end"])
            span_days(start, end)
            changes["updated_at"] = utc_now()
            result = self.supabase.table(TASKS).update(changes).eq("id", task_id).execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Task not found")
            return TaskResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating task {task_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update task")

    def delete_task(self, timeline_id: str, task_id: str) -> None:
        try:
            self._child_row(TASKS, timeline_id, task_id, "Task not found")
            self.supabase.table(TASKS).delete().eq("id", task_id).execute()
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error deleting task {task_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete task")

    # Milestones

    def list_milestones(self, timeline_id: str) -> List[MilestoneResponse]:
        try:
            self._timeline_row(timeline_id)
            return self._milestones(timeline_id, self._tasks(timeline_id))
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error listing milestones of timeline {timeline_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch milestones")

    def create_milestone(self, timeline_id: str, data: MilestoneCreate) -> MilestoneResponse:
        try:
            self._timeline_row(timeline_id)
            row = data.model_dump(mode="json")
            row.update({
                "id": str(uuid.uuid4()),
                "timeline_id": timeline_id,
                "status": "PLANNING",
                "progress": 0,
            })
            result = self.supabase.table(MILESTONES).insert(row).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create milestone")
            return MilestoneResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating milestone in timeline {timeline_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to create milestone")

    def update_milestone(self, timeline_id: str, milestone_id: str, data: MilestoneUpdate) -> MilestoneResponse:
        try:
            existing = self._child_row(MILESTONES, timeline_id, milestone_id, "Milestone not found")
            changes = data.model_dump(mode="json", exclude_unset=True, exclude_none=True)
            if changes:
                changes["updated_at"] = utc_now()
                result = self.supabase.table(MILESTONES).update(changes).eq("id", milestone_id).execute()
                if not result.data:
                    raise HTTPException(status_code=404, detail="Milestone not found")
                existing = result.data[0]
            tasks = [t for t in self._tasks(timeline_id) if t.milestone_id == milestone_id]
            return MilestoneResponse(**existing, tasks=tasks)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating milestone {milestone_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update milestone")

    def delete_milestone(self, timeline_id: str, milestone_id: str) -> None:
        """Delete a milestone; its tasks stay on the timeline without one."""
        try:
            self._child_row(MILESTONES, timeline_id, milestone_id, "Milestone not found")
            self.supabase.table(TASKS).update({"milestone_id": None}).eq("milestone_id", milestone_id).execute()
            self.supabase.table(MILESTONES).delete().eq("id", milestone_id).execute()
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error deleting milestone {milestone_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete milestone")
