from supabase import Client
from quickbom.modules.projects.schemas import ProjectCreate, ProjectUpdate, ProjectResponse
from quickbom.modules.templates.boq import BoqResponse
from quickbom.modules.templates.service import TemplateService
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

DATE_FIELDS = ("start_date", "end_date", "actual_start", "actual_end")
ENUM_FIELDS = ("status", "priority")


class ProjectService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _check_client(self, client_id: Optional[int]) -> None:
        if client_id is None:
            return
        result = self.supabase.table("clients").select("id").eq("id", client_id).maybe_single().execute()
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="Client not found")

    def _template_price(self, template_id: Optional[int]) -> float:
        """Total material cost of a template; 404 when it does not exist."""
        if template_id is None:
            return 0
        return TemplateService(self.supabase).get_boq(template_id).total_cost

    def _row_data(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Serialise enums and dates for PostgREST."""
        out = dict(data)
        for key in ENUM_FIELDS:
            if out.get(key) is not None:
                out[key] = out[key].value
        for key in DATE_FIELDS:
            if out.get(key) is not None:
                out[key] = out[key].isoformat()
        return out

    def create_project(self, data: ProjectCreate) -> ProjectResponse:
        try:
            self._check_client(data.client_id)
            row = self._row_data(data.model_dump())
            row["total_price"] = self._template_price(data.from_template_id)
            result = self.supabase.table("projects").insert(row).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create project")
            logger.info(f"Created project {result.data[0]['id']}")
            return ProjectResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating project: {e}")
            raise HTTPException(status_code=500, detail="Failed to create project")

    def get_project_by_id(self, project_id: int) -> ProjectResponse:
        try:
            result = self.supabase.table("projects").select("*").eq("id", project_id).maybe_single().execute()
            if not result or not result.data:
                raise HTTPException(status_code=404, detail="Project not found")
            return ProjectResponse(**result.data)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching project {project_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch project")

    def list_projects(
        self,
        status: Optional[str] = None,
        client_id: Optional[int] = None,
        limit: int = 100,
        offset: int = 0
    ) -> List[ProjectResponse]:
        try:
            query = self.supabase.table("projects").select("*")
            if status:
                query = query.eq("status", status)
            if client_id is not None:
                query = query.eq("client_id", client_id)
            result = query.order("created_at", desc=True).limit(limit).offset(offset).execute()
            return [ProjectResponse(**row) for row in result.data or []]
        except Exception as e:
            logger.error(f"Error listing projects: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch projects")

    def update_project(self, project_id: int, data: ProjectUpdate) -> ProjectResponse:
        try:
            update_data = data.model_dump(exclude_unset=True)
            if not update_data:
                return self.get_project_by_id(project_id)
            if "client_id" in update_data:
                self._check_client(update_data["client_id"])
            row = self._row_data(update_data)
            if "from_template_id" in update_data:
                row["total_price"] = self._template_price(update_data["from_template_id"])
            result = self.supabase.table("projects")\
                .update(row)\
                .eq("id", project_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Project not found")
            return ProjectResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating project {project_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update project")

    def delete_project(self, project_id: int) -> None:
        self.get_project_by_id(project_id)
        try:
            self.supabase.table("projects").delete().eq("id", project_id).execute()
            logger.info(f"Deleted project {project_id}")
        except Exception as e:
            logger.error(f"Error deleting project {project_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete project")

    def get_boq(self, project_id: int) -> BoqResponse:
        """BOQ of the template the project was created from; empty when it has none."""
        project = self.get_project_by_id(project_id)
        if project.from_template_id is None:
            return BoqResponse()
        return TemplateService(self.supabase).get_boq(project.from_template_id)
