from fastapi import APIRouter, Depends, Query
from quickbom.database.supabase_client import get_supabase
from quickbom.modules.projects.schemas import ProjectCreate, ProjectUpdate, ProjectResponse, ProjectStatus
from quickbom.modules.projects.service import ProjectService
from quickbom.modules.templates.boq import BoqResponse
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/projects", tags=["projects"])


def get_project_service(supabase: Client = Depends(get_supabase)) -> ProjectService:
    return ProjectService(supabase)


@router.get("", response_model=List[ProjectResponse])
async def list_projects(
    status: Optional[ProjectStatus] = None,
    client_id: Optional[int] = Query(None, alias="clientId"),
    limit: int = 100,
    offset: int = 0,
    service: ProjectService = Depends(get_project_service)
):
    return service.list_projects(
        status=status.value if status else None, client_id=client_id, limit=limit, offset=offset
    )


@router.post("", response_model=ProjectResponse, status_code=201)
async def create_project(
    data: ProjectCreate,
    service: ProjectService = Depends(get_project_service)
):
    return service.create_project(data)


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: int,
    service: ProjectService = Depends(get_project_service)
):
    return service.get_project_by_id(project_id)


@router.get("/{project_id}/boq", response_model=BoqResponse)
async def get_project_boq(
    project_id: int,
    service: ProjectService = Depends(get_project_service)
):
    """Consolidated bill of quantity for the project's template"""
    return service.get_boq(project_id)


@router.put("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: int,
    data: ProjectUpdate,
    service: ProjectService = Depends(get_project_service)
):
    return service.update_project(project_id, data)


@router.delete("/{project_id}", status_code=204)
async def delete_project(
    project_id: int,
    service: ProjectService = Depends(get_project_service)
):
    service.delete_project(project_id)
    return None
