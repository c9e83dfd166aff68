from fastapi import APIRouter, Depends, HTTPException, Query
from quickbom.database.supabase_client import get_supabase
from quickbom.modules.assembly_groups.schemas import AssemblyGroupUpdate, AssemblyGroupDeleteResponse
from quickbom.modules.assembly_groups.selection import ValidationResult
from quickbom.modules.templates.boq import BoqResponse
from quickbom.modules.templates.schemas import (
    TemplateCreate, TemplateUpdate, TemplateResponse, TemplateSelectionRequest,
    TemplateGroupCreate, TemplateGroupResponse,
)
from quickbom.modules.templates.service import TemplateService, TemplateGroupService
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/templates", tags=["templates"])


def get_template_service(supabase: Client = Depends(get_supabase)) -> TemplateService:
    return TemplateService(supabase)


def get_template_group_service(supabase: Client = Depends(get_supabase)) -> TemplateGroupService:
    return TemplateGroupService(supabase)


@router.get("", response_model=List[TemplateResponse])
async def list_templates(service: TemplateService = Depends(get_template_service)):
    """List templates with their assemblies and costs, newest first"""
    return service.list_templates()


@router.post("", response_model=TemplateResponse, status_code=201)
async def create_template(
    data: TemplateCreate,
    service: TemplateService = Depends(get_template_service)
):
    """
    Create a template. Explicit assemblies are stored as given; otherwise an
    assemblySelections object is validated against the catalog groups and
    its selected assemblies become the template's assembly list.
    """
    return service.create_template(data)


@router.post("/validate-selection", response_model=ValidationResult)
async def validate_selection(
    body: Optional[TemplateSelectionRequest] = None,
    service: TemplateService = Depends(get_template_service)
):
    """Validate a selection against the groups defined on one template"""
    if body is None or body.template_id is None or body.selections is None:
        raise HTTPException(status_code=400, detail="templateId and selections are required")
    return service.validate_selection(body.template_id, body.selections)


@router.get("/groups", response_model=List[TemplateGroupResponse])
async def list_template_groups(
    template_id: Optional[int] = Query(None, alias="templateId"),
    service: TemplateGroupService = Depends(get_template_group_service)
):
    if template_id is None:
        raise HTTPException(status_code=400, detail="templateId is required")
    return service.list_groups(template_id=template_id)


@router.post("/groups", response_model=TemplateGroupResponse, status_code=201)
async def create_template_group(
    data: TemplateGroupCreate,
    service: TemplateGroupService = Depends(get_template_group_service)
):
    return service.create_template_group(data)


@router.put("/groups/{group_id}", response_model=TemplateGroupResponse)
async def update_template_group(
    group_id: str,
    data: AssemblyGroupUpdate,
    service: TemplateGroupService = Depends(get_template_group_service)
):
    return service.update_group(group_id, data)


@router.delete("/groups/{group_id}", response_model=AssemblyGroupDeleteResponse)
async def delete_template_group(
    group_id: str,
    service: TemplateGroupService = Depends(get_template_group_service)
):
    removed = service.delete_group(group_id)
    return AssemblyGroupDeleteResponse(message="Template group deleted successfully", items_removed=removed)


@router.get("/{template_id}", response_model=TemplateResponse)
async def get_template(
    template_id: int,
    service: TemplateService = Depends(get_template_service)
):
    return service.get_template_by_id(template_id)


@router.get("/{template_id}/boq", response_model=BoqResponse)
async def get_template_boq(
    template_id: int,
    service: TemplateService = Depends(get_template_service)
):
    """Bill of Quantity: one line per distinct material across the template's assemblies"""
    return service.get_boq(template_id)


@router.put("/{template_id}", response_model=TemplateResponse)
async def update_template(
    template_id: int,
    data: TemplateUpdate,
    service: TemplateService = Depends(get_template_service)
):
    return service.update_template(template_id, data)


@router.delete("/{template_id}")
async def delete_template(
    template_id: int,
    service: TemplateService = Depends(get_template_service)
):
    """Delete template (409 while projects use it)"""
    service.delete_template(template_id)
    return {"message": "Template deleted successfully"}
