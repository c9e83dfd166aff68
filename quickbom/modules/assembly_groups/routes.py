from fastapi import APIRouter, Depends, HTTPException, Query
from quickbom.database.supabase_client import get_supabase
from quickbom.modules.assembly_groups.schemas import (
    AssemblyGroupCreate, AssemblyGroupUpdate, AssemblyGroupResponse, AssemblyGroupDeleteResponse,
    ItemQuantityUpdate, ItemQuantityResponse, SelectionRequest,
)
from quickbom.modules.assembly_groups.selection import Selection, ValidationResult
from quickbom.modules.assembly_groups.service import AssemblyGroupService
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/assembly-groups", tags=["assembly-groups"])


def get_assembly_group_service(supabase: Client = Depends(get_supabase)) -> AssemblyGroupService:
    return AssemblyGroupService(supabase)


@router.get("", response_model=List[AssemblyGroupResponse])
async def list_groups(
    category_id: Optional[int] = Query(None, alias="categoryId"),
    service: AssemblyGroupService = Depends(get_assembly_group_service)
):
    """List groups with items, ordered by category and sort order"""
    return service.list_groups(category_id=category_id)


@router.post("", response_model=AssemblyGroupResponse, status_code=201)
async def create_group(
    data: AssemblyGroupCreate,
    service: AssemblyGroupService = Depends(get_assembly_group_service)
):
    return service.create_group(data)


@router.post("/validate-selection", response_model=ValidationResult)
async def validate_selection(
    body: Optional[SelectionRequest] = None,
    service: AssemblyGroupService = Depends(get_assembly_group_service)
):
    """
    Validate a categoryId -> groupId -> assemblyIds selection against the
    referenced groups. Returns every rule violation together with the cost
    breakdown of the selected assemblies.
    """
    if body is None or body.selections is None:
        raise HTTPException(status_code=400, detail="selections are required")
    return service.validate_selection(body.selections)


@router.get("/default-selection", response_model=Selection)
async def get_default_selection(
    category_id: Optional[int] = Query(None, alias="categoryId"),
    service: AssemblyGroupService = Depends(get_assembly_group_service)
):
    """Initial selection: REQUIRED groups fully selected, CHOOSE_ONE on its default or first item"""
    return service.default_selection(category_id)


@router.get("/{group_id}", response_model=AssemblyGroupResponse)
async def get_group(
    group_id: str,
    service: AssemblyGroupService = Depends(get_assembly_group_service)
):
    return service.get_group_by_id(group_id)


@router.put("/{group_id}", response_model=AssemblyGroupResponse)
async def update_group(
    group_id: str,
    data: AssemblyGroupUpdate,
    service: AssemblyGroupService = Depends(get_assembly_group_service)
):
    """Update group; an items list replaces the existing items"""
    return service.update_group(group_id, data)


@router.delete("/{group_id}", response_model=AssemblyGroupDeleteResponse)
async def delete_group(
    group_id: str,
    service: AssemblyGroupService = Depends(get_assembly_group_service)
):
    removed = service.delete_group(group_id)
    return AssemblyGroupDeleteResponse(message="Assembly group deleted successfully", items_removed=removed)


@router.patch("/{group_id}/items/{assembly_id}", response_model=ItemQuantityResponse)
async def update_item_quantity(
    group_id: str,
    assembly_id: int,
    data: ItemQuantityUpdate,
    service: AssemblyGroupService = Depends(get_assembly_group_service)
):
    """Change the quantity multiplier of one assembly in a group"""
    quantity = service.update_item_quantity(group_id, assembly_id, data.quantity)
    return ItemQuantityResponse(message="Quantity updated successfully", quantity=quantity)
