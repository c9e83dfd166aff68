from fastapi import APIRouter, Depends, Query
from quickbom.database.supabase_client import get_supabase
from quickbom.modules.assemblies.schemas import AssemblyCreate, AssemblyUpdate, AssemblyResponse
from quickbom.modules.assemblies.service import AssemblyService
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/assemblies", tags=["assemblies"])


def get_assembly_service(supabase: Client = Depends(get_supabase)) -> AssemblyService:
    return AssemblyService(supabase)


@router.get("", response_model=List[AssemblyResponse])
async def list_assemblies(
    category_id: Optional[int] = Query(None, alias="categoryId"),
    service: AssemblyService = Depends(get_assembly_service)
):
    """List assemblies with their materials and unit cost, optionally for one category"""
    return service.list_assemblies(category_id=category_id)


@router.post("", response_model=AssemblyResponse, status_code=201)
async def create_assembly(
    data: AssemblyCreate,
    service: AssemblyService = Depends(get_assembly_service)
):
    return service.create_assembly(data)


@router.get("/{assembly_id}", response_model=AssemblyResponse)
async def get_assembly(
    assembly_id: int,
    service: AssemblyService = Depends(get_assembly_service)
):
    return service.get_assembly_by_id(assembly_id)


@router.put("/{assembly_id}", response_model=AssemblyResponse)
async def update_assembly(
    assembly_id: int,
    data: AssemblyUpdate,
    service: AssemblyService = Depends(get_assembly_service)
):
    """Update assembly; a materials list replaces the existing one"""
    return service.update_assembly(assembly_id, data)


@router.delete("/{assembly_id}")
async def delete_assembly(
    assembly_id: int,
    service: AssemblyService = Depends(get_assembly_service)
):
    service.delete_assembly(assembly_id)
    return {"message": "Assembly deleted successfully"}
