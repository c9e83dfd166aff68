from fastapi import APIRouter, Depends
from quickbom.database.supabase_client import get_supabase
from quickbom.modules.materials.schemas import MaterialCreate, MaterialUpdate, MaterialResponse
from quickbom.modules.materials.service import MaterialService
from supabase import Client
from typing import List

router = APIRouter(prefix="/materials", tags=["materials"])


def get_material_service(supabase: Client = Depends(get_supabase)) -> MaterialService:
    return MaterialService(supabase)


@router.get("", response_model=List[MaterialResponse])
async def list_materials(
    limit: int = 100,
    offset: int = 0,
    service: MaterialService = Depends(get_material_service)
):
    """List materials, newest first"""
    return service.list_materials(limit=limit, offset=offset)


@router.post("", response_model=MaterialResponse, status_code=201)
async def create_material(
    data: MaterialCreate,
    service: MaterialService = Depends(get_material_service)
):
    return service.create_material(data)


@router.get("/{material_id}", response_model=MaterialResponse)
async def get_material(
    material_id: int,
    service: MaterialService = Depends(get_material_service)
):
    return service.get_material_by_id(material_id)


@router.put("/{material_id}", response_model=MaterialResponse)
async def update_material(
    material_id: int,
    data: MaterialUpdate,
    service: MaterialService = Depends(get_material_service)
):
    return service.update_material(material_id, data)


@router.delete("/{material_id}")
async def delete_material(
    material_id: int,
    service: MaterialService = Depends(get_material_service)
):
    """Delete material (409 while any assembly uses it)"""
    service.delete_material(material_id)
    return {"message": "Material deleted successfully"}
