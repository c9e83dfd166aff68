from fastapi import APIRouter, Depends
from quickbom.database.supabase_client import get_supabase
from quickbom.modules.assembly_categories.schemas import (
    CategoryCreate, CategoryUpdate, CategoryResponse, CategoryWithAssemblies,
)
from quickbom.modules.assembly_categories.service import AssemblyCategoryService
from supabase import Client
from typing import List

router = APIRouter(prefix="/assembly-categories", tags=["assembly-categories"])


def get_category_service(supabase: Client = Depends(get_supabase)) -> AssemblyCategoryService:
    return AssemblyCategoryService(supabase)


@router.get("", response_model=List[CategoryResponse])
async def list_categories(service: AssemblyCategoryService = Depends(get_category_service)):
    return service.list_categories()


@router.post("", response_model=CategoryResponse, status_code=201)
async def create_category(
    data: CategoryCreate,
    service: AssemblyCategoryService = Depends(get_category_service)
):
    return service.create(data)


@router.get("/{category_id}", response_model=CategoryWithAssemblies)
async def get_category(
    category_id: int,
    service: AssemblyCategoryService = Depends(get_category_service)
):
    """Get category with its assemblies and their count"""
    return service.get_with_assemblies(category_id)


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: int,
    data: CategoryUpdate,
    service: AssemblyCategoryService = Depends(get_category_service)
):
    return service.update(category_id, data)


@router.delete("/{category_id}")
async def delete_category(
    category_id: int,
    service: AssemblyCategoryService = Depends(get_category_service)
):
    """Delete category (409 while it still has assemblies)"""
    service.delete(category_id)
    return {"message": "Assembly category deleted successfully"}
