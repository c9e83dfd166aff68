from supabase import Client
from quickbom.core.errors import is_unique_violation
from quickbom.modules.assembly_categories.schemas import (
    CategoryCreate, CategoryUpdate, CategoryResponse, CategoryWithAssemblies, CategoryAssemblySummary,
)
from typing import List
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class AssemblyCategoryService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create(self, data: CategoryCreate) -> CategoryResponse:
        try:
            result = self.supabase.table("assembly_categories").insert({
                "name": data.name,
                "description": data.description,
                "color": data.color,
                "icon": data.icon
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create assembly category")
            return CategoryResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            if is_unique_violation(e):
                raise HTTPException(status_code=409, detail="Assembly category with this name already exists")
            logger.error(f"Error creating assembly category: {e}")
            raise HTTPException(status_code=500, detail="Failed to create assembly category")

    def get_by_id(self, category_id: int) -> CategoryResponse:
        try:
            result = self.supabase.table("assembly_categories").select("*").eq("id", category_id).maybe_single().execute()
            if not result or not result.data:
                raise HTTPException(status_code=404, detail="Assembly category not found")
            return CategoryResponse(**result.data)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching assembly category {category_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch assembly category")

    def get_with_assemblies(self, category_id: int) -> CategoryWithAssemblies:
        """Category plus the assemblies filed under it."""
        category = self.get_by_id(category_id)
        try:
            result = self.supabase.table("assemblies")\
                .select("id, name, description")\
                .eq("category_id", category_id)\
                .execute()
            assemblies = [CategoryAssemblySummary(**row) for row in result.data or []]
        except Exception as e:
            logger.error(f"Error fetching assemblies for category {category_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch assembly category")
        return CategoryWithAssemblies(
            **category.model_dump(),
            assemblies=assemblies,
            assembly_count=len(assemblies)
        )

    def list_categories(self) -> List[CategoryResponse]:
        try:
            result = self.supabase.table("assembly_categories").select("*").order("name").execute()
            return [CategoryResponse(**row) for row in result.data or []]
        except Exception as e:
            logger.error(f"Error listing assembly categories: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch assembly categories")

    def update(self, category_id: int, data: CategoryUpdate) -> CategoryResponse:
        try:
            update_data = data.model_dump(exclude_unset=True)
            if not update_data:
                return self.get_by_id(category_id)
            result = self.supabase.table("assembly_categories").update(update_data).eq("id", category_id).execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Assembly category not found")
            return CategoryResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            if is_unique_violation(e):
                raise HTTPException(status_code=409, detail="Assembly category with this name already exists")
            logger.error(f"Error updating assembly category {category_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update assembly category")

    def delete(self, category_id: int) -> None:
        """Delete a category that no assembly belongs to."""
        self.get_by_id(category_id)
        try:
            result = self.supabase.table("assemblies").select("id").eq("category_id", category_id).execute()
            count = len(result.data) if result.data else 0
            if count > 0:
                raise HTTPException(status_code=409, detail={
                    "error": "Cannot delete assembly category",
                    "message": f"This category contains {count} assembly(ies). Remove all assemblies from this category first."
                })
            self.supabase.table("assembly_categories").delete().eq("id", category_id).execute()
            logger.info(f"Deleted assembly category {category_id}")
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error deleting assembly category {category_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete assembly category")
