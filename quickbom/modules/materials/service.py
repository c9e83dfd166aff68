from supabase import Client
from quickbom.core.errors import is_unique_violation
from quickbom.modules.materials.schemas import MaterialCreate, MaterialUpdate, MaterialResponse
from typing import List
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class MaterialService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_material(self, data: MaterialCreate) -> MaterialResponse:
        try:
            result = self.supabase.table("materials").insert({
                "name": data.name,
                "part_number": data.part_number,
                "manufacturer": data.manufacturer,
                "unit": data.unit,
                "price": data.price
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create material")
            return MaterialResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            if is_unique_violation(e):
                raise HTTPException(status_code=409, detail="Material with this name already exists")
            logger.error(f"Error creating material: {e}")
            raise HTTPException(status_code=500, detail="Failed to create material")

    def get_material_by_id(self, material_id: int) -> MaterialResponse:
        try:
            result = self.supabase.table("materials").select("*").eq("id", material_id).maybe_single().execute()
            if not result or not result.data:
                raise HTTPException(status_code=404, detail="Material not found")
            return MaterialResponse(**result.data)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching material {material_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch material")

    def list_materials(self, limit: int = 100, offset: int = 0) -> List[MaterialResponse]:
        try:
            result = self.supabase.table("materials")\
                .select("*")\
                .order("created_at", desc=True)\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [MaterialResponse(**row) for row in result.data or []]
        except Exception as e:
            logger.error(f"Error listing materials: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch materials")

    def update_material(self, material_id: int, data: MaterialUpdate) -> MaterialResponse:
        try:
            update_data = data.model_dump(exclude_unset=True)
            if not update_data:
                return self.get_material_by_id(material_id)
            result = self.supabase.table("materials")\
                .update(update_data)\
                .eq("id", material_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Material not found")
            return MaterialResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            if is_unique_violation(e):
                raise HTTPException(status_code=409, detail="Material with this name already exists")
            logger.error(f"Error updating material {material_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update material")

    def delete_material(self, material_id: int) -> None:
        """Delete a material unless an assembly still uses it."""
        try:
            self.get_material_by_id(material_id)
            usage = self.supabase.table("assembly_materials")\
                .select("id")\
                .eq("material_id", material_id)\
                .execute()
            used_in = len(usage.data) if usage.data else 0
            if used_in > 0:
                raise HTTPException(status_code=409, detail={
                    "error": "Cannot delete material",
                    "message": f"This material is used in {used_in} assembly(ies). Remove it from all assemblies first."
                })
            self.supabase.table("materials").delete().eq("id", material_id).execute()
            logger.info(f"Deleted material {material_id}")
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error deleting material {material_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete material")
