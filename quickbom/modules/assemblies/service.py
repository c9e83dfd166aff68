from supabase import Client
from quickbom.modules.assemblies.schemas import (
    AssemblyCreate, AssemblyUpdate, AssemblyResponse, AssemblyMaterialInput,
)
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


def fetch_material_lines(supabase: Client, assembly_ids: List[int]) -> Dict[int, List[Dict[str, Any]]]:
    """Return map assembly_id -> [{material_id, quantity, material}] with the material row joined in."""
    if not assembly_ids:
        return {}
    lines_result = supabase.table("assembly_materials")\
        .select("assembly_id, material_id, quantity")\
        .in_("assembly_id", assembly_ids)\
        .execute()
    lines = lines_result.data or []
    material_ids = list({line["material_id"] for line in lines})
    materials: Dict[int, Dict[str, Any]] = {}
    if material_ids:
        materials_result = supabase.table("materials").select("*").in_("id", material_ids).execute()
        materials = {m["id"]: m for m in materials_result.data or []}
    out: Dict[int, List[Dict[str, Any]]] = {}
    for line in lines:
        out.setdefault(line["assembly_id"], []).append({
            "material_id": line["material_id"],
            "quantity": float(line.get("quantity") or 0),
            "material": materials.get(line["material_id"]),
        })
    return out


def unit_cost(lines: List[Dict[str, Any]]) -> float:
    total = 0.0
    for line in lines:
        material = line.get("material") or {}
        total += float(material.get("price") or 0) * float(line.get("quantity") or 0)
    return total


class AssemblyService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _build_responses(self, rows: List[Dict[str, Any]]) -> List[AssemblyResponse]:
        lines_by_assembly = fetch_material_lines(self.supabase, [row["id"] for row in rows])
        out = []
        for row in rows:
            lines = lines_by_assembly.get(row["id"], [])
            out.append(AssemblyResponse(**row, materials=lines, unit_cost=unit_cost(lines)))
        return out

    def _check_category(self, category_id: int) -> None:
        result = self.supabase.table("assembly_categories").select("id").eq("id", category_id).maybe_single().execute()
        if not result or not result.data:
            raise HTTPException(status_code=400, detail="Selected category does not exist")

    def _check_materials(self, materials: List[AssemblyMaterialInput]) -> None:
        material_ids = list({m.material_id for m in materials})
        if not material_ids:
            return
        result = self.supabase.table("materials").select("id").in_("id", material_ids).execute()
        found = {row["id"] for row in result.data or []}
        missing = [mid for mid in material_ids if mid not in found]
        if missing:
            raise HTTPException(status_code=400, detail=f"Material with ID {missing[0]} not found")

    def _replace_materials(self, assembly_id: int, materials: List[AssemblyMaterialInput]) -> None:
        self.supabase.table("assembly_materials").delete().eq("assembly_id", assembly_id).execute()
        if materials:
            self.supabase.table("assembly_materials").insert([
                {"assembly_id": assembly_id, "material_id": m.material_id, "quantity": m.quantity}
                for m in materials
            ]).execute()

    def create_assembly(self, data: AssemblyCreate) -> AssemblyResponse:
        try:
            self._check_category(data.category_id)
            self._check_materials(data.materials)
            result = self.supabase.table("assemblies").insert({
                "name": data.name,
                "description": data.description,
                "category_id": data.category_id,
                "module": data.module.value,
                "docs": data.docs
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create assembly")
            assembly_id = result.data[0]["id"]
            self._replace_materials(assembly_id, data.materials)
            return self.get_assembly_by_id(assembly_id)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating assembly: {e}")
            raise HTTPException(status_code=500, detail="Failed to create assembly")

    def get_assembly_by_id(self, assembly_id: int) -> AssemblyResponse:
        try:
            result = self.supabase.table("assemblies").select("*").eq("id", assembly_id).maybe_single().execute()
            if not result or not result.data:
                raise HTTPException(status_code=404, detail="Assembly not found")
            return self._build_responses([result.data])[0]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching assembly {assembly_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch assembly")

    def list_assemblies(self, category_id: Optional[int] = None) -> List[AssemblyResponse]:
        try:
            query = self.supabase.table("assemblies").select("*")
            if category_id is not None:
                query = query.eq("category_id", category_id)
            result = query.order("created_at", desc=True).execute()
            return self._build_responses(result.data or [])
        except Exception as e:
            logger.error(f"Error listing assemblies: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch assemblies")

    def update_assembly(self, assembly_id: int, data: AssemblyUpdate) -> AssemblyResponse:
        try:
            self.get_assembly_by_id(assembly_id)
            update_data = data.model_dump(exclude_unset=True, exclude={"materials"})
            if "category_id" in update_data:
                self._check_category(update_data["category_id"])
            if update_data.get("module") is not None:
                update_data["module"] = data.module.value
            if update_data:
                self.supabase.table("assemblies").update(update_data).eq("id", assembly_id).execute()
            if data.materials is not None:
                self._check_materials(data.materials)
                self._replace_materials(assembly_id, data.materials)
            return self.get_assembly_by_id(assembly_id)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating assembly {assembly_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update assembly")

    def delete_assembly(self, assembly_id: int) -> None:
        """Delete an assembly and its material lines unless a group or template still references it."""
        self.get_assembly_by_id(assembly_id)
        try:
            references = 0
            for table in ("assembly_group_items", "template_assemblies", "template_assembly_group_items"):
                result = self.supabase.table(table).select("id").eq("assembly_id", assembly_id).execute()
                references += len(result.data) if result.data else 0
            if references > 0:
                raise HTTPException(status_code=409, detail={
                    "error": "Cannot delete assembly",
                    "message": f"This assembly is referenced by {references} group item(s) or template(s). Remove those references first."
                })
            self.supabase.table("assembly_materials").delete().eq("assembly_id", assembly_id).execute()
            self.supabase.table("assemblies").delete().eq("id", assembly_id).execute()
            logger.info(f"Deleted assembly {assembly_id}")
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error deleting assembly {assembly_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete assembly")
