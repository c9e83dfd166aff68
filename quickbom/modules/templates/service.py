from supabase import Client
from quickbom.core.errors import is_unique_violation
from quickbom.modules.assemblies.service import fetch_material_lines, unit_cost
from quickbom.modules.assembly_groups.resolver import GroupResolver
from quickbom.modules.assembly_groups.selection import (
    Selection, ValidationResult, referenced_group_ids, selected_assemblies, validate_selection,
)
from quickbom.modules.assembly_groups.service import AssemblyGroupService
from quickbom.modules.templates.boq import BoqResponse, consolidate
from quickbom.modules.templates.schemas import (
    TemplateCreate, TemplateUpdate, TemplateResponse, TemplateAssemblyInput, TemplateAssemblyResponse,
    TemplateGroupCreate, TemplateGroupResponse,
)
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class TemplateService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.group_resolver = GroupResolver(supabase, "template_assembly_groups", "template_assembly_group_items")

    def _get_row(self, template_id: int) -> Dict[str, Any]:
        result = self.supabase.table("templates").select("*").eq("id", template_id).maybe_single().execute()
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="Template not found")
        return result.data

    def _load_assemblies(self, template_ids: List[int]) -> Dict[int, List[Dict[str, Any]]]:
        """Return map template_id -> [{assembly_id, name, quantity, lines}] for the given templates."""
        if not template_ids:
            return {}
        links_result = self.supabase.table("template_assemblies")\
            .select("template_id, assembly_id, quantity")\
            .in_("template_id", template_ids)\
            .execute()
        links = links_result.data or []
        assembly_ids = list({link["assembly_id"] for link in links})
        names: Dict[int, str] = {}
        if assembly_ids:
            assemblies_result = self.supabase.table("assemblies").select("id, name").in_("id", assembly_ids).execute()
            names = {a["id"]: a["name"] for a in assemblies_result.data or []}
        lines_by_assembly = fetch_material_lines(self.supabase, assembly_ids)
        out: Dict[int, List[Dict[str, Any]]] = {}
        for link in links:
            out.setdefault(link["template_id"], []).append({
                "assembly_id": link["assembly_id"],
                "name": names.get(link["assembly_id"], f"Assembly {link['assembly_id']}"),
                "quantity": float(link.get("quantity") or 1),
                "lines": lines_by_assembly.get(link["assembly_id"], []),
            })
        return out

    def _build_responses(self, rows: List[Dict[str, Any]]) -> List[TemplateResponse]:
        assemblies_by_template = self._load_assemblies([row["id"] for row in rows])
        out = []
        for row in rows:
            assemblies = []
            for entry in assemblies_by_template.get(row["id"], []):
                cost = unit_cost(entry["lines"])
                assemblies.append(TemplateAssemblyResponse(
                    assembly_id=entry["assembly_id"],
                    name=entry["name"],
                    quantity=entry["quantity"],
                    unit_cost=cost,
                    total_cost=cost * entry["quantity"],
                ))
            out.append(TemplateResponse(
                **{**row, "assemblies": assemblies, "total_cost": sum(a.total_cost for a in assemblies)}
            ))
        return out

    def _replace_assemblies(self, template_id: int, assemblies: List[TemplateAssemblyInput]) -> None:
        self.supabase.table("template_assemblies").delete().eq("template_id", template_id).execute()
        if assemblies:
            self.supabase.table("template_assemblies").insert([
                {"template_id": template_id, "assembly_id": a.assembly_id, "quantity": a.quantity}
                for a in assemblies
            ]).execute()

    def assemblies_from_selection(self, selections: Selection) -> List[TemplateAssemblyInput]:
        """Validate a catalog group selection and turn it into a template assembly list."""
        groups = GroupResolver(self.supabase).by_ids(referenced_group_ids(selections))
        result = validate_selection(selections, groups)
        if not result.is_valid:
            raise HTTPException(status_code=400, detail={
                "error": "Invalid assembly selection",
                "errors": [e.model_dump(by_alias=True, mode="json", exclude_none=True) for e in result.errors]
            })
        return [
            TemplateAssemblyInput(assembly_id=assembly_id, quantity=quantity)
            for assembly_id, quantity in selected_assemblies(selections, groups)
        ]

    def _selections_json(self, selections: Optional[Selection]) -> Optional[Dict[str, Any]]:
        if selections is None:
            return None
        return {str(category_id): groups for category_id, groups in selections.items()}

    def create_template(self, data: TemplateCreate) -> TemplateResponse:
        try:
            assemblies = data.assemblies
            if assemblies is None and data.assembly_selections is not None:
                assemblies = self.assemblies_from_selection(data.assembly_selections)
            result = self.supabase.table("templates").insert({
                "name": data.name,
                "description": data.description,
                "docs": data.docs,
                "assembly_selections": self._selections_json(data.assembly_selections)
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create template")
            template_id = result.data[0]["id"]
            self._replace_assemblies(template_id, assemblies or [])
            logger.info(f"Created template {template_id} with {len(assemblies or [])} assembly(ies)")
            return self.get_template_by_id(template_id)
        except HTTPException:
            raise
        except Exception as e:
            if is_unique_violation(e):
                raise HTTPException(status_code=409, detail="Template with this name already exists")
            logger.error(f"Error creating template: {e}")
            raise HTTPException(status_code=500, detail="Failed to create template")

    def get_template_by_id(self, template_id: int) -> TemplateResponse:
        try:
            return self._build_responses([self._get_row(template_id)])[0]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching template {template_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch template")

    def list_templates(self) -> List[TemplateResponse]:
        try:
            result = self.supabase.table("templates").select("*").order("created_at", desc=True).execute()
            return self._build_responses(result.data or [])
        except Exception as e:
            logger.error(f"Error listing templates: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch templates")

    def update_template(self, template_id: int, data: TemplateUpdate) -> TemplateResponse:
        try:
            self._get_row(template_id)
            update_data = data.model_dump(exclude_unset=True, exclude={"assemblies", "assembly_selections"})
            assemblies = data.assemblies
            if "assembly_selections" in data.model_fields_set:
                update_data["assembly_selections"] = self._selections_json(data.assembly_selections)
                if assemblies is None and data.assembly_selections is not None:
                    assemblies = self.assemblies_from_selection(data.assembly_selections)
            if update_data:
                self.supabase.table("templates").update(update_data).eq("id", template_id).execute()
            if assemblies is not None:
                self._replace_assemblies(template_id, assemblies)
            return self.get_template_by_id(template_id)
        except HTTPException:
            raise
        except Exception as e:
            if is_unique_violation(e):
                raise HTTPException(status_code=409, detail="Template with this name already exists")
            logger.error(f"Error updating template {template_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update template")

    def delete_template(self, template_id: int) -> None:
        """Delete a template, its assembly links and its groups, unless projects use it."""
        self._get_row(template_id)
        try:
            projects = self.supabase.table("projects").select("id").eq("from_template_id", template_id).execute()
            count = len(projects.data) if projects.data else 0
            if count > 0:
                raise HTTPException(status_code=409, detail={
                    "error": "Cannot delete template",
                    "message": f"This template is used in {count} project(s). Remove it from all projects first."
                })
            groups = TemplateGroupService(self.supabase)
            for group in self.group_resolver.fetch_rows(template_id=template_id):
                groups.delete_group(group["id"])
            self.supabase.table("template_assemblies").delete().eq("template_id", template_id).execute()
            self.supabase.table("templates").delete().eq("id", template_id).execute()
            logger.info(f"Deleted template {template_id}")
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error deleting template {template_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete template")

    def get_boq(self, template_id: int) -> BoqResponse:
        """Consolidated material list for everything the template contains."""
        row = self._get_row(template_id)
        try:
            entries = [
                (entry["name"], entry["quantity"], entry["lines"])
                for entry in self._load_assemblies([template_id]).get(template_id, [])
            ]
            lines = consolidate(entries)
            return BoqResponse(
                template_id=template_id,
                template_name=row["name"],
                lines=lines,
                total_cost=sum(line.total_cost for line in lines),
            )
        except Exception as e:
            logger.error(f"Error building BOQ for template {template_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to build bill of quantity")

    def validate_selection(self, template_id: int, selections: Selection) -> ValidationResult:
        """Validate a selection against the template's own groups."""
        self._get_row(template_id)
        try:
            groups = self.group_resolver.by_template(template_id)
            return validate_selection(selections, groups)
        except Exception as e:
            logger.exception(f"Error validating selection for template {template_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to validate selection")


class TemplateGroupService(AssemblyGroupService):
    """Assembly groups owned by a single template."""

    group_table = "template_assembly_groups"
    item_table = "template_assembly_group_items"
    response_schema = TemplateGroupResponse
    not_found_detail = "Template group not found"

    def __init__(self, supabase: Client):
        super().__init__(supabase)
        self._template_id: Optional[int] = None

    def _scope_fields(self) -> Dict[str, Any]:
        return {"template_id": self._template_id}

    def create_template_group(self, data: TemplateGroupCreate) -> TemplateGroupResponse:
        result = self.supabase.table("templates").select("id").eq("id", data.template_id).maybe_single().execute()
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="Template not found")
        self._template_id = data.template_id
        return self.create_group(data)
