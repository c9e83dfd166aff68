from supabase import Client
from quickbom.modules.assembly_groups.resolver import GroupResolver
from quickbom.modules.assembly_groups.schemas import (
    AssemblyGroupCreate, AssemblyGroupUpdate, AssemblyGroupResponse, GroupItemInput,
)
from quickbom.modules.assembly_groups.selection import (
    ResolvedGroup, Selection, ValidationResult,
    default_selection, referenced_group_ids, validate_selection,
)
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
import uuid
import logging

logger = logging.getLogger(__name__)


class AssemblyGroupService:
    group_table = "assembly_groups"
    item_table = "assembly_group_items"
    response_schema = AssemblyGroupResponse
    not_found_detail = "Assembly group not found"

    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.resolver = GroupResolver(supabase, self.group_table, self.item_table)

    def _to_response(self, rows: List[Dict[str, Any]]) -> List[AssemblyGroupResponse]:
        resolved = {group.id: group for group in self.resolver.resolve(rows)}
        out = []
        for row in rows:
            group = resolved[row["id"]]
            out.append(self.response_schema(
                **{**row, "items": group.items, "category_name": group.category_name}
            ))
        return out

    def _scope_fields(self) -> Dict[str, Any]:
        """Extra columns written on insert; template-scoped groups add their template_id."""
        return {}

    def _check_category(self, category_id: int) -> None:
        result = self.supabase.table("assembly_categories").select("id").eq("id", category_id).maybe_single().execute()
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="Category not found")

    def _check_items(self, items: List[GroupItemInput], category_id: int) -> None:
        """Every item must name an existing assembly of the group's category, each at most once."""
        if not items:
            return
        seen = set()
        for item in items:
            if item.assembly_id in seen:
                raise HTTPException(status_code=400, detail=f"Assembly with ID {item.assembly_id} is listed more than once")
            seen.add(item.assembly_id)
        result = self.supabase.table("assemblies")\
            .select("id, name, category_id")\
            .in_("id", list(seen))\
            .execute()
        assemblies = {a["id"]: a for a in result.data or []}
        for item in items:
            assembly = assemblies.get(item.assembly_id)
            if not assembly:
                raise HTTPException(status_code=400, detail=f"Assembly with ID {item.assembly_id} not found")
            if assembly.get("category_id") != category_id:
                raise HTTPException(
                    status_code=400,
                    detail=f'Assembly "{assembly["name"]}" does not belong to the group\'s category'
                )

    def _insert_items(self, group_id: str, items: List[GroupItemInput]) -> None:
        if not items:
            return
        self.supabase.table(self.item_table).insert([
            {
                "group_id": group_id,
                "assembly_id": item.assembly_id,
                "quantity": item.quantity,
                "conflicts_with": item.conflicts_with,
                "is_default": item.is_default,
                "sort_order": item.sort_order
            }
            for item in items
        ]).execute()

    def _get_row(self, group_id: str) -> Dict[str, Any]:
        result = self.supabase.table(self.group_table).select("*").eq("id", group_id).maybe_single().execute()
        if not result or not result.data:
            raise HTTPException(status_code=404, detail=self.not_found_detail)
        return result.data

    def list_groups(self, category_id: Optional[int] = None, template_id: Optional[int] = None) -> List[AssemblyGroupResponse]:
        """Groups ordered by category then sort_order, each with its items ordered by sort_order."""
        try:
            rows = self.resolver.fetch_rows(category_id=category_id, template_id=template_id)
            return self._to_response(rows)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error listing groups from {self.group_table}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch assembly groups")

    def get_group_by_id(self, group_id: str) -> AssemblyGroupResponse:
        try:
            return self._to_response([self._get_row(group_id)])[0]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching group {group_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch assembly group")

    def create_group(self, data: AssemblyGroupCreate) -> AssemblyGroupResponse:
        try:
            self._check_category(data.category_id)
            self._check_items(data.items, data.category_id)
            group_id = str(uuid.uuid4())
            result = self.supabase.table(self.group_table).insert({
                "id": group_id,
                "name": data.name,
                "description": data.description,
                "group_type": data.group_type.value,
                "category_id": data.category_id,
                "sort_order": data.sort_order,
                **self._scope_fields()
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create assembly group")
            self._insert_items(group_id, data.items)
            logger.info(f"Created {data.group_type.value} group {group_id} in category {data.category_id}")
            return self.get_group_by_id(group_id)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating group: {e}")
            raise HTTPException(status_code=500, detail="Failed to create assembly group")

    def update_group(self, group_id: str, data: AssemblyGroupUpdate) -> AssemblyGroupResponse:
        try:
            existing = self._get_row(group_id)
            update_data = data.model_dump(exclude_unset=True, exclude={"items"})
            if update_data.get("group_type") is not None:
                update_data["group_type"] = data.group_type.value
            if data.items is not None:
                self._check_items(data.items, existing["category_id"])
            if update_data:
                self.supabase.table(self.group_table).update(update_data).eq("id", group_id).execute()
            if data.items is not None:
                self.supabase.table(self.item_table).delete().eq("group_id", group_id).execute()
                self._insert_items(group_id, data.items)
            return self.get_group_by_id(group_id)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating group {group_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update assembly group")

    def delete_group(self, group_id: str) -> int:
        """Delete the group's items, then the group. Returns the number of items removed."""
        try:
            self._get_row(group_id)
            items_result = self.supabase.table(self.item_table)\
                .delete()\
                .eq("group_id", group_id)\
                .execute()
            removed = len(items_result.data) if items_result.data else 0
            self.supabase.table(self.group_table).delete().eq("id", group_id).execute()
            logger.info(f"Deleted group {group_id} ({removed} item(s))")
            return removed
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error deleting group {group_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete assembly group")

    def update_item_quantity(self, group_id: str, assembly_id: int, quantity: Optional[float]) -> float:
        if not quantity or quantity < 1:
            raise HTTPException(status_code=400, detail="Valid quantity (minimum 1) is required")
        try:
            result = self.supabase.table(self.item_table)\
                .update({"quantity": quantity})\
                .eq("group_id", group_id)\
                .eq("assembly_id", assembly_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Assembly item not found in group")
            return quantity
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating quantity of assembly {assembly_id} in group {group_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update quantity")

    def resolve_for_selection(self, selections: Selection) -> List[ResolvedGroup]:
        return self.resolver.by_ids(referenced_group_ids(selections))

    def validate_selection(self, selections: Selection) -> ValidationResult:
        """Validate against the groups the selection refers to; unknown group ids are skipped."""
        try:
            groups = self.resolve_for_selection(selections)
            return validate_selection(selections, groups)
        except HTTPException:
            raise
        except Exception as e:
            logger.exception(f"Error validating selection: {e}")
            raise HTTPException(status_code=500, detail="Failed to validate selection")

    def default_selection(self, category_id: Optional[int] = None) -> Selection:
        try:
            return default_selection(self.resolver.by_category(category_id))
        except Exception as e:
            logger.error(f"Error building default selection: {e}")
            raise HTTPException(status_code=500, detail="Failed to build default selection")
