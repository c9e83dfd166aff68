from supabase import Client
from quickbom.modules.assemblies.service import fetch_material_lines
from quickbom.modules.assembly_groups.selection import (
    MaterialLine, ResolvedGroup, ResolvedGroupItem,
)
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


class GroupResolver:
    """Loads group rows into ResolvedGroup objects: items, assembly names and material prices.

    Catalog groups and template-scoped groups share a shape but live in
    different tables, so the table pair is a constructor argument.
    """

    def __init__(
        self,
        supabase: Client,
        group_table: str = "assembly_groups",
        item_table: str = "assembly_group_items",
    ):
        self.supabase = supabase
        self.group_table = group_table
        self.item_table = item_table

    def fetch_rows(
        self,
        group_ids: Optional[List[str]] = None,
        category_id: Optional[int] = None,
        template_id: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Group rows ordered by (category_id, sort_order). An empty id list matches nothing."""
        if group_ids is not None and not group_ids:
            return []
        query = self.supabase.table(self.group_table).select("*")
        if group_ids is not None:
            query = query.in_("id", group_ids)
        if category_id is not None:
            query = query.eq("category_id", category_id)
        if template_id is not None:
            query = query.eq("template_id", template_id)
        result = query.execute()
        rows = result.data or []
        return sorted(rows, key=lambda r: (r.get("category_id") or 0, r.get("sort_order") or 0))

    def resolve(self, rows: List[Dict[str, Any]]) -> List[ResolvedGroup]:
        if not rows:
            return []
        group_ids = [row["id"] for row in rows]

        items_result = self.supabase.table(self.item_table)\
            .select("*")\
            .in_("group_id", group_ids)\
            .execute()
        items_by_group: Dict[str, List[Dict[str, Any]]] = {}
        for item in items_result.data or []:
            items_by_group.setdefault(item["group_id"], []).append(item)

        assembly_ids = list({item["assembly_id"] for items in items_by_group.values() for item in items})
        assembly_names: Dict[int, str] = {}
        if assembly_ids:
            assemblies_result = self.supabase.table("assemblies")\
                .select("id, name")\
                .in_("id", assembly_ids)\
                .execute()
            assembly_names = {a["id"]: a["name"] for a in assemblies_result.data or []}
        lines_by_assembly = fetch_material_lines(self.supabase, assembly_ids)

        category_ids = list({row["category_id"] for row in rows})
        categories_result = self.supabase.table("assembly_categories")\
            .select("id, name")\
            .in_("id", category_ids)\
            .execute()
        category_names = {c["id"]: c["name"] for c in categories_result.data or []}

        groups = []
        for row in rows:
            items = sorted(items_by_group.get(row["id"], []), key=lambda i: i.get("sort_order") or 0)
            groups.append(ResolvedGroup(
                id=row["id"],
                name=row["name"],
                group_type=row["group_type"],
                category_id=row["category_id"],
                category_name=category_names.get(row["category_id"], ""),
                sort_order=row.get("sort_order") or 0,
                items=[
                    ResolvedGroupItem(
                        assembly_id=item["assembly_id"],
                        assembly_name=assembly_names.get(item["assembly_id"], f"Assembly {item['assembly_id']}"),
                        quantity=float(item.get("quantity") or 1),
                        conflicts_with=item.get("conflicts_with") or [],
                        is_default=bool(item.get("is_default")),
                        sort_order=item.get("sort_order") or 0,
                        materials=[
                            MaterialLine(
                                material_id=line["material_id"],
                                price=float((line["material"] or {}).get("price") or 0),
                                quantity=line["quantity"],
                            )
                            for line in lines_by_assembly.get(item["assembly_id"], [])
                        ],
                    )
                    for item in items
                ],
            ))
        logger.debug(f"Resolved {len(groups)} group(s) from {self.group_table}")
        return groups

    def by_ids(self, group_ids: List[str]) -> List[ResolvedGroup]:
        return self.resolve(self.fetch_rows(group_ids=group_ids))

    def by_category(self, category_id: Optional[int] = None) -> List[ResolvedGroup]:
        return self.resolve(self.fetch_rows(category_id=category_id))

    def by_template(self, template_id: int) -> List[ResolvedGroup]:
        return self.resolve(self.fetch_rows(template_id=template_id))
