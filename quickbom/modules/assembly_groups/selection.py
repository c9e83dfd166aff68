"""
Assembly group selection rules.

A selection maps category id -> group id -> selected assembly ids. Each group
constrains its own slice of the selection according to its type:

- REQUIRED: every item of the group must be selected (checked by count)
- CHOOSE_ONE: exactly one item must be selected
- OPTIONAL: anything goes
- CONFLICT: no selected item may list another selected item in conflicts_with

All failures are collected, never short-circuited, and costs are computed
whether or not the selection is valid. Nothing here performs I/O; callers
resolve the groups first (see resolver.py) and pass them in.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import Field

from quickbom.core.schemas import CamelModel

# categoryId -> groupId -> assemblyIds
Selection = Dict[int, Dict[str, List[int]]]


class GroupType(str, Enum):
    REQUIRED = "REQUIRED"
    CHOOSE_ONE = "CHOOSE_ONE"
    OPTIONAL = "OPTIONAL"
    CONFLICT = "CONFLICT"


class ValidationErrorType(str, Enum):
    REQUIRED = "required"
    CHOOSE_ONE = "choose_one"
    CONFLICT = "conflict"
    CATEGORY_REQUIRED = "category_required"


class MaterialLine(CamelModel):
    material_id: Optional[int] = None
    price: float = 0
    quantity: float = 1


class ResolvedGroupItem(CamelModel):
    assembly_id: int
    assembly_name: str
    quantity: float = 1
    conflicts_with: List[int] = Field(default_factory=list)
    is_default: bool = False
    sort_order: int = 0
    materials: List[MaterialLine] = Field(default_factory=list)

    @property
    def unit_cost(self) -> float:
        return sum(line.price * line.quantity for line in self.materials)

    @property
    def cost(self) -> float:
        return self.unit_cost * self.quantity


class ResolvedGroup(CamelModel):
    id: str
    name: str
    group_type: GroupType
    category_id: int
    category_name: str = ""
    sort_order: int = 0
    items: List[ResolvedGroupItem] = Field(default_factory=list)

    def find_item(self, assembly_id: int) -> Optional[ResolvedGroupItem]:
        for item in self.items:
            if item.assembly_id == assembly_id:
                return item
        return None


class SelectionError(CamelModel):
    type: ValidationErrorType
    group_id: Optional[str] = None
    message: str
    details: Optional[Dict[str, Any]] = None


class AssemblyBreakdown(CamelModel):
    assembly_id: int
    name: str
    quantity: float
    cost: float


class GroupBreakdown(CamelModel):
    group_id: str
    group_name: str
    cost: float = 0
    assemblies: List[AssemblyBreakdown] = Field(default_factory=list)


class CategoryBreakdown(CamelModel):
    category_id: int
    category_name: str
    groups: List[GroupBreakdown] = Field(default_factory=list)


class ValidationResult(CamelModel):
    is_valid: bool
    errors: List[SelectionError] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    total_cost: float = 0
    breakdown: List[CategoryBreakdown] = Field(default_factory=list)


def group_by_category(groups: List[ResolvedGroup]) -> Dict[int, List[ResolvedGroup]]:
    """Partition groups by category, preserving the order categories first appear in."""
    by_category: Dict[int, List[ResolvedGroup]] = {}
    for group in groups:
        by_category.setdefault(group.category_id, []).append(group)
    return by_category


def check_group(group: ResolvedGroup, selected: List[int]) -> List[SelectionError]:
    """Apply the rule for the group's type to the ids selected in it."""
    errors: List[SelectionError] = []

    if group.group_type == GroupType.REQUIRED:
        # Count only: the selected ids are not compared to the group's members.
        if len(selected) != len(group.items):
            errors.append(SelectionError(
                type=ValidationErrorType.REQUIRED,
                group_id=group.id,
                message=f'Group "{group.name}" requires all {len(group.items)} items to be selected',
                details={"required": len(group.items), "selected": len(selected)},
            ))

    elif group.group_type == GroupType.CHOOSE_ONE:
        if len(selected) != 1:
            errors.append(SelectionError(
                type=ValidationErrorType.CHOOSE_ONE,
                group_id=group.id,
                message=f'Group "{group.name}" requires exactly one item to be selected',
                details={"selected": len(selected), "available": len(group.items)},
            ))

    elif group.group_type == GroupType.CONFLICT:
        selected_items = [item for item in group.items if item.assembly_id in selected]
        for item in selected_items:
            conflicts = [
                other for other in selected_items
                if other.assembly_id in item.conflicts_with
            ]
            if conflicts:
                errors.append(SelectionError(
                    type=ValidationErrorType.CONFLICT,
                    group_id=group.id,
                    message=f'Conflicting items selected in group "{group.name}"',
                    details={
                        "item": item.assembly_name,
                        "conflicts": [c.assembly_name for c in conflicts],
                    },
                ))

    return errors


def cost_group(group: ResolvedGroup, selected: List[int]) -> Tuple[GroupBreakdown, List[str]]:
    """Cost every selected id that is a member of the group; report the ones that are not."""
    breakdown = GroupBreakdown(group_id=group.id, group_name=group.name)
    warnings: List[str] = []
    for assembly_id in selected:
        item = group.find_item(assembly_id)
        if item is None:
            warnings.append(f'Assembly {assembly_id} is not part of group "{group.name}"')
            continue
        cost = item.cost
        breakdown.cost += cost
        breakdown.assemblies.append(AssemblyBreakdown(
            assembly_id=item.assembly_id,
            name=item.assembly_name,
            quantity=item.quantity,
            cost=cost,
        ))
    return breakdown, warnings


def validate_selection(selections: Selection, groups: List[ResolvedGroup]) -> ValidationResult:
    """Check a selection against the resolved groups and cost it.

    Groups the caller did not resolve are ignored, as are selections for
    them. A group's selection is looked up under the group's own category.
    """
    errors: List[SelectionError] = []
    warnings: List[str] = []
    breakdown: List[CategoryBreakdown] = []
    total_cost = 0.0

    for category_id, category_groups in group_by_category(groups).items():
        category_selections = selections.get(category_id) or {}
        category_breakdown = CategoryBreakdown(
            category_id=category_id,
            category_name=category_groups[0].category_name,
        )

        for group in category_groups:
            selected = list(category_selections.get(group.id) or [])
            errors.extend(check_group(group, selected))

            group_breakdown, group_warnings = cost_group(group, selected)
            warnings.extend(group_warnings)
            category_breakdown.groups.append(group_breakdown)
            total_cost += group_breakdown.cost

        breakdown.append(category_breakdown)

    return ValidationResult(
        is_valid=not errors,
        errors=errors,
        warnings=warnings,
        total_cost=total_cost,
        breakdown=breakdown,
    )


def default_selection(groups: List[ResolvedGroup]) -> Selection:
    """Initial selection seeded from each group's type and default flags."""
    selection: Selection = {}
    for group in groups:
        category_selection = selection.setdefault(group.category_id, {})
        if group.group_type == GroupType.REQUIRED:
            category_selection[group.id] = [item.assembly_id for item in group.items]
        elif group.group_type == GroupType.CHOOSE_ONE:
            default = next((item for item in group.items if item.is_default), None)
            if default is None and group.items:
                default = group.items[0]
            category_selection[group.id] = [default.assembly_id] if default else []
        else:
            category_selection[group.id] = []
    return selection


def selected_assemblies(selections: Selection, groups: List[ResolvedGroup]) -> List[Tuple[int, float]]:
    """Flatten a selection into (assembly_id, quantity) pairs, merging repeats by assembly."""
    quantities: Dict[int, float] = {}
    for group in groups:
        selected = (selections.get(group.category_id) or {}).get(group.id) or []
        for assembly_id in selected:
            item = group.find_item(assembly_id)
            if item is None:
                continue
            quantities[assembly_id] = quantities.get(assembly_id, 0) + item.quantity
    return list(quantities.items())


def referenced_group_ids(selections: Selection) -> List[str]:
    """Group ids mentioned anywhere in the selection, in first-seen order."""
    group_ids: List[str] = []
    for category_selections in selections.values():
        for group_id in category_selections:
            if group_id not in group_ids:
                group_ids.append(group_id)
    return group_ids
