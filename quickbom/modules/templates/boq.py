"""Bill of Quantity: flatten a template's assemblies into one line per distinct material."""

from pydantic import Field
from typing import Any, Dict, List, Optional, Tuple

from quickbom.core.schemas import CamelModel


class BoqLine(CamelModel):
    name: str
    part_number: str = ""
    manufacturer: str = ""
    unit: str = ""
    unit_price: float = 0
    total_quantity: float = 0
    total_cost: float = 0
    assemblies: List[str] = Field(default_factory=list)


class BoqResponse(CamelModel):
    template_id: Optional[int] = None
    template_name: Optional[str] = None
    lines: List[BoqLine] = Field(default_factory=list)
    total_cost: float = 0


def material_key(material: Dict[str, Any]) -> Tuple[str, str, str, str]:
    """Materials are merged when name, part number, manufacturer and unit all match."""
    return (
        material.get("name") or "",
        material.get("part_number") or "",
        material.get("manufacturer") or "",
        material.get("unit") or "",
    )


def consolidate(entries: List[Tuple[str, float, List[Dict[str, Any]]]]) -> List[BoqLine]:
    """Merge (assembly_name, assembly_quantity, material_lines) entries into BOQ lines.

    Each material line carries its per-assembly quantity and the material row;
    the consolidated quantity is line quantity times assembly quantity.
    """
    lines: Dict[Tuple[str, str, str, str], BoqLine] = {}
    for assembly_name, assembly_quantity, material_lines in entries:
        for line in material_lines:
            material = line.get("material")
            if not material:
                continue
            quantity = float(line.get("quantity") or 0) * assembly_quantity
            price = float(material.get("price") or 0)
            key = material_key(material)
            boq_line = lines.get(key)
            if boq_line is None:
                name, part_number, manufacturer, unit = key
                boq_line = lines[key] = BoqLine(
                    name=name,
                    part_number=part_number,
                    manufacturer=manufacturer,
                    unit=unit,
                    unit_price=price,
                )
            boq_line.total_quantity += quantity
            boq_line.total_cost += quantity * price
            if assembly_name not in boq_line.assemblies:
                boq_line.assemblies.append(assembly_name)
    return list(lines.values())
