from pydantic import Field
from typing import Optional, List
from datetime import datetime

from quickbom.core.schemas import CamelModel
from quickbom.modules.assembly_groups.schemas import AssemblyGroupCreate, AssemblyGroupResponse
from quickbom.modules.assembly_groups.selection import Selection


class TemplateAssemblyInput(CamelModel):
    assembly_id: int
    quantity: float = Field(default=1, gt=0)


class TemplateCreate(CamelModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    docs: Optional[str] = None
    assemblies: Optional[List[TemplateAssemblyInput]] = None
    assembly_selections: Optional[Selection] = None


class TemplateUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    docs: Optional[str] = None
    assemblies: Optional[List[TemplateAssemblyInput]] = None  # replaces the assembly list when given
    assembly_selections: Optional[Selection] = None


class TemplateAssemblyResponse(CamelModel):
    assembly_id: int
    name: str
    quantity: float
    unit_cost: float = 0
    total_cost: float = 0


class TemplateResponse(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    docs: Optional[str] = None
    assembly_selections: Optional[Selection] = None
    assemblies: List[TemplateAssemblyResponse] = Field(default_factory=list)
    total_cost: float = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TemplateSelectionRequest(CamelModel):
    template_id: Optional[int] = None
    selections: Optional[Selection] = None


class TemplateGroupCreate(AssemblyGroupCreate):
    template_id: int


class TemplateGroupResponse(AssemblyGroupResponse):
    template_id: Optional[int] = None
