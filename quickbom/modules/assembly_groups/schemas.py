from pydantic import Field
from typing import Optional, List
from datetime import datetime

from quickbom.core.schemas import CamelModel
from quickbom.modules.assembly_groups.selection import GroupType, ResolvedGroupItem, Selection


class GroupItemInput(CamelModel):
    assembly_id: int
    quantity: float = Field(default=1, gt=0)
    conflicts_with: List[int] = Field(default_factory=list)
    is_default: bool = False
    sort_order: int = 0


class AssemblyGroupCreate(CamelModel):
    category_id: int
    name: str = Field(min_length=1)
    description: Optional[str] = None
    group_type: GroupType
    sort_order: int = 0
    items: List[GroupItemInput] = Field(default_factory=list)


class AssemblyGroupUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    group_type: Optional[GroupType] = None
    sort_order: Optional[int] = None
    items: Optional[List[GroupItemInput]] = None  # replaces all items when given


class AssemblyGroupResponse(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    group_type: GroupType
    category_id: int
    category_name: str = ""
    sort_order: int = 0
    items: List[ResolvedGroupItem] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AssemblyGroupDeleteResponse(CamelModel):
    message: str
    items_removed: int


class ItemQuantityUpdate(CamelModel):
    quantity: Optional[float] = None


class ItemQuantityResponse(CamelModel):
    success: bool = True
    message: str
    quantity: float


class SelectionRequest(CamelModel):
    selections: Optional[Selection] = None
