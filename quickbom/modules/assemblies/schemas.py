from enum import Enum
from pydantic import Field
from typing import Optional, List
from datetime import datetime

from quickbom.core.schemas import CamelModel
from quickbom.modules.materials.schemas import MaterialResponse


class AssemblyModule(str, Enum):
    ELECTRONIC = "ELECTRONIC"
    ELECTRICAL = "ELECTRICAL"
    ASSEMBLY = "ASSEMBLY"
    INSTALLATION = "INSTALLATION"
    MECHANICAL = "MECHANICAL"


class AssemblyMaterialInput(CamelModel):
    material_id: int
    quantity: float = Field(gt=0)


class AssemblyCreate(CamelModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    category_id: int
    module: AssemblyModule = AssemblyModule.ELECTRICAL
    docs: Optional[str] = None
    materials: List[AssemblyMaterialInput] = Field(default_factory=list)


class AssemblyUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    category_id: Optional[int] = None
    module: Optional[AssemblyModule] = None
    docs: Optional[str] = None
    materials: Optional[List[AssemblyMaterialInput]] = None  # replaces the material list when given


class AssemblyMaterialResponse(CamelModel):
    material_id: int
    quantity: float
    material: Optional[MaterialResponse] = None


class AssemblyResponse(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    category_id: Optional[int] = None
    module: AssemblyModule = AssemblyModule.ELECTRICAL
    docs: Optional[str] = None
    materials: List[AssemblyMaterialResponse] = Field(default_factory=list)
    unit_cost: float = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
