from pydantic import Field
from typing import Optional, List
from datetime import datetime

from quickbom.core.schemas import CamelModel


class CategoryCreate(CamelModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None


class CategoryUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None


class CategoryResponse(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CategoryAssemblySummary(CamelModel):
    """Minimal assembly info for listing a category's assemblies."""
    id: int
    name: str
    description: Optional[str] = None


class CategoryWithAssemblies(CategoryResponse):
    assemblies: List[CategoryAssemblySummary] = Field(default_factory=list)
    assembly_count: int = 0
