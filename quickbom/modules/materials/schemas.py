from pydantic import Field
from typing import Optional
from datetime import datetime

from quickbom.core.schemas import CamelModel


class MaterialCreate(CamelModel):
    name: str = Field(min_length=1)
    part_number: Optional[str] = None
    manufacturer: Optional[str] = None
    unit: str = Field(min_length=1)
    price: float = Field(default=0, ge=0)


class MaterialUpdate(CamelModel):
    name: Optional[str] = None
    part_number: Optional[str] = None
    manufacturer: Optional[str] = None
    unit: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)


class MaterialResponse(CamelModel):
    id: int
    name: str
    part_number: Optional[str] = None
    manufacturer: Optional[str] = None
    unit: str
    price: float = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
