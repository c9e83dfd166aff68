from enum import Enum
from pydantic import Field
from typing import Optional
from datetime import date, datetime

from quickbom.core.schemas import CamelModel


class ProjectStatus(str, Enum):
    PLANNING = "PLANNING"
    APPROVED = "APPROVED"
    IN_PROGRESS = "IN_PROGRESS"
    ON_HOLD = "ON_HOLD"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    DELAYED = "DELAYED"


class Priority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class ProjectCreate(CamelModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    client_id: Optional[int] = None
    project_type: Optional[str] = None
    location: Optional[str] = None
    area: Optional[float] = Field(None, ge=0)
    budget: Optional[float] = Field(None, ge=0)
    status: ProjectStatus = ProjectStatus.PLANNING
    priority: Priority = Priority.MEDIUM
    progress: float = Field(0, ge=0, le=100)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    actual_start: Optional[date] = None
    actual_end: Optional[date] = None
    from_template_id: Optional[int] = None


class ProjectUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    client_id: Optional[int] = None
    project_type: Optional[str] = None
    location: Optional[str] = None
    area: Optional[float] = Field(None, ge=0)
    budget: Optional[float] = Field(None, ge=0)
    status: Optional[ProjectStatus] = None
    priority: Optional[Priority] = None
    progress: Optional[float] = Field(None, ge=0, le=100)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    actual_start: Optional[date] = None
    actual_end: Optional[date] = None
    from_template_id: Optional[int] = None


class ProjectResponse(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    client_id: Optional[int] = None
    project_type: Optional[str] = None
    location: Optional[str] = None
    area: Optional[float] = None
    budget: Optional[float] = None
    status: ProjectStatus = ProjectStatus.PLANNING
    priority: Priority = Priority.MEDIUM
    progress: float = 0
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    actual_start: Optional[date] = None
    actual_end: Optional[date] = None
    from_template_id: Optional[int] = None
    total_price: float = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
