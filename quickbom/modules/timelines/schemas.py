from enum import Enum
from pydantic import Field, field_validator
from typing import Any, List, Optional
from datetime import date, datetime

from quickbom.core.schemas import CamelModel
from quickbom.modules.projects.schemas import Priority


class TimelineStatus(str, Enum):
    PLANNING = "PLANNING"
    IN_PROGRESS = "IN_PROGRESS"
    ON_HOLD = "ON_HOLD"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class TaskType(str, Enum):
    CONSTRUCTION = "CONSTRUCTION"
    ELECTRICAL = "ELECTRICAL"
    PLUMBING = "PLUMBING"
    MECHANICAL = "MECHANICAL"
    DESIGN = "DESIGN"
    PERMIT = "PERMIT"
    SUPERVISION = "SUPERVISION"
    OTHER = "OTHER"


class WorkingDays(CamelModel):
    monday: bool = True
    tuesday: bool = True
    wednesday: bool = True
    thursday: bool = True
    friday: bool = True
    saturday: bool = False
    sunday: bool = False


# Timelines

class TimelineCreate(CamelModel):
    start_date: date
    end_date: Optional[date] = None
    working_days: WorkingDays = Field(default_factory=WorkingDays)
    holidays: List[date] = Field(default_factory=list)


class TimelineUpdate(CamelModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    working_days: Optional[WorkingDays] = None
    holidays: Optional[List[date]] = None
    progress: Optional[float] = Field(None, ge=0, le=100)
    status: Optional[TimelineStatus] = None


# Tasks

class TaskCreate(CamelModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    task_type: TaskType = TaskType.CONSTRUCTION
    planned_start: date
    planned_end: Optional[date] = None  # defaults to planned_start + duration
    duration: int = Field(gt=0)
    milestone_id: Optional[str] = None
    priority: Priority = Priority.MEDIUM
    progress: float = Field(0, ge=0, le=100)
    status: TimelineStatus = TimelineStatus.PLANNING
    assigned_users: List[str] = Field(default_factory=list)
    resources: Optional[Any] = None
    estimated_cost: Optional[float] = Field(None, ge=0)

    @field_validator("milestone_id")
    @classmethod
    def blank_milestone_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v if v and v.strip() else None


class TaskUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    task_type: Optional[TaskType] = None
    planned_start: Optional[date] = None
    planned_end: Optional[date] = None
    duration: Optional[int] = Field(None, gt=0)
    milestone_id: Optional[str] = None
    priority: Optional[Priority] = None
    progress: Optional[float] = Field(None, ge=0, le=100)
    status: Optional[TimelineStatus] = None
    assigned_users: Optional[List[str]] = None
    resources: Optional[Any] = None
    estimated_cost: Optional[float] = Field(None, ge=0)

    @field_validator("milestone_id")
    @classmethod
    def blank_milestone_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v if v and v.strip() else None


class TaskResponse(CamelModel):
    id: str
    timeline_id: str
    milestone_id: Optional[str] = None
    name: str
    description: Optional[str] = None
    task_type: TaskType = TaskType.CONSTRUCTION
    planned_start: date
    planned_end: date
    duration: int
    priority: Priority = Priority.MEDIUM
    progress: float = 0
    status: TimelineStatus = TimelineStatus.PLANNING
    assigned_users: List[str] = Field(default_factory=list)
    resources: Optional[Any] = None
    estimated_cost: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Milestones

class MilestoneCreate(CamelModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    due_date: date
    depends_on: List[str] = Field(default_factory=list)


class MilestoneUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    due_date: Optional[date] = None
    depends_on: Optional[List[str]] = None
    status: Optional[TimelineStatus] = None
    progress: Optional[float] = Field(None, ge=0, le=100)


class MilestoneResponse(CamelModel):
    id: str
    timeline_id: str
    name: str
    description: Optional[str] = None
    due_date: date
    depends_on: List[str] = Field(default_factory=list)
    status: TimelineStatus = TimelineStatus.PLANNING
    progress: float = 0
    tasks: List[TaskResponse] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TimelineResponse(CamelModel):
    id: str
    project_id: int
    start_date: date
    end_date: Optional[date] = None
    duration: Optional[int] = None
    working_days: WorkingDays = Field(default_factory=WorkingDays)
    holidays: List[date] = Field(default_factory=list)
    progress: float = 0
    status: TimelineStatus = TimelineStatus.PLANNING
    milestones: List[MilestoneResponse] = Field(default_factory=list)
    tasks: List[TaskResponse] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Envelopes

class ProjectTimelineLookup(CamelModel):
    exists: bool
    message: Optional[str] = None
    timeline: Optional[TimelineResponse] = None


class TimelineEnvelope(CamelModel):
    message: str
    timeline: TimelineResponse


class TaskEnvelope(CamelModel):
    message: str
    task: TaskResponse


class MilestoneEnvelope(CamelModel):
    message: str
    milestone: MilestoneResponse
