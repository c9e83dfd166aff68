from fastapi import APIRouter, Depends
from quickbom.database.supabase_client import get_supabase
from quickbom.modules.timelines.schemas import (
    TimelineCreate, TimelineUpdate, TimelineResponse, ProjectTimelineLookup, TimelineEnvelope,
    TaskCreate, TaskUpdate, TaskResponse, TaskEnvelope,
    MilestoneCreate, MilestoneUpdate, MilestoneResponse, MilestoneEnvelope,
)
from quickbom.modules.timelines.service import TimelineService
from supabase import Client
from typing import List

# Timelines are reached either through their project or directly by id
project_router = APIRouter(prefix="/projects", tags=["timelines"])
router = APIRouter(prefix="/timeline", tags=["timelines"])


def get_timeline_service(supabase: Client = Depends(get_supabase)) -> TimelineService:
    return TimelineService(supabase)


# Project Timeline

@project_router.get("/{project_id}/timeline", response_model=ProjectTimelineLookup)
async def get_project_timeline(
    project_id: int,
    service: TimelineService = Depends(get_timeline_service)
):
    """Timeline with milestones and tasks, or exists=false when none was created"""
    return service.get_project_timeline(project_id)


@project_router.post("/{project_id}/timeline", response_model=TimelineEnvelope, status_code=201)
async def create_project_timeline(
    project_id: int,
    data: TimelineCreate,
    service: TimelineService = Depends(get_timeline_service)
):
    timeline = service.create_project_timeline(project_id, data)
    return TimelineEnvelope(message="Timeline created successfully", timeline=timeline)


@project_router.put("/{project_id}/timeline", response_model=TimelineEnvelope)
async def update_project_timeline(
    project_id: int,
    data: TimelineUpdate,
    service: TimelineService = Depends(get_timeline_service)
):
    timeline = service.update_project_timeline(project_id, data)
    return TimelineEnvelope(message="Timeline updated successfully", timeline=timeline)


@project_router.delete("/{project_id}/timeline")
async def delete_project_timeline(
    project_id: int,
    service: TimelineService = Depends(get_timeline_service)
):
    service.delete_project_timeline(project_id)
    return {"message": "Project timeline deleted successfully"}


# Timeline

@router.get("/{timeline_id}", response_model=TimelineResponse)
async def get_timeline(
    timeline_id: str,
    service: TimelineService = Depends(get_timeline_service)
):
    return service.get_timeline(timeline_id)


@router.put("/{timeline_id}", response_model=TimelineEnvelope)
async def update_timeline(
    timeline_id: str,
    data: TimelineUpdate,
    service: TimelineService = Depends(get_timeline_service)
):
    timeline = service.update_timeline(timeline_id, data)
    return TimelineEnvelope(message="Timeline updated successfully", timeline=timeline)


@router.delete("/{timeline_id}")
async def delete_timeline(
    timeline_id: str,
    service: TimelineService = Depends(get_timeline_service)
):
    service.delete_timeline(timeline_id)
    return {"message": "Timeline deleted successfully"}


# Tasks

@router.get("/{timeline_id}/tasks", response_model=List[TaskResponse])
async def list_tasks(
    timeline_id: str,
    service: TimelineService = Depends(get_timeline_service)
):
    """Tasks ordered by planned start"""
    return service.list_tasks(timeline_id)


@router.post("/{timeline_id}/tasks", response_model=TaskEnvelope, status_code=201)
async def create_task(
    timeline_id: str,
    data: TaskCreate,
    service: TimelineService = Depends(get_timeline_service)
):
    task = service.create_task(timeline_id, data)
    return TaskEnvelope(message="Task created successfully", task=task)


@router.put("/{timeline_id}/tasks/{task_id}", response_model=TaskEnvelope)
async def update_task(
    timeline_id: str,
    task_id: str,
    data: TaskUpdate,
    service: TimelineService = Depends(get_timeline_service)
):
    task = service.update_task(timeline_id, task_id, data)
    return TaskEnvelope(message="Task updated successfully", task=task)


@router.delete("/{timeline_id}/tasks/{task_id}")
async def delete_task(
    timeline_id: str,
    task_id: str,
    service: TimelineService = Depends(get_timeline_service)
):
    service.delete_task(timeline_id, task_id)
    return {"message": "Task deleted successfully"}


# Milestones

@router.get("/{timeline_id}/milestones", response_model=List[MilestoneResponse])
async def list_milestones(
    timeline_id: str,
    service: TimelineService = Depends(get_timeline_service)
):
    """Milestones ordered by due date, each with its tasks"""
    return service.list_milestones(timeline_id)


@router.post("/{timeline_id}/milestones", response_model=MilestoneEnvelope, status_code=201)
async def create_milestone(
    timeline_id: str,
    data: MilestoneCreate,
    service: TimelineService = Depends(get_timeline_service)
):
    milestone = service.create_milestone(timeline_id, data)
    return MilestoneEnvelope(message="Milestone created successfully", milestone=milestone)


@router.put("/{timeline_id}/milestones/{milestone_id}", response_model=MilestoneEnvelope)
async def update_milestone(
    timeline_id: str,
    milestone_id: str,
    data: MilestoneUpdate,
    service: TimelineService = Depends(get_timeline_service)
):
    milestone = service.update_milestone(timeline_id, milestone_id, data)
    return MilestoneEnvelope(message="Milestone updated successfully", milestone=milestone)


@router.delete("/{timeline_id}/milestones/{milestone_id}")
async def delete_milestone(
    timeline_id: str,
    milestone_id: str,
    service: TimelineService = Depends(get_timeline_service)
):
    service.delete_milestone(timeline_id, milestone_id)
    return {"message": "Milestone deleted successfully"}
