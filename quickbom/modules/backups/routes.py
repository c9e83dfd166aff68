from fastapi import APIRouter, Depends, HTTPException
from quickbom.database.supabase_client import get_supabase
from quickbom.modules.backups.schemas import (
    BackupCreate, BackupMetadata, BackupStats, BackupData, RestoreResult, CleanupResult,
)
from quickbom.modules.backups.service import BackupService
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/backups", tags=["backups"])


def get_backup_service(supabase: Client = Depends(get_supabase)) -> BackupService:
    return BackupService(supabase)


@router.post("", response_model=BackupMetadata, status_code=201)
async def create_backup(
    body: Optional[BackupCreate] = None,
    service: BackupService = Depends(get_backup_service)
):
    """Snapshot catalog and template tables to backup storage"""
    backup = service.create_backup(body.name if body else None)
    if backup.status != "success":
        raise HTTPException(status_code=500, detail=f"Backup failed: {backup.error}")
    return backup


@router.get("", response_model=List[BackupMetadata])
async def list_backups(service: BackupService = Depends(get_backup_service)):
    return service.list_backups()


@router.get("/stats", response_model=BackupStats)
async def backup_stats(service: BackupService = Depends(get_backup_service)):
    return service.get_stats()


@router.post("/cleanup", response_model=CleanupResult)
async def cleanup_backups(service: BackupService = Depends(get_backup_service)):
    """Delete backups older than the configured retention window"""
    return CleanupResult(deleted=service.cleanup_old_backups())


@router.get("/{backup_id}", response_model=BackupData)
async def get_backup(
    backup_id: str,
    service: BackupService = Depends(get_backup_service)
):
    return service.get_backup(backup_id)


@router.post("/{backup_id}/restore", response_model=RestoreResult)
async def restore_backup(
    backup_id: str,
    service: BackupService = Depends(get_backup_service)
):
    result = service.restore_backup(backup_id)
    if not result.success:
        raise HTTPException(status_code=500, detail=result.message)
    return result


@router.delete("/{backup_id}")
async def delete_backup(
    backup_id: str,
    service: BackupService = Depends(get_backup_service)
):
    service.delete_backup(backup_id)
    return {"message": "Backup deleted successfully"}
