from pydantic import Field
from typing import Any, Dict, List, Optional
from datetime import datetime

from quickbom.core.schemas import CamelModel


class BackupCreate(CamelModel):
    name: Optional[str] = None


class BackupMetadata(CamelModel):
    id: str
    timestamp: datetime
    size: int = 0
    status: str = "success"
    error: Optional[str] = None
    file_path: Optional[str] = None


class BackupStats(CamelModel):
    total_backups: int = 0
    total_size: int = 0
    successful_backups: int = 0
    failed_backups: int = 0
    recent_backups: int = 0
    last_backup: Optional[datetime] = None


class BackupData(CamelModel):
    version: str = "1.0"
    timestamp: str
    materials: List[Dict[str, Any]] = Field(default_factory=list)
    assembly_categories: List[Dict[str, Any]] = Field(default_factory=list)
    assemblies: List[Dict[str, Any]] = Field(default_factory=list)
    assembly_materials: List[Dict[str, Any]] = Field(default_factory=list)
    templates: List[Dict[str, Any]] = Field(default_factory=list)
    template_assemblies: List[Dict[str, Any]] = Field(default_factory=list)


class RestoredCounts(CamelModel):
    materials: int = 0
    assembly_categories: int = 0
    assemblies: int = 0
    templates: int = 0


class RestoreResult(CamelModel):
    success: bool
    message: str
    restored: RestoredCounts = Field(default_factory=RestoredCounts)


class CleanupResult(CamelModel):
    deleted: int
