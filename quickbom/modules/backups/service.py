from supabase import Client
from quickbom.config import settings, Settings
from quickbom.core.time import utc_now
from quickbom.modules.backups.schemas import (
    BackupMetadata, BackupStats, BackupData, RestoreResult, RestoredCounts,
)
from quickbom.modules.backups.storage import S3Storage, SupabaseStorage
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
import json
import logging
import re

logger = logging.getLogger(__name__)

# Parent tables are upserted in this order; link tables are replaced after them
PARENT_TABLES = ["materials", "assembly_categories", "assemblies", "templates"]
LINK_TABLES = ["assembly_materials", "template_assemblies"]

_MANUAL_ID = re.compile(r"^manual_.*_(\d{4}-\d{2}-\d{2})T(\d{2})-(\d{2})-(\d{2})-(\d{3})Z$")
_DAILY_ID = re.compile(r"^daily_backup_(\d{4}-\d{2}-\d{2})$")


def make_backup_id(name: Optional[str], now: datetime) -> str:
    """manual_<name>_<timestamp> for named backups, daily_backup_<date> otherwise."""
    if name:
        sanitised = re.sub(r"[^a-zA-Z0-9_-]", "_", name.strip())[:50]
        stamp = now.strftime("%Y-%m-%dT%H-%M-%S-") + f"{now.microsecond // 1000:03d}Z"
        return f"manual_{sanitised}_{stamp}"
    return f"daily_backup_{now.strftime('%Y-%m-%d')}"


def timestamp_from_id(backup_id: str) -> Optional[datetime]:
    match = _MANUAL_ID.match(backup_id)
    if match:
        date, hour, minute, second, millis = match.groups()
        return datetime.fromisoformat(f"{date}T{hour}:{minute}:{second}.{millis}+00:00")
    match = _DAILY_ID.match(backup_id)
    if match:
        return datetime.fromisoformat(f"{match.group(1)}T00:00:00+00:00")
    return None


def _as_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    return None


class BackupService:
    def __init__(self, supabase: Client, storage=None, config: Settings = settings):
        self.supabase = supabase
        self.retention_days = config.backup_retention_days
        if storage is not None:
            self.storage = storage
        elif config.s3_configured:
            self.storage = S3Storage(config)
        else:
            self.storage = SupabaseStorage(supabase, config.backup_storage_bucket)

    def _snapshot(self) -> BackupData:
        tables = {}
        for table in PARENT_TABLES + LINK_TABLES:
            result = self.supabase.table(table).select("*").execute()
            tables[table] = result.data or []
        return BackupData(timestamp=utc_now(), **tables)

    def _metadata(self, entry: Dict[str, Any]) -> Optional[BackupMetadata]:
        name = entry["name"]
        if not name.endswith(".json"):
            return None
        backup_id = name[:-len(".json")]
        timestamp = timestamp_from_id(backup_id) or _as_datetime(entry.get("last_modified"))
        if timestamp is None:
            return None
        return BackupMetadata(
            id=backup_id,
            timestamp=timestamp,
            size=entry.get("size") or 0,
            file_path=name,
        )

    def create_backup(self, name: Optional[str] = None) -> BackupMetadata:
        now = datetime.now(timezone.utc)
        backup_id = make_backup_id(name, now)
        try:
            snapshot = self._snapshot()
            content = json.dumps(snapshot.model_dump(), default=str).encode("utf-8")
            path = self.storage.upload_file(content, f"{backup_id}.json")
            logger.info(f"Created backup {backup_id} ({len(content)} bytes)")
            return BackupMetadata(id=backup_id, timestamp=now, size=len(content), file_path=path)
        except Exception as e:
            logger.error(f"Backup {backup_id} failed: {e}")
            return BackupMetadata(id=backup_id, timestamp=now, status="failed", error=str(e))

    def list_backups(self) -> List[BackupMetadata]:
        try:
            entries = self.storage.list_files()
        except Exception as e:
            logger.error(f"Error listing backups: {e}")
            raise HTTPException(status_code=500, detail="Failed to list backups")
        backups = [m for m in (self._metadata(entry) for entry in entries) if m is not None]
        backups.sort(key=lambda b: b.timestamp, reverse=True)
        return backups

    def get_backup(self, backup_id: str) -> BackupData:
        try:
            content = self.storage.download_file(f"{backup_id}.json")
        except FileNotFoundError:
            raise HTTPException(status_code=404, detail="Backup not found")
        except Exception as e:
            logger.error(f"Error downloading backup {backup_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch backup")
        try:
            return BackupData(**json.loads(content))
        except (ValueError, TypeError) as e:
            logger.error(f"Backup {backup_id} is not a valid snapshot: {e}")
            raise HTTPException(status_code=422, detail="Backup file is corrupt")

    def delete_backup(self, backup_id: str) -> None:
        if not any(b.id == backup_id for b in self.list_backups()):
            raise HTTPException(status_code=404, detail="Backup not found")
        if not self.storage.delete_file(f"{backup_id}.json"):
            raise HTTPException(status_code=500, detail="Failed to delete backup")
        logger.info(f"Deleted backup {backup_id}")

    def cleanup_old_backups(self) -> int:
        """Delete backups older than the retention window. Returns how many were removed."""
        cutoff = datetime.now(timezone.utc) - timedelta(days=self.retention_days)
        deleted = 0
        for backup in self.list_backups():
            if backup.timestamp < cutoff and self.storage.delete_file(f"{backup.id}.json"):
                deleted += 1
        logger.info(f"Backup cleanup removed {deleted} backup(s) older than {self.retention_days} days")
        return deleted

    def get_stats(self) -> BackupStats:
        backups = self.list_backups()
        cutoff = datetime.now(timezone.utc) - timedelta(days=self.retention_days)
        return BackupStats(
            total_backups=len(backups),
            total_size=sum(b.size for b in backups),
            successful_backups=len([b for b in backups if b.status == "success"]),
            failed_backups=len([b for b in backups if b.status != "success"]),
            recent_backups=len([b for b in backups if b.timestamp >= cutoff]),
            last_backup=backups[0].timestamp if backups else None,
        )

    def restore_backup(self, backup_id: str) -> RestoreResult:
        """
        Restore catalog and template tables from a snapshot.

        Link tables are cleared first, then parent rows are upserted by id and
        the snapshot's link rows are inserted. Rows created after the backup
        are kept; projects are never touched.
        """
        data = self.get_backup(backup_id)
        try:
            for table in LINK_TABLES:
                self.supabase.table(table).delete().gte("id", 0).execute()
            for table in PARENT_TABLES:
                rows = getattr(data, table)
                if rows:
                    self.supabase.table(table).upsert(rows).execute()
            for table in LINK_TABLES:
                rows = getattr(data, table)
                if rows:
                    self.supabase.table(table).insert(rows).execute()
        except Exception as e:
            logger.error(f"Restore of {backup_id} failed: {e}")
            return RestoreResult(success=False, message=f"Restore failed: {e}")

        logger.info(f"Restored backup {backup_id}")
        return RestoreResult(
            success=True,
            message=f"Backup {backup_id} restored successfully",
            restored=RestoredCounts(
                materials=len(data.materials),
                assembly_categories=len(data.assembly_categories),
                assemblies=len(data.assemblies),
                templates=len(data.templates),
            ),
        )
