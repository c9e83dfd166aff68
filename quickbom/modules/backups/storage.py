import boto3
from botocore.exceptions import ClientError
from supabase import Client
from quickbom.config import Settings
from typing import Any, Dict, List
import logging

logger = logging.getLogger(__name__)


class S3Storage:
    """Backup files in an S3 bucket under the backups/ prefix."""

    prefix = "backups/"

    def __init__(self, settings: Settings):
        if not settings.s3_configured:
            raise ValueError("AWS S3 credentials and backup bucket must be configured")

        self.s3_client = boto3.client(
            's3',
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            region_name=settings.aws_region
        )
        self.bucket_name = settings.backup_s3_bucket

    def upload_file(self, file_content: bytes, name: str, content_type: str = "application/json") -> str:
        """Upload file to S3 and return the S3 URL"""
        key = f"{self.prefix}{name}"
        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=file_content,
                ContentType=content_type
            )
            return f"s3://{self.bucket_name}/{key}"
        except ClientError as e:
            logger.error(f"Failed to upload file to S3: {str(e)}")
            raise

    def download_file(self, name: str) -> bytes:
        try:
            response = self.s3_client.get_object(Bucket=self.bucket_name, Key=f"{self.prefix}{name}")
            return response["Body"].read()
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in ("NoSuchKey", "404"):
                raise FileNotFoundError(name)
            logger.error(f"Failed to download file from S3: {str(e)}")
            raise

    def list_files(self) -> List[Dict[str, Any]]:
        """Return [{name, size, last_modified}] for every stored file."""
        files = []
        paginator = self.s3_client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=self.bucket_name, Prefix=self.prefix):
            for obj in page.get("Contents", []):
                files.append({
                    "name": obj["Key"][len(self.prefix):],
                    "size": obj.get("Size", 0),
                    "last_modified": obj.get("LastModified"),
                })
        return files

    def delete_file(self, name: str) -> bool:
        """Delete file from S3"""
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=f"{self.prefix}{name}")
            return True
        except ClientError as e:
            logger.error(f"Failed to delete file from S3: {str(e)}")
            return False


class SupabaseStorage:
    """Backup files in a Supabase Storage bucket."""

    def __init__(self, supabase: Client, bucket: str):
        self.supabase = supabase
        self.bucket_name = bucket

    def upload_file(self, file_content: bytes, name: str, content_type: str = "application/json") -> str:
        self.supabase.storage.from_(self.bucket_name).upload(
            name,
            file_content,
            file_options={"content-type": content_type, "upsert": "true"}
        )
        return f"{self.bucket_name}/{name}"

    def download_file(self, name: str) -> bytes:
        try:
            return self.supabase.storage.from_(self.bucket_name).download(name)
        except Exception as e:
            if "not found" in str(e).lower():
                raise FileNotFoundError(name)
            raise

    def list_files(self) -> List[Dict[str, Any]]:
        entries = self.supabase.storage.from_(self.bucket_name).list()
        files = []
        for entry in entries or []:
            metadata = entry.get("metadata") or {}
            files.append({
                "name": entry["name"],
                "size": metadata.get("size", 0),
                "last_modified": entry.get("updated_at") or entry.get("created_at"),
            })
        return files

    def delete_file(self, name: str) -> bool:
        try:
            self.supabase.storage.from_(self.bucket_name).remove([name])
            return True
        except Exception as e:
            logger.warning(f"Failed to delete from Supabase Storage ({name}): {e}")
            return False
