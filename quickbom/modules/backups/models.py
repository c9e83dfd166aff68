# Backups are JSON files, not table rows.
# This file documents the snapshot layout written by service.py

"""
Storage: S3 (backups/<id>.json in BACKUP_S3_BUCKET) when AWS credentials are
configured, otherwise the Supabase Storage bucket BACKUP_STORAGE_BUCKET
(<id>.json at the bucket root).

Backup ids:
- daily_backup_<YYYY-MM-DD>                        (unnamed backup, one per day)
- manual_<sanitised name>_<YYYY-MM-DDTHH-MM-SS-mmmZ> (named backup)

Snapshot document:
{
  "version": "1.0",
  "timestamp": "<ISO 8601>",
  "materials": [<materials rows>],
  "assembly_categories": [<assembly_categories rows>],
  "assemblies": [<assemblies rows>],
  "assembly_materials": [<assembly_materials rows>],
  "templates": [<templates rows>],
  "template_assemblies": [<template_assemblies rows>]
}

Projects, assembly groups and template groups are not part of a snapshot.
"""
