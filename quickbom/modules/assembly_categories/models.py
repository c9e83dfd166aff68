# Supabase table: assembly_categories
# This file documents the expected database schema

"""
Expected Supabase table structure:
- id: bigint (primary key, identity)
- name: text (not null, unique) - e.g. "Sanitary & Plumbing"
- description: text (nullable)
- color: text (nullable)
- icon: text (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

Assemblies reference a category through assemblies.category_id, and so do
assembly_groups.category_id. A category cannot be deleted while assemblies
still reference it.
"""
