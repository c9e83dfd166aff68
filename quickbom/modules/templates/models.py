# Supabase tables: templates, template_assemblies, template_assembly_groups, template_assembly_group_items
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

templates:
- id: bigint (primary key, identity)
- name: text (not null, unique)
- description: text (nullable)
- docs: text (nullable)
- assembly_selections: jsonb (nullable) - categoryId -> groupId -> assemblyIds the template was built from
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

template_assemblies:
- id: bigint (primary key, identity)
- template_id: bigint (foreign key to templates.id, not null)
- assembly_id: bigint (foreign key to assemblies.id, not null)
- quantity: numeric (not null, default: 1)

template_assembly_groups:
- same columns as assembly_groups, plus
- template_id: bigint (foreign key to templates.id, not null, on delete cascade)

template_assembly_group_items:
- same columns as assembly_group_items; group_id references template_assembly_groups.id
"""
