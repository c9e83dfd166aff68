# Supabase tables: assembly_groups, assembly_group_items
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

assembly_groups:
- id: uuid (primary key)
- name: text (not null)
- description: text (nullable)
- group_type: text (not null) - values: REQUIRED, CHOOSE_ONE, OPTIONAL, CONFLICT
- category_id: bigint (foreign key to assembly_categories.id, not null)
- sort_order: integer (not null, default: 0)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

assembly_group_items:
- id: bigint (primary key, identity)
- group_id: uuid (foreign key to assembly_groups.id, not null, on delete cascade)
- assembly_id: bigint (foreign key to assemblies.id, not null)
- quantity: numeric (not null, default: 1) - multiplier applied to the assembly's unit cost
- conflicts_with: bigint[] (not null, default: '{}') - assembly ids, only meaningful for CONFLICT groups
- is_default: boolean (not null, default: false)
- sort_order: integer (not null, default: 0)
- unique constraint on (group_id, assembly_id)
"""
