# Supabase tables: assemblies, assembly_materials
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

assemblies:
- id: bigint (primary key, identity)
- name: text (not null)
- description: text (nullable)
- category_id: bigint (foreign key to assembly_categories.id, not null)
- module: text (not null, default: 'ELECTRICAL') - values: ELECTRONIC, ELECTRICAL, ASSEMBLY, INSTALLATION, MECHANICAL
- docs: text (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

assembly_materials:
- id: bigint (primary key, identity)
- assembly_id: bigint (foreign key to assemblies.id, not null)
- material_id: bigint (foreign key to materials.id, not null)
- quantity: numeric (not null)

Unit cost of an assembly is sum(material.price * assembly_materials.quantity).
"""
