# Supabase table: materials
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: bigint (primary key, identity)
- name: text (not null, unique)
- part_number: text (nullable)
- manufacturer: text (nullable)
- unit: text (not null)
- price: numeric (not null, default: 0)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
"""
