# Supabase table: projects
# This file documents the expected database schema

"""
Expected Supabase table structure:
- id: bigint (primary key, identity)
- name: text (not null)
- description: text (nullable)
- client_id: bigint (foreign key to clients.id, nullable)
- project_type: text (nullable)
- location: text (nullable)
- area: numeric (nullable)
- budget: numeric (nullable)
- status: text (not null, default: 'PLANNING') - values: PLANNING, APPROVED, IN_PROGRESS, ON_HOLD, COMPLETED, CANCELLED, DELAYED
- priority: text (not null, default: 'MEDIUM') - values: LOW, MEDIUM, HIGH, CRITICAL
- progress: numeric (not null, default: 0) - percent complete, 0-100
- start_date: date (nullable)
- end_date: date (nullable)
- actual_start: date (nullable)
- actual_end: date (nullable)
- from_template_id: bigint (foreign key to templates.id, nullable) - the template whose assemblies make up the BOQ
- total_price: numeric (not null, default: 0) - template cost captured when the template is set
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

Deleting a project cascades to its project_timelines row (see modules/timelines/models.py).
"""
