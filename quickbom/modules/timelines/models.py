# Supabase tables: project_timelines, project_milestones, project_tasks
# This file documents the expected database schema

"""
Expected Supabase table structure:

project_timelines:
- id: uuid (primary key)
- project_id: bigint (foreign key to projects.id, unique, on delete cascade)
- start_date: date (not null)
- end_date: date (nullable)
- duration: integer (nullable) - days from start_date to end_date
- working_days: jsonb (not null) - {"monday": true, ..., "sunday": false}
- holidays: jsonb (not null, default: '[]') - list of ISO dates
- progress: numeric (not null, default: 0)
- status: text (not null, default: 'PLANNING') - values: PLANNING, IN_PROGRESS, ON_HOLD, COMPLETED, CANCELLED
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

project_milestones:
- id: uuid (primary key)
- timeline_id: uuid (foreign key to project_timelines.id, on delete cascade)
- name: text (not null)
- description: text (nullable)
- due_date: date (not null)
- depends_on: jsonb (not null, default: '[]') - ids of milestones this one waits for
- status: text (not null, default: 'PLANNING')
- progress: numeric (not null, default: 0)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

project_tasks:
- id: uuid (primary key)
- timeline_id: uuid (foreign key to project_timelines.id, on delete cascade)
- milestone_id: uuid (foreign key to project_milestones.id, nullable, on delete set null)
- name: text (not null)
- description: text (nullable)
- task_type: text (not null, default: 'CONSTRUCTION') - values: CONSTRUCTION, ELECTRICAL, PLUMBING, MECHANICAL, DESIGN, PERMIT, SUPERVISION, OTHER
- planned_start: date (not null)
- planned_end: date (not null)
- duration: integer (not null) - days
- priority: text (not null, default: 'MEDIUM') - values: LOW, MEDIUM, HIGH, CRITICAL
- progress: numeric (not null, default: 0)
- status: text (not null, default: 'PLANNING')
- assigned_users: jsonb (not null, default: '[]')
- resources: jsonb (nullable)
- estimated_cost: numeric (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
"""
