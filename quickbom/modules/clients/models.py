# Supabase table: clients
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: bigint (primary key, identity)
- client_type: text (not null, default: 'INDIVIDUAL') - values: INDIVIDUAL, COMPANY, GOVERNMENT, CONTRACTOR, PARTNERSHIP, NON_PROFIT
- category: text (not null, default: 'RESIDENTIAL') - values: RESIDENTIAL, COMMERCIAL, INDUSTRIAL, INSTITUTIONAL, INFRASTRUCTURE, RENOVATION, LAND_DEVELOPMENT
- status: text (not null, default: 'ACTIVE') - values: ACTIVE, INACTIVE, BLACKLISTED, PENDING_APPROVAL, UNDER_REVIEW
- company_name, company_type, business_license, tax_id: text (nullable)
- contact_person: text (not null)
- contact_title: text (nullable)
- contact_email: text (not null, unique)
- contact_phone: text (not null)
- contact_phone2: text (nullable)
- address, city, province: text (not null)
- postal_code: text (nullable)
- country: text (not null, default: 'Indonesia')
- industry, company_size, payment_terms, website, special_notes: text (nullable)
- annual_revenue: numeric (nullable)
- credit_limit: numeric (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

Project counts and contract values are not stored; they are computed from
projects.client_id / projects.status / projects.total_price on read.
"""
