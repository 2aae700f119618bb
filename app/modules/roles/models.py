# Supabase table: user_roles
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key, default: gen_random_uuid())
- user_id: uuid (foreign key to auth.users.id, unique, not null)
- role: text (not null, default: 'reader') - values: reader, publisher
- created_at: timestamp (default: now())

A missing row means "not resolved yet"; SessionContext creates a reader row
on first lookup.
"""
