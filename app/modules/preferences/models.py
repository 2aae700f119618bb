# Supabase table: user_preferences
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key, default: gen_random_uuid())
- user_id: uuid (foreign key to auth.users.id, unique, not null)
- selected_categories: text[] (not null, default: {}) - category ids
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

Saved as a full replace (upsert on user_id).
"""
