# Supabase table: authors
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key, default: gen_random_uuid())
- name: text (not null)
- avatar_url: text (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

An author is a byline managed separately from the publisher account that
creates the post (posts.author_id -> authors.id).
"""
