# Supabase table: categories
# This file documents the expected database schema
# Rows are seeded from app/config/categories_config.py by scripts/seed_categories.py

"""
Expected Supabase table structure:
- id: text (primary key) - slug, e.g. 'physical-activity'
- name: text (not null) - display name
- description: text (nullable)
- created_at: timestamp (default: now())
"""
