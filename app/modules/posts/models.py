# Supabase table: posts
# Supabase Storage bucket: post-images (public)
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key, default: gen_random_uuid())
- title: text (not null)
- content: text (not null)
- category_id: text (foreign key to categories.id, not null)
- author_id: uuid (foreign key to authors.id, not null) - the byline
- thumbnail_url: text (nullable)
- publisher_id: uuid (foreign key to auth.users.id, not null) - account that created the post
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

Thumbnails are stored at thumbnails/{user_id}-{epoch_ms}.{ext} in the
post-images bucket (or the configured S3 bucket) and referenced by public URL.
"""
