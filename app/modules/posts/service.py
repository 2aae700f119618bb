from supabase import Client
from app.config.categories_config import get_display_name, is_known_category
from app.modules.authors.service import AuthorService
from app.modules.posts.schemas import PostCreate, PostUpdate, PostResponse, PublisherStats
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
from datetime import datetime, timedelta, timezone
import logging

logger = logging.getLogger(__name__)

# Posts with their byline embedded
POST_SELECT = "*, authors(id, name, avatar_url)"
RECENT_WINDOW = timedelta(days=7)


def to_post(row: Dict[str, Any]) -> PostResponse:
    data = dict(row)
    data["author"] = data.pop("authors", None)
    data["category_name"] = get_display_name(data["category_id"])
    return PostResponse(**data)


def compute_stats(posts: List[PostResponse], now: Optional[datetime] = None) -> PublisherStats:
    """Total posts and posts created within the last 7 days"""
    now = now or datetime.now(timezone.utc)
    cutoff = now - RECENT_WINDOW
    recent = 0
    for post in posts:
        created = post.created_at
        if created.tzinfo is None:
            created = created.replace(tzinfo=timezone.utc)
        if created > cutoff:
            recent += 1
    return PublisherStats(total_posts=len(posts), recent_posts=recent)


class PostService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def validate_post(self, post_data: PostCreate) -> PostCreate:
        """Trim and check the form before anything is uploaded or written"""
        title = post_data.title.strip()
        content = post_data.content.strip()
        if not title or not content:
            raise HTTPException(status_code=400, detail="Title and content are required")
        if not is_known_category(post_data.category_id):
            raise HTTPException(status_code=400, detail=f"Unknown category: {post_data.category_id}")
        try:
            author = AuthorService(self.supabase).get_author(post_data.author_id)
        except Exception as e:
            logger.error(f"Error looking up author {post_data.author_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to load authors. Please try again.")
        if author is None:
            raise HTTPException(status_code=400, detail="Selected author not found")
        return post_data.model_copy(update={"title": title, "content": content})

    def create_post(self, post_data: PostCreate, publisher_id: str) -> PostResponse:
        """Insert one post attributed to an author and owned by the publisher"""
        try:
            result = self.supabase.table("posts").insert({
                "title": post_data.title,
                "content": post_data.content,
                "category_id": post_data.category_id,
                "author_id": post_data.author_id,
                "thumbnail_url": post_data.thumbnail_url or None,
                "publisher_id": publisher_id
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create post")

            logger.info(f"Publisher {publisher_id} created post {result.data[0]['id']}")
            return self.get_post(result.data[0]["id"]) or to_post(result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating post: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to create post: {str(e)}")

    def get_post(self, post_id: str) -> Optional[PostResponse]:
        result = self.supabase.table("posts")\
            .select(POST_SELECT)\
            .eq("id", post_id)\
            .limit(1)\
            .execute()
        if not result.data:
            return None
        return to_post(result.data[0])

    def list_feed(self, category_ids: Optional[List[str]] = None) -> List[PostResponse]:
        """Newest first. None means unfiltered; an empty list matches nothing."""
        if category_ids is not None and not category_ids:
            return []
        try:
            query = self.supabase.table("posts").select(POST_SELECT)
            if category_ids is not None:
                query = query.in_("category_id", category_ids)
            result = query.order("created_at", desc=True).execute()
            return [to_post(row) for row in result.data or []]
        except Exception as e:
            logger.error(f"Error fetching posts: {e}")
            raise HTTPException(status_code=500, detail="Failed to load posts. Please try again.")

    def list_publisher_posts(self, publisher_id: str) -> List[PostResponse]:
        try:
            result = self.supabase.table("posts")\
                .select(POST_SELECT)\
                .eq("publisher_id", publisher_id)\
                .order("created_at", desc=True)\
                .execute()
            return [to_post(row) for row in result.data or []]
        except Exception as e:
            logger.error(f"Error fetching publisher posts: {e}")
            raise HTTPException(status_code=500, detail="Failed to load your posts. Please try again.")

    def update_post(self, post_id: str, publisher_id: str, post_data: PostUpdate) -> PostResponse:
        """Partial update of a post the publisher owns"""
        update_data: Dict[str, Any] = {"updated_at": datetime.now(timezone.utc).isoformat()}
        if post_data.title is not None:
            if not post_data.title.strip():
                raise HTTPException(status_code=400, detail="Title cannot be empty")
            update_data["title"] = post_data.title.strip()
        if post_data.content is not None:
            if not post_data.content.strip():
                raise HTTPException(status_code=400, detail="Content cannot be empty")
            update_data["content"] = post_data.content.strip()
        if post_data.category_id is not None:
            if not is_known_category(post_data.category_id):
                raise HTTPException(status_code=400, detail=f"Unknown category: {post_data.category_id}")
            update_data["category_id"] = post_data.category_id
        if post_data.author_id is not None:
            if AuthorService(self.supabase).get_author(post_data.author_id) is None:
                raise HTTPException(status_code=400, detail="Selected author not found")
            update_data["author_id"] = post_data.author_id
        if post_data.thumbnail_url is not None:
            update_data["thumbnail_url"] = post_data.thumbnail_url or None
        try:
            result = self.supabase.table("posts")\
                .update(update_data)\
                .eq("id", post_id)\
                .eq("publisher_id", publisher_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error updating post {post_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to update post: {str(e)}")
        if not result.data:
            raise HTTPException(status_code=404, detail="Post not found")
        return self.get_post(post_id) or to_post(result.data[0])

    def delete_post(self, post_id: str, publisher_id: str) -> bool:
        """Delete only when the post belongs to the publisher"""
        try:
            result = self.supabase.table("posts")\
                .delete()\
                .eq("id", post_id)\
                .eq("publisher_id", publisher_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error deleting post {post_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete post")
        return len(result.data or []) > 0
