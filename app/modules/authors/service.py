from supabase import Client
from app.config import settings
from app.modules.authors.schemas import AuthorCreate, AuthorResponse
from typing import List, Optional
from fastapi import HTTPException
import logging
import time

logger = logging.getLogger(__name__)


def filter_authors(authors: List[AuthorResponse], search: Optional[str]) -> List[AuthorResponse]:
    """Case-insensitive substring match on the author name"""
    if not search:
        return authors
    needle = search.strip().lower()
    return [a for a in authors if needle in a.name.lower()]


class AuthorService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_authors(self, search: Optional[str] = None) -> List[AuthorResponse]:
        """All authors ordered by name, retried with a growing delay"""
        attempts = settings.author_fetch_attempts
        for attempt in range(1, attempts + 1):
            try:
                result = self.supabase.table("authors")\
                    .select("*")\
                    .order("name")\
                    .execute()
                authors = [AuthorResponse(**author) for author in result.data or []]
                return filter_authors(authors, search)
            except Exception as e:
                logger.error(f"Error fetching authors (attempt {attempt}/{attempts}): {e}")
                if attempt < attempts:
                    time.sleep(settings.author_retry_base_delay_seconds * attempt)
        raise HTTPException(status_code=500, detail="Failed to load authors. Please try again.")

    def get_author(self, author_id: str) -> Optional[AuthorResponse]:
        result = self.supabase.table("authors")\
            .select("*")\
            .eq("id", author_id)\
            .limit(1)\
            .execute()
        if not result.data:
            return None
        return AuthorResponse(**result.data[0])

    def create_author(self, author_data: AuthorCreate) -> AuthorResponse:
        """Create a byline; blank avatar URLs are stored as null"""
        name = author_data.name.strip()
        if not name:
            raise HTTPException(status_code=400, detail="Author name is required")
        avatar_url = (author_data.avatar_url or "").strip() or None
        try:
            result = self.supabase.table("authors").insert({
                "name": name,
                "avatar_url": avatar_url
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create author")

            logger.info(f"Created author {result.data[0]['id']} ({name})")
            return AuthorResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating author: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to create author: {str(e)}")
