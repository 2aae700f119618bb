from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime
from app.modules.authors.schemas import AuthorResponse


class PostCreate(BaseModel):
    title: str
    content: str
    category_id: str
    author_id: str
    thumbnail_url: Optional[str] = None


class PostUpdate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    category_id: Optional[str] = None
    author_id: Optional[str] = None
    thumbnail_url: Optional[str] = None


class PostResponse(BaseModel):
    id: str
    title: str
    content: str
    category_id: str
    category_name: Optional[str] = None
    author_id: Optional[str] = None
    author: Optional[AuthorResponse] = None
    thumbnail_url: Optional[str] = None
    publisher_id: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PublisherStats(BaseModel):
    total_posts: int
    recent_posts: int


class PublisherDashboardResponse(BaseModel):
    posts: List[PostResponse]
    stats: PublisherStats


class FeedResponse(BaseModel):
    posts: List[PostResponse]
    selected_categories: List[str] = []
    category_names: List[str] = []
    filtered: bool = True
    needs_onboarding: bool = False
