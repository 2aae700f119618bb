from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class AuthorCreate(BaseModel):
    name: str
    avatar_url: Optional[str] = None


class AuthorResponse(BaseModel):
    id: str
    name: str
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
