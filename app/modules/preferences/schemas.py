from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime


class UserPreferencesResponse(BaseModel):
    user_id: str
    selected_categories: List[str]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SelectionUpdate(BaseModel):
    selected_categories: List[str]


class SelectionToggle(BaseModel):
    selected_categories: List[str] = []
    category_id: str


class SelectionToggleResponse(BaseModel):
    selected_categories: List[str]
    can_continue: bool


class SelectionStatusResponse(BaseModel):
    selected_categories: List[str] = []
    onboarding_complete: bool
    redirect_to: Optional[str] = None
