from enum import Enum
from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class UserRoleName(str, Enum):
    READER = "reader"
    PUBLISHER = "publisher"


class UserRoleResponse(BaseModel):
    user_id: str
    role: UserRoleName
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
