from pydantic import BaseModel
from typing import Optional


class CategoryResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
