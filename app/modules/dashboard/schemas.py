from pydantic import BaseModel
from typing import List


class IntroResponse(BaseModel):
    first_name: str = ""
    next: str = "/dashboard"


class DashboardResponse(BaseModel):
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    selected_categories: List[str] = []
    category_names: List[str] = []
    onboarding_complete: bool = False
    is_publisher: bool = False
