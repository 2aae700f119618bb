from fastapi import APIRouter
from app.config.categories_config import CATEGORIES, REQUIRED_CATEGORY_COUNT
from app.modules.categories.schemas import CategoryResponse
from typing import List

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=List[CategoryResponse])
async def list_categories():
    """The fixed category catalog, in display order"""
    return CATEGORIES


@router.get("/rules")
async def get_selection_rules():
    """How many categories a reader picks during onboarding"""
    return {"required_count": REQUIRED_CATEGORY_COUNT, "total": len(CATEGORIES)}
