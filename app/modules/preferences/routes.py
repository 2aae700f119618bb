from fastapi import APIRouter, Depends, HTTPException
from app.config.categories_config import REQUIRED_CATEGORY_COUNT
from app.core.dependencies import get_session_context, get_session_client
from app.modules.preferences.schemas import (
    SelectionUpdate, SelectionToggle, SelectionToggleResponse, SelectionStatusResponse
)
from app.modules.preferences.selection import CategorySelection
from app.modules.preferences.service import PreferencesService, is_onboarding_complete
from app.modules.session.context import SessionContext
from supabase import Client
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/categories/selection", tags=["preferences"])


def get_preferences_service(supabase: Client = Depends(get_session_client)) -> PreferencesService:
    return PreferencesService(supabase)


@router.get("", response_model=SelectionStatusResponse)
async def get_selection(
    context: SessionContext = Depends(get_session_context),
    service: PreferencesService = Depends(get_preferences_service)
):
    """Saved selection; readers who already finished onboarding are sent on to the dashboard"""
    try:
        preferences = service.get_preferences(context.user_id)
    except Exception as e:
        logger.error(f"Error checking onboarding status: {e}")
        raise HTTPException(status_code=500, detail="Failed to load your categories. Please try again.")
    selected = preferences.selected_categories if preferences else []
    complete = preferences is not None and is_onboarding_complete(len(selected))
    return SelectionStatusResponse(
        selected_categories=selected,
        onboarding_complete=complete,
        redirect_to="/dashboard" if complete else None
    )


@router.put("", response_model=SelectionStatusResponse)
async def save_selection(
    selection_data: SelectionUpdate,
    context: SessionContext = Depends(get_session_context),
    service: PreferencesService = Depends(get_preferences_service)
):
    """Save exactly two categories and finish onboarding"""
    selected = list(dict.fromkeys(selection_data.selected_categories))
    if len(selected) != REQUIRED_CATEGORY_COUNT:
        raise HTTPException(status_code=400, detail=f"Please select exactly {REQUIRED_CATEGORY_COUNT} categories")
    try:
        selection = CategorySelection(selected)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    try:
        saved = service.save_preferences(context.user_id, selection.selected)
    except Exception as e:
        logger.error(f"Error saving preferences: {e}")
        raise HTTPException(status_code=500, detail="Failed to save preferences. Please try again.")
    return SelectionStatusResponse(
        selected_categories=saved.selected_categories,
        onboarding_complete=is_onboarding_complete(len(saved.selected_categories)),
        redirect_to="/dashboard"
    )


@router.post("/toggle", response_model=SelectionToggleResponse)
async def toggle_category(
    toggle_data: SelectionToggle,
    context: SessionContext = Depends(get_session_context)
):
    """Apply one click to an in-progress selection (third pick is ignored)"""
    try:
        selection = CategorySelection(toggle_data.selected_categories)
        selection.toggle(toggle_data.category_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return SelectionToggleResponse(
        selected_categories=selection.selected,
        can_continue=selection.is_complete
    )
