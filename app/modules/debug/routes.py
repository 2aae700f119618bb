from fastapi import APIRouter, Depends
from app.core.dependencies import get_session_context, get_session_client
from app.modules.preferences.service import PreferencesService
from app.modules.session.context import SessionContext
from supabase import Client
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/debug", tags=["debug"])


@router.get("")
async def debug_preferences(
    context: SessionContext = Depends(get_session_context),
    supabase: Client = Depends(get_session_client)
):
    """Raw preferences row and onboarding flag for the signed-in user"""
    service = PreferencesService(supabase)
    preferences, onboarding, error = None, None, None
    try:
        logger.info(f"Debug - User ID: {context.user_id}")
        prefs = service.get_preferences(context.user_id)
        preferences = prefs.model_dump(mode="json") if prefs else None
        onboarding = service.has_completed_onboarding(context.user_id)
        logger.info(f"Debug - Onboarding completed: {onboarding}")
    except Exception as e:
        logger.error(f"Debug - Error: {e}")
        error = str(e)
    return {
        "user_id": context.user_id,
        "email": getattr(context.user, "email", None),
        "preferences": preferences,
        "onboarding_complete": onboarding,
        "error": error
    }


@router.get("/role")
async def debug_role(context: SessionContext = Depends(get_session_context)):
    """In-memory role next to the user_roles rows"""
    return context.debug_role()
