from fastapi import APIRouter, Depends, HTTPException
from app.config.categories_config import get_display_names
from app.core.dependencies import get_session_context, get_session_client, require_publisher
from app.modules.dashboard.schemas import IntroResponse, DashboardResponse
from app.modules.posts.schemas import PublisherDashboardResponse
from app.modules.posts.service import PostService, compute_stats
from app.modules.preferences.service import PreferencesService, is_onboarding_complete
from app.modules.session.context import SessionContext
from supabase import Client
import logging

logger = logging.getLogger(__name__)

router = APIRouter(tags=["dashboard"])


@router.get("/intro", response_model=IntroResponse)
async def get_intro(context: SessionContext = Depends(get_session_context)):
    """Welcome screen shown after sign up"""
    return IntroResponse(first_name=context.user_names()["first_name"])


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    context: SessionContext = Depends(get_session_context),
    supabase: Client = Depends(get_session_client)
):
    """Greeting plus the reader's chosen categories"""
    try:
        preferences = PreferencesService(supabase).get_preferences(context.user_id)
    except Exception as e:
        logger.error(f"Error fetching user preferences: {e}")
        raise HTTPException(status_code=500, detail="Failed to load your categories. Please try again.")
    selected = preferences.selected_categories if preferences else []
    names = context.user_names()
    return DashboardResponse(
        first_name=names["first_name"],
        last_name=names["last_name"],
        email=getattr(context.user, "email", None) or "",
        selected_categories=selected,
        category_names=get_display_names(selected),
        onboarding_complete=preferences is not None and is_onboarding_complete(len(selected)),
        is_publisher=context.is_publisher
    )


@router.get("/publisher-dashboard", response_model=PublisherDashboardResponse)
async def get_publisher_dashboard(
    context: SessionContext = Depends(require_publisher),
    supabase: Client = Depends(get_session_client)
):
    """The publisher's own posts with total and last-7-days counts"""
    posts = PostService(supabase).list_publisher_posts(context.user_id)
    return PublisherDashboardResponse(posts=posts, stats=compute_stats(posts))
