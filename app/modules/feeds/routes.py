from fastapi import APIRouter, Depends, HTTPException
from app.config.categories_config import get_display_names
from app.core.dependencies import get_session_context, get_session_client
from app.modules.posts.schemas import FeedResponse
from app.modules.posts.service import PostService
from app.modules.preferences.service import PreferencesService
from app.modules.session.context import SessionContext
from supabase import Client
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/feeds", tags=["feeds"])


@router.get("", response_model=FeedResponse)
async def get_feed(
    context: SessionContext = Depends(get_session_context),
    supabase: Client = Depends(get_session_client)
):
    """
    Readers: posts from their selected categories, newest first.
    Publishers: every post, newest first.
    """
    posts = PostService(supabase)
    if context.is_publisher:
        return FeedResponse(posts=posts.list_feed(None), filtered=False)

    try:
        preferences = PreferencesService(supabase).get_preferences(context.user_id)
    except Exception as e:
        logger.error(f"Error fetching user preferences: {e}")
        raise HTTPException(status_code=500, detail="Failed to load your categories. Please try again.")
    if preferences is None or not preferences.selected_categories:
        return FeedResponse(posts=[], needs_onboarding=True)

    selected = preferences.selected_categories
    return FeedResponse(
        posts=posts.list_feed(selected),
        selected_categories=selected,
        category_names=get_display_names(selected)
    )
