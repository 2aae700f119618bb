from supabase import Client
from app.config import settings
from app.config.categories_config import REQUIRED_CATEGORY_COUNT
from app.modules.preferences.schemas import UserPreferencesResponse
from typing import List, Optional
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)


def is_onboarding_complete(category_count: int, rule: Optional[str] = None) -> bool:
    """Apply the configured completion rule to a saved category count.

    "exact": exactly REQUIRED_CATEGORY_COUNT categories.
    "at_least_one": one or more categories.
    """
    rule = rule or settings.onboarding_completion_rule
    if rule == "exact":
        return category_count == REQUIRED_CATEGORY_COUNT
    if rule == "at_least_one":
        return category_count >= 1
    raise ValueError(f"Unknown onboarding completion rule: {rule}")


class PreferencesService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_preferences(self, user_id: str) -> Optional[UserPreferencesResponse]:
        """Saved category selection for a user, or None before onboarding"""
        result = self.supabase.table("user_preferences")\
            .select("*")\
            .eq("user_id", user_id)\
            .limit(1)\
            .execute()
        if not result.data:
            return None
        return UserPreferencesResponse(**result.data[0])

    def save_preferences(self, user_id: str, selected_categories: List[str]) -> UserPreferencesResponse:
        """Replace the user's selection"""
        result = self.supabase.table("user_preferences").upsert({
            "user_id": user_id,
            "selected_categories": list(selected_categories),
            "updated_at": datetime.now(timezone.utc).isoformat()
        }, on_conflict="user_id").execute()
        logger.info(f"Saved {len(selected_categories)} categories for user {user_id}")
        if result.data:
            return UserPreferencesResponse(**result.data[0])
        return UserPreferencesResponse(user_id=user_id, selected_categories=list(selected_categories))

    def has_completed_onboarding(self, user_id: str) -> bool:
        preferences = self.get_preferences(user_id)
        return preferences is not None and is_onboarding_complete(len(preferences.selected_categories))
