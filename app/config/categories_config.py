"""
Category Catalog Configuration
The fixed set of topic categories readers choose from and publishers tag posts with.
This is the single source of truth: scripts/seed_categories.py copies it into the
remote `categories` table so post foreign keys resolve.
"""

from typing import Dict, List, Optional

CATEGORIES: List[Dict[str, str]] = [
    {
        "id": "physical-activity",
        "name": "Physical activity",
        "description": "Exercise, fitness, and physical health"
    },
    {
        "id": "emotional-wellbeing",
        "name": "Emotional well-being",
        "description": "Mental health, emotions, and psychological balance"
    },
    {
        "id": "mindful-awareness",
        "name": "Mindful awareness",
        "description": "Meditation, mindfulness, and conscious living"
    },
    {
        "id": "financial-wellbeing",
        "name": "Financial well-being",
        "description": "Money management, savings, and financial planning"
    },
    {
        "id": "career-development",
        "name": "Career & development",
        "description": "Professional growth, skills, and career advancement"
    },
    {
        "id": "relationships",
        "name": "Relationships",
        "description": "Family, friends, and social connections"
    },
    {
        "id": "nutrition-lifestyle",
        "name": "Nutrition & lifestyle",
        "description": "Healthy eating, habits, and daily routines"
    }
]

# Number of categories a reader picks during onboarding
REQUIRED_CATEGORY_COUNT = 2

_BY_ID = {c["id"]: c for c in CATEGORIES}


def get_category(category_id: str) -> Optional[Dict[str, str]]:
    return _BY_ID.get(category_id)


def is_known_category(category_id: str) -> bool:
    return category_id in _BY_ID


def get_display_name(category_id: str) -> str:
    """Display name for a category id; unknown ids are shown as-is."""
    category = _BY_ID.get(category_id)
    return category["name"] if category else category_id


def get_display_names(category_ids: List[str]) -> List[str]:
    return [get_display_name(c) for c in category_ids]
