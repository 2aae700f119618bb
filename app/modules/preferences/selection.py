from app.config.categories_config import REQUIRED_CATEGORY_COUNT, is_known_category
from typing import Iterable, List, Optional


class CategorySelection:
    """Onboarding multi-select capped at REQUIRED_CATEGORY_COUNT choices.

    Adding a category while the cap is reached is a no-op, so repeated
    attempts never change the selection.
    """

    def __init__(self, selected: Optional[Iterable[str]] = None, limit: int = REQUIRED_CATEGORY_COUNT):
        self.limit = limit
        self._selected: List[str] = []
        for category_id in selected or []:
            self.add(category_id)

    @property
    def selected(self) -> List[str]:
        return list(self._selected)

    @property
    def is_complete(self) -> bool:
        return len(self._selected) == self.limit

    def is_selected(self, category_id: str) -> bool:
        return category_id in self._selected

    def add(self, category_id: str) -> bool:
        self._check(category_id)
        if category_id in self._selected or len(self._selected) >= self.limit:
            return False
        self._selected.append(category_id)
        return True

    def remove(self, category_id: str) -> bool:
        if category_id not in self._selected:
            return False
        self._selected.remove(category_id)
        return True

    def toggle(self, category_id: str) -> bool:
        """Deselect if selected, else try to select. Returns True if the selection changed."""
        if self.is_selected(category_id):
            return self.remove(category_id)
        return self.add(category_id)

    @staticmethod
    def _check(category_id: str) -> None:
        if not is_known_category(category_id):
            raise ValueError(f"Unknown category: {category_id}")
