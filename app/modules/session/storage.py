import logging
import threading
from typing import Dict, Iterable, List, Optional

from supabase_auth import SyncSupportedStorage

logger = logging.getLogger(__name__)

# Substrings identifying auth-related cache keys (e.g. "sb-<project>-auth-token")
AUTH_KEY_PATTERNS = ("supabase", "sb-")


class CachedKeyStore(SyncSupportedStorage):
    """In-memory key/value store backing one session's Supabase auth state."""

    def __init__(self):
        self._items: Dict[str, str] = {}
        self._lock = threading.Lock()

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            self._items[key] = value

    def remove_item(self, key: str) -> None:
        with self._lock:
            self._items.pop(key, None)

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._items)

    def sweep(self, patterns: Iterable[str] = AUTH_KEY_PATTERNS) -> List[str]:
        """Remove every key containing one of the patterns. Returns removed keys."""
        patterns = tuple(patterns)
        with self._lock:
            removed = [k for k in self._items if any(p in k for p in patterns)]
            for key in removed:
                del self._items[key]
        for key in removed:
            logger.debug(f"Removed cached auth key: {key}")
        return removed
