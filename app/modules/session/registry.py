"""Thread-safe registry of session_token -> SessionContext."""
import asyncio
import logging
import secrets
import threading
import time
from typing import Callable, Dict, Optional, Tuple

from supabase import Client

from app.config import settings
from app.database.supabase_client import SupabaseClient
from app.modules.session.context import SessionContext
from app.modules.session.storage import CachedKeyStore

logger = logging.getLogger(__name__)

ClientFactory = Callable[[CachedKeyStore], Client]


class SessionRegistry:
    def __init__(self, client_factory: Optional[ClientFactory] = None):
        self._client_factory = client_factory or SupabaseClient.create_session_client
        self._lock = threading.Lock()
        self._contexts: Dict[str, Tuple[SessionContext, float]] = {}

    def new_context(self) -> SessionContext:
        """Build and start an unregistered context with its own client and key store."""
        key_store = CachedKeyStore()
        context = SessionContext(self._client_factory(key_store), key_store)
        context.start()
        return context

    def register(self, context: SessionContext) -> str:
        self.purge_idle()
        token = secrets.token_urlsafe(32)
        with self._lock:
            self._contexts[token] = (context, time.monotonic())
        logger.debug(f"Registered session for user {context.user_id}")
        return token

    def get(self, token: str) -> Optional[SessionContext]:
        with self._lock:
            entry = self._contexts.get(token)
            if entry is None:
                return None
            context = entry[0]
            self._contexts[token] = (context, time.monotonic())
            return context

    def remove(self, token: str) -> Optional[SessionContext]:
        with self._lock:
            entry = self._contexts.pop(token, None)
        if entry is None:
            return None
        entry[0].close()
        logger.debug(f"Removed session for user {entry[0].user_id}")
        return entry[0]

    def purge_idle(self, max_idle_seconds: Optional[float] = None) -> int:
        """Drop contexts unused for longer than max_idle_seconds. Returns the count removed."""
        max_idle = settings.session_idle_timeout_seconds if max_idle_seconds is None else max_idle_seconds
        cutoff = time.monotonic() - max_idle
        with self._lock:
            stale = [t for t, (_, seen) in self._contexts.items() if seen < cutoff]
            contexts = [self._contexts.pop(t)[0] for t in stale]
        for context in contexts:
            context.close()
        if stale:
            logger.info(f"Purged {len(stale)} idle session(s)")
        return len(stale)

    def close_all(self) -> int:
        with self._lock:
            tokens = list(self._contexts)
        for token in tokens:
            self.remove(token)
        return len(tokens)

    def __len__(self) -> int:
        with self._lock:
            return len(self._contexts)


_registry = SessionRegistry()


def get_session_registry() -> SessionRegistry:
    return _registry


async def purge_idle_loop(interval_seconds: int = 300):
    """Background task that periodically drops idle sessions"""
    while True:
        try:
            get_session_registry().purge_idle()
        except Exception as e:
            logger.error(f"Error in idle session purge loop: {str(e)}")

        await asyncio.sleep(interval_seconds)
