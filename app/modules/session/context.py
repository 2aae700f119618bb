"""
Per-browser mirror of a remote Supabase session.

A SessionContext owns one Supabase client and the key store holding that
client's auth state. Its state only changes through the methods below and the
auth-event handler, all serialised by one re-entrant lock (SDK callbacks fire
synchronously inside sign_in/sign_out on the calling thread).

    signed_out --start/sign_in--> initializing --> authenticated
         ^                              |               |
         +------ sign_out / SIGNED_OUT -+---------------+
                                        +--> error (refresh token rejected)
"""

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from enum import Enum
from typing import Any, Dict, Optional

from supabase import Client
from supabase_auth.errors import AuthError

from app.config import settings
from app.modules.roles.schemas import UserRoleName
from app.modules.roles.service import RoleService
from app.modules.session.errors import AuthErrorKind, SessionError, classify_auth_error
from app.modules.session.storage import AUTH_KEY_PATTERNS, CachedKeyStore

logger = logging.getLogger(__name__)

SESSION_EXPIRED_MESSAGE = "Your session has expired. Please sign in again."
AUTH_FAILED_MESSAGE = "Authentication failed. Please sign in again."
ROLE_UNAVAILABLE_MESSAGE = (
    "We couldn't load your account role. Publisher features are unavailable until it loads."
)

VERIFY_WORKERS = 4

_verify_executor = ThreadPoolExecutor(max_workers=VERIFY_WORKERS, thread_name_prefix="session-verify")
# One slot per worker; a hung get_user keeps its slot until it returns
_verify_slots = threading.BoundedSemaphore(VERIFY_WORKERS)


def _verify_in_slot(slots, get_user, access_token):
    try:
        return get_user(access_token)
    finally:
        slots.release()


class SessionState(str, Enum):
    SIGNED_OUT = "signed_out"
    INITIALIZING = "initializing"
    AUTHENTICATED = "authenticated"
    ERROR = "error"


class SessionContext:
    def __init__(self, client: Client, key_store: CachedKeyStore):
        self.client = client
        self.key_store = key_store
        self.state = SessionState.SIGNED_OUT
        self.user = None
        self.role: Optional[UserRoleName] = None
        self.role_error: Optional[str] = None
        self.error: Optional[str] = None
        self._access_token: Optional[str] = None
        self._expires_at: Optional[int] = None
        self._defer_role = False
        self._subscription = None
        self._lock = threading.RLock()

    # Lifecycle

    def start(self) -> SessionState:
        """Subscribe to auth events, then initialise from the stored session.

        Both happen under the lock, and INITIAL_SESSION events are ignored, so
        the first emitted event cannot race or duplicate initialisation.
        """
        with self._lock:
            if self._subscription is None:
                self._subscription = self.client.auth.on_auth_state_change(self._on_auth_event)
            return self.initialize()

    def initialize(self) -> SessionState:
        with self._lock:
            self.state = SessionState.INITIALIZING
            self.error = None
            try:
                session = self.client.auth.get_session()
            except AuthError as e:
                kind = classify_auth_error(e)
                if kind is AuthErrorKind.INVALID_REFRESH_TOKEN:
                    logger.warning(f"Refresh token rejected ({e.__class__.__name__}), clearing local auth data")
                    self.clear_auth_data()
                    self.state = SessionState.ERROR
                    self.error = SESSION_EXPIRED_MESSAGE
                else:
                    logger.error(f"Error getting session ({kind.value}): {e}")
                    self._reset()
                    self.error = AUTH_FAILED_MESSAGE
                return self.state
            except Exception as e:
                logger.error(f"Error getting session: {e}")
                self._reset()
                self.error = AUTH_FAILED_MESSAGE
                return self.state
            self._accept(session)
            return self.state

    def ensure_fresh(self) -> SessionState:
        """Re-initialise when the mirrored session is past its expiry."""
        with self._lock:
            if self.state is SessionState.AUTHENTICATED and self._is_expired(self._expires_at):
                logger.info(f"Session for user {self.user_id} expired locally, refreshing")
                self.initialize()
            return self.state

    def close(self) -> None:
        with self._lock:
            if self._subscription is not None:
                try:
                    self._subscription.unsubscribe()
                except Exception as e:
                    logger.warning(f"Failed to unsubscribe from auth events: {e}")
                self._subscription = None

    # Auth events

    def _on_auth_event(self, event: str, session: Any) -> None:
        with self._lock:
            logger.debug(f"Auth event {event} (state={self.state.value})")
            # initialize() owns the initial session
            if event == "INITIAL_SESSION":
                return
            if event in ("SIGNED_OUT", "USER_DELETED") or session is None or session.user is None:
                self._reset()
                return
            if event == "TOKEN_REFRESHED":
                self._set_session(session)
                # initialize() accepts the refreshed session itself
                if self.state is not SessionState.INITIALIZING:
                    self.state = SessionState.AUTHENTICATED
                    self.resolve_role()
                return
            if self.validate_session(session):
                self._accept(session)
            else:
                logger.warning(f"Rejected session delivered by {event} event")
                self._reset()

    def validate_session(self, session: Any) -> bool:
        """Check local expiry, then confirm the token with Supabase under a timeout."""
        if self._is_expired(getattr(session, "expires_at", None)):
            return False
        timeout = settings.session_verify_timeout_seconds
        slots = _verify_slots
        if not slots.acquire(blocking=False):
            logger.warning(f"All {VERIFY_WORKERS} session verification workers are busy, rejecting session")
            return False
        future = _verify_executor.submit(_verify_in_slot, slots, self.client.auth.get_user, session.access_token)
        try:
            response = future.result(timeout=timeout)
        except FutureTimeoutError:
            logger.warning(f"Session verification timed out after {timeout}s")
            return False
        except AuthError as e:
            logger.warning(f"Session verification failed ({classify_auth_error(e).value}): {e}")
            return False
        except Exception as e:
            logger.warning(f"Session verification failed: {e}")
            return False
        return bool(response and response.user)

    # Role

    def resolve_role(self) -> Optional[UserRoleName]:
        """Look up (or create) the user's role, retrying transient failures.

        Exhausting the attempts leaves role None with a visible warning; the
        user stays signed in and is treated as a non-publisher.
        """
        with self._lock:
            if self.user is None:
                self.role = None
                return None
            service = RoleService(self.client)
            attempts = settings.role_fetch_attempts
            for attempt in range(1, attempts + 1):
                try:
                    self.role = service.get_or_create_role(self.user.id)
                    self.role_error = None
                    return self.role
                except Exception as e:
                    logger.error(f"Error fetching user role (attempt {attempt}/{attempts}): {e}")
                    if attempt < attempts:
                        time.sleep(settings.role_retry_base_delay_seconds * attempt)
            self.role = None
            self.role_error = ROLE_UNAVAILABLE_MESSAGE
            return None

    @property
    def is_publisher(self) -> bool:
        return self.role is UserRoleName.PUBLISHER

    # Credential operations

    def sign_in(self, email: str, password: str):
        with self._lock:
            try:
                response = self.client.auth.sign_in_with_password({
                    "email": email,
                    "password": password
                })
            except AuthError as e:
                logger.info(f"Sign in failed for {email}: {classify_auth_error(e).value}")
                raise SessionError.from_auth_error(e)
            if not response.user or not response.session:
                raise SessionError(AuthErrorKind.INVALID_CREDENTIALS, "Invalid email or password")
            if self.state is not SessionState.AUTHENTICATED or self.user_id != response.user.id:
                self._accept(response.session)
            return self.user

    def sign_up(
        self,
        email: str,
        password: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        role: Optional[UserRoleName] = None
    ):
        """Create the account, then write the chosen role (reader by default).

        A failed role write is only logged: the next role lookup self-heals to reader.
        """
        with self._lock:
            self._defer_role = True
            try:
                response = self.client.auth.sign_up({
                    "email": email,
                    "password": password,
                    "options": {
                        "data": {
                            "first_name": first_name,
                            "last_name": last_name
                        }
                    }
                })
            except AuthError as e:
                raise SessionError.from_auth_error(e)
            finally:
                self._defer_role = False

            if not response.user:
                raise SessionError(AuthErrorKind.UNKNOWN, "Failed to create account")

            chosen = role or UserRoleName.READER
            try:
                RoleService(self.client).create_role(response.user.id, chosen)
                logger.info(f"User role '{chosen.value}' created for user {response.user.id}")
            except Exception as e:
                logger.error(f"Error creating user role for {response.user.id}: {e}")

            if response.session is not None:
                if self.state is not SessionState.AUTHENTICATED or self.user_id != response.user.id:
                    self._accept(response.session)
                else:
                    self.resolve_role()
            return response.user

    def sign_out(self) -> None:
        with self._lock:
            try:
                self.client.auth.sign_out()
            except AuthError as e:
                logger.error(f"Error signing out: {e}")
                raise SessionError.from_auth_error(e)
            self._reset()

    def clear_auth_data(self) -> None:
        """Forced local reset used to recover from unusable refresh tokens."""
        with self._lock:
            try:
                self.client.auth.sign_out()
            except Exception as e:
                logger.warning(f"Remote sign out failed during auth cleanup: {e}")
            removed = self.key_store.sweep(AUTH_KEY_PATTERNS)
            logger.info(f"Cleared {len(removed)} cached auth key(s)")
            self._reset()

    # Views

    @property
    def user_id(self) -> Optional[str]:
        return self.user.id if self.user is not None else None

    def user_names(self) -> Dict[str, str]:
        metadata = getattr(self.user, "user_metadata", None) or {}
        names = {}
        for key, fallback in (("first_name", "firstName"), ("last_name", "lastName")):
            value = metadata.get(key)
            if value is None:
                value = metadata.get(fallback)
            names[key] = value if isinstance(value, str) else ""
        return names

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "state": self.state.value,
                "user_id": self.user_id,
                "email": getattr(self.user, "email", None),
                "role": self.role.value if self.role else None,
                "is_publisher": self.is_publisher,
                "role_error": self.role_error,
                "error": self.error,
                **self.user_names(),
            }

    def debug_role(self) -> Dict[str, Any]:
        """In-memory role state next to the raw user_roles rows."""
        rows, query_error = [], None
        if self.user is not None:
            try:
                rows = RoleService(self.client).list_role_rows(self.user.id)
            except Exception as e:
                logger.error(f"Error in debug role query: {e}")
                query_error = str(e)
        logger.debug(f"Role debug for {self.user_id}: state={self.role}, rows={rows}")
        return {
            "user_id": self.user_id,
            "role": self.role.value if self.role else None,
            "is_publisher": self.is_publisher,
            "role_error": self.role_error,
            "rows": rows,
            "query_error": query_error,
        }

    # Internal

    def _accept(self, session: Any) -> None:
        if session is None or session.user is None:
            self._reset()
            return
        self._set_session(session)
        self.state = SessionState.AUTHENTICATED
        self.error = None
        if not self._defer_role:
            self.resolve_role()

    def _set_session(self, session: Any) -> None:
        self.user = session.user
        self._access_token = session.access_token
        self._expires_at = session.expires_at

    def _reset(self) -> None:
        self.user = None
        self.role = None
        self.role_error = None
        self._access_token = None
        self._expires_at = None
        self.state = SessionState.SIGNED_OUT

    @staticmethod
    def _is_expired(expires_at: Optional[int]) -> bool:
        return bool(expires_at) and expires_at <= time.time()
