"""
Core dependencies for session lookup and route protection
"""

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.modules.session.context import SessionContext, SessionState, SESSION_EXPIRED_MESSAGE
from app.modules.session.registry import SessionRegistry, get_session_registry
from supabase import Client
from typing import Optional
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

SIGNIN_ROUTE = "/signin"
FEEDS_ROUTE = "/feeds"


def redirect_exception(status_code: int, detail: str, redirect_to: str) -> HTTPException:
    """HTTPException carrying the page the client should navigate to."""
    return HTTPException(
        status_code=status_code,
        detail=detail,
        headers={"X-Redirect-To": redirect_to}
    )


def get_session_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security)
) -> Optional[str]:
    """Extract the opaque session token from the Authorization header"""
    return credentials.credentials if credentials else None


def get_optional_session(
    token: Optional[str] = Depends(get_session_token),
    registry: SessionRegistry = Depends(get_session_registry)
) -> Optional[SessionContext]:
    """Signed-in context for the token, or None. Expired sessions are dropped."""
    if not token:
        return None
    context = registry.get(token)
    if context is None:
        return None
    state = context.ensure_fresh()
    if state is SessionState.AUTHENTICATED:
        return context
    if state is SessionState.ERROR:
        registry.remove(token)
    return None


def get_session_context(
    token: Optional[str] = Depends(get_session_token),
    registry: SessionRegistry = Depends(get_session_registry)
) -> SessionContext:
    """Require a signed-in session; otherwise redirect to sign in."""
    if not token:
        raise redirect_exception(status.HTTP_401_UNAUTHORIZED, "Not signed in", SIGNIN_ROUTE)
    context = registry.get(token)
    if context is None:
        raise redirect_exception(status.HTTP_401_UNAUTHORIZED, "Not signed in", SIGNIN_ROUTE)
    state = context.ensure_fresh()
    if state is SessionState.ERROR:
        registry.remove(token)
        raise redirect_exception(
            status.HTTP_401_UNAUTHORIZED,
            context.error or SESSION_EXPIRED_MESSAGE,
            SIGNIN_ROUTE
        )
    if state is not SessionState.AUTHENTICATED:
        registry.remove(token)
        raise redirect_exception(status.HTTP_401_UNAUTHORIZED, "Not signed in", SIGNIN_ROUTE)
    return context


def require_publisher(
    context: SessionContext = Depends(get_session_context)
) -> SessionContext:
    """Require the publisher role. A null role counts as reader."""
    if not context.is_publisher:
        raise redirect_exception(
            status.HTTP_403_FORBIDDEN,
            "Publisher role required",
            FEEDS_ROUTE
        )
    return context


def get_session_client(
    context: SessionContext = Depends(get_session_context)
) -> Client:
    """Supabase client authenticated as the session's user (RLS applies)."""
    return context.client
