from fastapi import HTTPException
from app.modules.auth.schemas import SignInRequest, SignUpRequest, SessionResponse, SignUpResponse
from app.modules.session.context import SessionContext, SessionState
from app.modules.session.errors import AuthErrorKind, SessionError
from app.modules.session.registry import SessionRegistry
import logging

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def session_error_to_http(error: SessionError, fallback: str) -> HTTPException:
    """Map a classified auth failure onto the HTTP error the client shows inline."""
    if error.kind is AuthErrorKind.INVALID_CREDENTIALS:
        return HTTPException(status_code=401, detail="Invalid email or password")
    if error.kind is AuthErrorKind.USER_EXISTS:
        return HTTPException(status_code=400, detail="User already exists")
    if error.kind is AuthErrorKind.WEAK_PASSWORD:
        return HTTPException(status_code=400, detail=error.message)
    if error.kind in (AuthErrorKind.INVALID_REFRESH_TOKEN, AuthErrorKind.SESSION_MISSING):
        return HTTPException(
            status_code=401,
            detail="Your session has expired. Please sign in again.",
            headers={"X-Redirect-To": "/signin"}
        )
    if error.kind is AuthErrorKind.RETRYABLE:
        return HTTPException(status_code=503, detail="Authentication service is busy. Please try again.")
    return HTTPException(status_code=500, detail=f"{fallback}: {error.message}")


class AuthService:
    def __init__(self, registry: SessionRegistry):
        self.registry = registry

    def sign_in(self, sign_in_data: SignInRequest) -> SessionResponse:
        """Authenticate with Supabase and register a new session context"""
        context = self.registry.new_context()
        try:
            context.sign_in(sign_in_data.email, sign_in_data.password)
        except SessionError as e:
            context.close()
            raise session_error_to_http(e, "Login failed")
        token = self.registry.register(context)
        logger.info(f"User {context.user_id} signed in (role={context.role})")
        return self._session_response(token, context)

    def sign_up(self, sign_up_data: SignUpRequest) -> SignUpResponse:
        """Register a new user and record the chosen role"""
        if sign_up_data.password != sign_up_data.confirm_password:
            raise HTTPException(status_code=400, detail="Passwords do not match")
        if len(sign_up_data.password) < MIN_PASSWORD_LENGTH:
            raise HTTPException(
                status_code=400,
                detail=f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        first_name = sign_up_data.first_name.strip()
        last_name = sign_up_data.last_name.strip()
        if not first_name or not last_name:
            raise HTTPException(status_code=400, detail="First name and last name are required")

        context = self.registry.new_context()
        try:
            user = context.sign_up(
                sign_up_data.email,
                sign_up_data.password,
                first_name=first_name,
                last_name=last_name,
                role=sign_up_data.role
            )
        except SessionError as e:
            context.close()
            raise session_error_to_http(e, "Registration failed")

        token = None
        if context.state is SessionState.AUTHENTICATED:
            token = self.registry.register(context)
        else:
            # Email confirmation pending: nothing to keep server-side
            context.close()
        return SignUpResponse(
            user_id=user.id,
            email=user.email or sign_up_data.email,
            role=sign_up_data.role,
            message="Account created successfully! Please check your email to verify your account.",
            session_token=token,
            redirect_to="/" if token else "/signin"
        )

    def sign_out(self, token: str, context: SessionContext) -> None:
        """Sign out remotely; fall back to a forced local clear if that fails"""
        try:
            context.sign_out()
        except SessionError as e:
            logger.warning(f"Remote sign out failed ({e.kind.value}), clearing local auth data")
            context.clear_auth_data()
        finally:
            self.registry.remove(token)

    @staticmethod
    def _session_response(token: str, context: SessionContext) -> SessionResponse:
        return SessionResponse(
            session_token=token,
            user_id=context.user_id,
            email=context.user.email or "",
            role=context.role,
            is_publisher=context.is_publisher,
            role_error=context.role_error,
            redirect_to="/"
        )
