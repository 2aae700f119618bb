from fastapi import APIRouter, Depends
from app.modules.auth.schemas import (
    SignInRequest, SignUpRequest, SessionResponse, SignUpResponse, MeResponse
)
from app.modules.auth.service import AuthService
from app.modules.session.context import SessionContext
from app.modules.session.registry import SessionRegistry, get_session_registry
from app.core.dependencies import get_session_context, get_session_token

router = APIRouter(prefix="/auth", tags=["auth"])


def get_auth_service(registry: SessionRegistry = Depends(get_session_registry)) -> AuthService:
    return AuthService(registry)


# Sync handlers run in the threadpool; role lookup retries sleep between attempts
@router.post("/signup", response_model=SignUpResponse, status_code=201)
def sign_up(
    sign_up_data: SignUpRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new reader or publisher account"""
    return service.sign_up(sign_up_data)


@router.post("/signin", response_model=SessionResponse)
def sign_in(
    sign_in_data: SignInRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Sign in and get a session token"""
    return service.sign_in(sign_in_data)


@router.post("/signout", status_code=200)
def sign_out(
    token: str = Depends(get_session_token),
    context: SessionContext = Depends(get_session_context),
    service: AuthService = Depends(get_auth_service)
):
    """Sign out and drop the session"""
    service.sign_out(token, context)
    return {"message": "Signed out successfully", "redirect_to": "/signin"}


@router.get("/me", response_model=MeResponse)
async def get_me(context: SessionContext = Depends(get_session_context)):
    """Current user, derived role and any role warning"""
    return context.snapshot()
