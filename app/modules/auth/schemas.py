from pydantic import BaseModel, EmailStr
from typing import Optional
from app.modules.roles.schemas import UserRoleName


class SignInRequest(BaseModel):
    email: EmailStr
    password: str


class SignUpRequest(BaseModel):
    email: EmailStr
    password: str
    confirm_password: str
    first_name: str
    last_name: str
    role: UserRoleName = UserRoleName.READER


class SessionResponse(BaseModel):
    session_token: str
    token_type: str = "bearer"
    user_id: str
    email: str
    role: Optional[UserRoleName] = None
    is_publisher: bool = False
    role_error: Optional[str] = None
    redirect_to: str = "/"


class SignUpResponse(BaseModel):
    user_id: str
    email: str
    role: UserRoleName
    message: str
    session_token: Optional[str] = None
    redirect_to: str = "/signin"


class MeResponse(BaseModel):
    state: str
    user_id: Optional[str] = None
    email: Optional[str] = None
    first_name: str = ""
    last_name: str = ""
    role: Optional[UserRoleName] = None
    is_publisher: bool = False
    role_error: Optional[str] = None
    error: Optional[str] = None
