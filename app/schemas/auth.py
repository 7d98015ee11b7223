# app/schemas/auth.py
from pydantic import BaseModel, EmailStr, Field

from app.schemas.common import CamelModel
from app.schemas.user import UserRead


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(CamelModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRead


class ResetPasswordRequest(BaseModel):
    email: EmailStr


class NewPasswordRequest(BaseModel):
    token: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=8)
