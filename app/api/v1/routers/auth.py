# app/api/v1/routers/auth.py
"""
Router de autenticación: registro, login con cookie de sesión y
recuperación de contraseña.

Nota: Este router utiliza funciones centralizadas de seguridad en app.core.security
para garantizar consistencia en toda la aplicación.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from app.core.config import Roles, settings
from app.core.security import create_session_token, get_current_user, get_optional_user
from app.db.session import get_db
from app.models.user import User
from app.schemas.auth import LoginRequest, NewPasswordRequest, ResetPasswordRequest, TokenResponse
from app.schemas.common import MessageResponse, SuccessResponse
from app.schemas.user import UserCreate, UserRead
from app.services import auth_service, password_reset_service

router = APIRouter()


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED, summary="Registro de usuario")
def register(
    payload: UserCreate,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    """
    Alta de usuario. Los residentes (`user`) pueden registrarse solos;
    cualquier otro rol requiere sesión de Admin IT.
    """
    if payload.role != Roles.USER and (current_user is None or current_user.role != Roles.IT_ADMIN):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Solo un Admin IT puede crear usuarios con ese rol",
        )
    return auth_service.register_user(db, payload)


@router.post("/login", response_model=TokenResponse, summary="Login con email y contraseña")
def login(credentials: LoginRequest, request: Request, response: Response, db: Session = Depends(get_db)):
    """
    Retorna JWT de sesión y datos del usuario; además deja el token en una
    cookie HttpOnly para las páginas servidas por el backend.
    """
    user = auth_service.authenticate(
        db,
        credentials.email,
        credentials.password,
        ip_address=client_ip(request),
        user_agent=request.headers.get("user-agent", ""),
    )
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Email o contraseña incorrectos",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = create_session_token(user)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        httponly=True,
        samesite="lax",
        secure=settings.environment == "production",
        max_age=settings.access_token_expire_minutes * 60,
    )
    return TokenResponse(access_token=token, user=UserRead.model_validate(user))


@router.post("/logout", response_model=MessageResponse, summary="Cerrar sesión")
def logout(response: Response):
    response.delete_cookie(settings.session_cookie_name)
    return {"message": "Sesión cerrada correctamente"}


@router.get("/session", response_model=UserRead, summary="Usuario de la sesión actual")
def session(current_user: User = Depends(get_current_user)):
    return current_user


@router.post("/reset-password", summary="Solicitar recuperación de contraseña")
def reset_password(payload: ResetPasswordRequest, db: Session = Depends(get_db)):
    return password_reset_service.request_password_reset(db, payload.email)


@router.post("/new-password", response_model=SuccessResponse, summary="Establecer nueva contraseña")
def new_password(payload: NewPasswordRequest, db: Session = Depends(get_db)):
    password_reset_service.complete_password_reset(db, payload.token, payload.email, payload.password)
    return SuccessResponse(message="Contraseña actualizada correctamente")
