# app/api/v1/routers/users.py
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.config import Roles
from app.core.security import get_current_user, require_role
from app.crud.user import list_users
from app.db.session import get_db
from app.models.user import User
from app.schemas.common import MessageResponse
from app.schemas.user import UserCreate, UserRead, UserUpdate
from app.services import user_service

router = APIRouter()


@router.get("", response_model=List[UserRead])
def list_all(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(Roles.ADMIN, Roles.IT_ADMIN)),
):
    return list_users(db)


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create(
    payload: UserCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(Roles.IT_ADMIN)),
):
    return user_service.create_user_as_admin(db, current_user, payload)


@router.get("/{user_id}", response_model=UserRead)
def get_one(user_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return user_service.get_visible_user(db, current_user, user_id)


@router.put("/{user_id}", response_model=UserRead)
def update(
    user_id: int,
    payload: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return user_service.update_user(db, current_user, user_id, payload)


@router.delete("/{user_id}", response_model=MessageResponse)
def delete(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(Roles.IT_ADMIN)),
):
    user_service.delete_user_as_admin(db, current_user, user_id)
    return {"message": "Usuario eliminado correctamente"}
