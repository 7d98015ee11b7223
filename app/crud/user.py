# app/crud/user.py
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.config import Roles
from app.models.user import User


# -----------------------------------------------------
# Obtener usuario por ID
# -----------------------------------------------------
def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


# -----------------------------------------------------
# Obtener usuario por email (normalizado)
# -----------------------------------------------------
def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.strip().lower()).first()


def get_resident_by_apartment(db: Session, apartment_number: int) -> Optional[User]:
    return (
        db.query(User)
        .filter(User.apartment_number == apartment_number, User.role == Roles.USER)
        .first()
    )


def list_users(db: Session) -> List[User]:
    return db.query(User).order_by(User.role, User.apartment_number, User.name).all()


# -----------------------------------------------------
# Crear usuario (el hash ya viene calculado).
# Con commit=False sólo hace flush: quien llama cierra la transacción
# -----------------------------------------------------
def create_user(
    db: Session,
    *,
    name: str,
    email: str,
    hashed_password: str,
    role: str = Roles.USER,
    apartment_number: Optional[int] = None,
    commit: bool = True,
) -> User:
    obj = User(
        name=name,
        email=email,
        hashed_password=hashed_password,
        role=role,
        apartment_number=apartment_number,
    )
    db.add(obj)
    if commit:
        db.commit()
        db.refresh(obj)
    else:
        db.flush()
    return obj


def delete_user(db: Session, user: User) -> None:
    db.delete(user)
    db.commit()
