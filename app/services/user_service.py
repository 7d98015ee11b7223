# app/services/user_service.py
"""
Gestión de usuarios.

- Sólo it_admin crea, elimina o cambia rol/apartamento/email.
- Cada usuario puede editar su nombre y su contraseña.
- Las acciones de it_admin sobre otros usuarios quedan en ActivityLog.
"""
from sqlalchemy.orm import Session

from app.core.config import Roles
from app.core.exceptions import ConflictError, NotFoundError, PermissionDeniedError, ValidationFailedError
from app.core.security import hash_password
from app.crud import user as user_crud
from app.crud.activity_log import add_activity
from app.models.activity_log import ActivityAction
from app.models.user import User
from app.schemas.user import UserCreate, UserUpdate
from app.services.auth_service import register_user
from app.utils.logger import logger

RESTRICTED_FIELDS = ("role", "apartment_number", "email")


def get_visible_user(db: Session, current_user: User, user_id: int) -> User:
    if current_user.id != user_id and current_user.role not in (Roles.ADMIN, Roles.IT_ADMIN):
        raise PermissionDeniedError("Acceso denegado")
    user = user_crud.get_user(db, user_id)
    if user is None:
        raise NotFoundError("Usuario no encontrado")
    return user


def create_user_as_admin(db: Session, admin: User, payload: UserCreate) -> User:
    user = register_user(db, payload, commit=False)
    add_activity(
        db,
        ActivityAction.user_create,
        f"Admin IT {admin.name} creó el usuario {user.name} ({user.email}) con rol {user.role}",
        user_id=admin.id,
        apartment_number=user.apartment_number,
        target_user_id=user.id,
    )
    db.commit()
    db.refresh(user)
    return user


def update_user(db: Session, current_user: User, user_id: int, payload: UserUpdate) -> User:
    is_it_admin = current_user.role == Roles.IT_ADMIN
    if current_user.id != user_id and not is_it_admin:
        raise PermissionDeniedError("Acceso denegado")

    user = user_crud.get_user(db, user_id)
    if user is None:
        raise NotFoundError("Usuario no encontrado")

    data = payload.model_dump(exclude_unset=True)
    if data.get("email"):
        data["email"] = data["email"].strip().lower()
    if not is_it_admin:
        forbidden = [f for f in RESTRICTED_FIELDS if f in data and data[f] != getattr(user, f)]
        if forbidden:
            raise PermissionDeniedError("Solo un Admin IT puede cambiar rol, apartamento o email")

    new_role = data.get("role", user.role)
    new_apartment = data.get("apartment_number", user.apartment_number)
    if new_role == Roles.USER:
        if new_apartment is None:
            raise ValidationFailedError("El número de apartamento es obligatorio para residentes")
        other = user_crud.get_resident_by_apartment(db, new_apartment)
        if other is not None and other.id != user.id:
            raise ConflictError("Este apartamento ya tiene un usuario registrado")

    if "email" in data and data["email"]:
        other = user_crud.get_user_by_email(db, data["email"])
        if other is not None and other.id != user.id:
            raise ConflictError("El email ya está registrado")

    changed = []
    for field in ("name", "email", "apartment_number", "role"):
        if field in data and data[field] is not None and data[field] != getattr(user, field):
            setattr(user, field, data[field])
            changed.append(field)
    if data.get("password"):
        user.hashed_password = hash_password(data["password"])
        changed.append("password")

    if is_it_admin and current_user.id != user.id and changed:
        add_activity(
            db,
            ActivityAction.user_update,
            f"Admin IT {current_user.name} actualizó {', '.join(changed)} de {user.name}",
            user_id=current_user.id,
            apartment_number=user.apartment_number,
            target_user_id=user.id,
        )
    db.commit()
    db.refresh(user)
    logger.info("Usuario %s actualizado: %s", user.id, changed)
    return user


def delete_user_as_admin(db: Session, admin: User, user_id: int) -> None:
    user = user_crud.get_user(db, user_id)
    if user is None:
        raise NotFoundError("Usuario no encontrado")
    if user.id == admin.id:
        raise ValidationFailedError("No puede eliminar su propia cuenta")

    add_activity(
        db,
        ActivityAction.user_delete,
        f"Admin IT {admin.name} eliminó el usuario {user.name} ({user.email})",
        user_id=admin.id,
        apartment_number=user.apartment_number,
        target_user_id=user.id,
    )
    user_crud.delete_user(db, user)
    logger.info("Usuario %s eliminado por %s", user_id, admin.email)
