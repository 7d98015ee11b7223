from sqlalchemy.orm import Session

from app.core.config import Roles, settings
from app.core.security import hash_password
from app.models.user import User
from app.utils.logger import logger


def create_default_it_admin(db: Session):
	# crear admin IT si no existe ninguno
	if db.query(User).filter(User.role == Roles.IT_ADMIN).first():
		return None

	admin = User(
		name="Administrador IT",
		email=settings.default_it_admin_email,
		hashed_password=hash_password(settings.default_it_admin_password),
		role=Roles.IT_ADMIN,
	)
	db.add(admin)
	db.commit()
	db.refresh(admin)
	logger.info("Admin IT creado: %s", admin.email)
	return admin
