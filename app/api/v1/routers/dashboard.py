# app/api/v1/routers/dashboard.py
"""
Panel de Admin IT: estadísticas de usuarios, reservas e inicios de sesión,
y exportación anual de reservas confirmadas.
"""
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.core.config import Roles
from app.core.security import require_role
from app.db.session import get_db
from app.models.user import User
from app.services import dashboard_service
from app.utils.logger import logger

router = APIRouter()
export_router = APIRouter()


@router.get("")
def get_dashboard(db: Session = Depends(get_db), current_user: User = Depends(require_role(Roles.IT_ADMIN))):
    return dashboard_service.dashboard(db)


@router.get("/login-stats")
def get_login_stats(db: Session = Depends(get_db), current_user: User = Depends(require_role(Roles.IT_ADMIN))):
    return dashboard_service.login_stats(db)


@export_router.get("")
def export_bookings(
    year: str = Query(..., description="Año a exportar (YYYY)"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(Roles.IT_ADMIN)),
):
    if not year.isdigit() or not date.min.year <= int(year) <= date.max.year:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Parámetro year no válido")
    logger.info("Exportación de reservas %s solicitada por %s", year, current_user.email)
    return dashboard_service.export_year(db, int(year))
