from fastapi import APIRouter

# Importa cada módulo de rutas
from app.api.v1.routers import (
    auth,
    users,
    bookings,
    blocked_dates,
    feedback,
    activity,
    notifications,
    dashboard,
)

# Router principal con prefijo global
api_router = APIRouter(prefix="/api")

# Endpoint raíz para verificar que la API funciona
@api_router.get("", tags=["Root"])
def read_root():
    return {"message": "Bienvenido a la API de Reservas Roncesvalles"}

# Registro de módulos de rutas
api_router.include_router(auth.router, prefix="/auth", tags=["Auth"])
api_router.include_router(users.router, prefix="/users", tags=["Usuarios"])
api_router.include_router(bookings.router, prefix="/bookings", tags=["Reservas"])
api_router.include_router(blocked_dates.router, prefix="/blocked-dates", tags=["Bloqueos"])
api_router.include_router(feedback.router, prefix="/feedback", tags=["Feedback"])
api_router.include_router(activity.router, prefix="/activity", tags=["Actividad"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["Notificaciones"])
api_router.include_router(notifications.push_router, prefix="/push", tags=["Push"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
api_router.include_router(dashboard.export_router, prefix="/export", tags=["Exportación"])
