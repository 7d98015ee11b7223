from contextlib import asynccontextmanager
from threading import Thread
import time

import schedule
from fastapi import FastAPI
from sqlalchemy.exc import SQLAlchemyError

from app.db.base import Base
from app.db.session import engine, SessionLocal
from app.db.init_db import create_default_it_admin
from app.services.password_reset_service import purge_password_resets
from app.utils.logger import logger
from app.core.config import settings


# Background scheduler para tareas periódicas
_scheduler_thread = None
_scheduler_running = False


def run_password_reset_purge():
    """
    Marca como expirados los tokens vencidos y elimina los antiguos.
    """
    db = SessionLocal()
    try:
        resultado = purge_password_resets(db)
        logger.info(
            "🧹 Limpieza de tokens: %s expirados, %s eliminados",
            resultado["expired"], resultado["deleted"],
        )
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"❌ Error limpiando tokens de recuperación: {str(e)}")
    finally:
        db.close()


def schedule_periodic_tasks():
    global _scheduler_running

    schedule.every().hour.at(":00").do(run_password_reset_purge)
    logger.info("📅 Scheduler configurado: limpieza de tokens cada hora")

    _scheduler_running = True
    while _scheduler_running:
        schedule.run_pending()
        time.sleep(60)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Maneja startup/shutdown de la app.
    """
    global _scheduler_thread, _scheduler_running

    try:
        # --- Startup ---
        logger.info("🚀 Iniciando Reservas Backend...")

        if settings.environment == "development":
            Base.metadata.create_all(bind=engine)

        session = SessionLocal()
        try:
            create_default_it_admin(session)
        finally:
            session.close()

        if settings.enable_scheduler:
            _scheduler_thread = Thread(target=schedule_periodic_tasks, daemon=True)
            _scheduler_thread.start()
            logger.info("✅ Scheduler iniciado")

        logger.info("✅ Startup completado correctamente")

    except SQLAlchemyError as e:
        logger.exception("❌ Error en startup: %s", e)

    yield

    # --- Shutdown ---
    logger.info("🛑 Aplicación apagándose...")
    _scheduler_running = False
    schedule.clear()
    logger.info("👋 Aplicación cerrada correctamente")
