from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from app.api.v1 import api_router
from app.core.error_handlers import register_error_handlers
from app.core.lifespan import lifespan
from app.core.logging_middleware import log_requests
from app.core.route_guard import guard_pages
from app.utils.cors import setup_cors
from app.web.pages import APP_DIR, router as pages_router


def create_app() -> FastAPI:
    app = FastAPI(
        title="Reservas Backend",
        version="1.0.0",
        description="Reserva de mesas, horno y brasa en los espacios comunitarios del edificio",
        lifespan=lifespan,  # Startup/shutdown moderno
        contact={
            "name": "Sociedad Roncesvalles",
            "email": "admin@roncesvalles.local",
        },
    )

    # --- Manejo de errores {"error": ...} ---
    register_error_handlers(app)

    # --- Middlewares (el último registrado es el más externo) ---
    app.middleware("http")(guard_pages)
    app.middleware("http")(log_requests)

    # --- Configuración CORS ---
    setup_cors(app)

    # --- Rutas centralizadas ---
    app.include_router(api_router)
    app.include_router(pages_router)
    app.mount("/static", StaticFiles(directory=str(APP_DIR / "static")), name="static")

    @app.get("/health", tags=["Health"])
    def health():
        return {"status": "ok"}

    return app


app = create_app()
