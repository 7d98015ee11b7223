# app/web/pages.py
"""
Páginas mínimas servidas con Jinja2 y recursos de la PWA.

El control de acceso lo hace el middleware app.core.route_guard antes de
llegar aquí; estas vistas sólo leen `request.state.session`.
"""
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import FileResponse, HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates

from app.core.security import decode_access_token, extract_token

APP_DIR = Path(__file__).resolve().parent.parent
templates = Jinja2Templates(directory=str(APP_DIR / "templates" / "pages"))

router = APIRouter(include_in_schema=False)

SECTION_TITLES = {
    "bookings": "Mis reservas",
    "profile": "Mi perfil",
    "activity": "Actividad reciente",
    "notifications": "Notificaciones",
    "manager": "Panel de gestión",
    "admin": "Administración",
    "users": "Gestión de usuarios",
    "blocked-dates": "Fechas bloqueadas",
    "dashboard": "Panel de estadísticas",
    "export": "Exportación de datos",
    "feedback": "Feedback",
}

MANIFEST: Dict[str, Any] = {
    "name": "Reserva de Espacios Comunitarios",
    "short_name": "Roncesvalles",
    "description": "Reserva áreas comunes en tu edificio de apartamentos",
    "start_url": "/",
    "display": "standalone",
    "background_color": "#0f766e",
    "theme_color": "#0f766e",
    "orientation": "portrait",
    "icons": [
        {"src": "/static/icons/icon.svg", "sizes": "any", "type": "image/svg+xml", "purpose": "any"},
        {
            "src": "/static/icons/icon-maskable.svg",
            "sizes": "any",
            "type": "image/svg+xml",
            "purpose": "maskable",
        },
    ],
}


def _session(request: Request) -> Optional[Dict[str, Any]]:
    session = getattr(request.state, "session", None)
    if session is not None:
        return session
    # Rutas públicas: la sesión es opcional
    token = extract_token(request)
    return decode_access_token(token) if token else None


def _render_section(request: Request, section: str) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "section.html",
        {"session": _session(request), "section": section, "title": SECTION_TITLES.get(section, section)},
    )


@router.get("/", response_class=HTMLResponse)
def home(request: Request):
    return templates.TemplateResponse(request, "home.html", {"session": _session(request)})


@router.get("/auth/signin", response_class=HTMLResponse)
def signin(request: Request, callbackUrl: str = "/"):
    return templates.TemplateResponse(
        request, "signin.html", {"session": _session(request), "callback_url": callbackUrl}
    )


@router.get("/auth/new-password", response_class=HTMLResponse)
def new_password(request: Request, token: str = "", email: str = ""):
    return templates.TemplateResponse(
        request, "new_password.html", {"session": None, "token": token, "email": email}
    )


@router.get("/unauthorized", response_class=HTMLResponse)
def unauthorized(request: Request):
    return templates.TemplateResponse(
        request, "unauthorized.html", {"session": _session(request)}, status_code=status.HTTP_403_FORBIDDEN
    )


@router.get("/bookings", response_class=HTMLResponse)
def bookings(request: Request):
    return _render_section(request, "bookings")


@router.get("/profile", response_class=HTMLResponse)
def profile(request: Request):
    return _render_section(request, "profile")


@router.get("/activity", response_class=HTMLResponse)
def activity(request: Request):
    return _render_section(request, "activity")


@router.get("/notifications", response_class=HTMLResponse)
def notifications(request: Request):
    return _render_section(request, "notifications")


@router.get("/manager", response_class=HTMLResponse)
def manager(request: Request):
    return _render_section(request, "manager")


@router.get("/admin", response_class=HTMLResponse)
def admin(request: Request):
    return _render_section(request, "admin")


@router.get("/admin/{section}", response_class=HTMLResponse)
def admin_section(request: Request, section: str):
    if section not in SECTION_TITLES:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Página no encontrada")
    return _render_section(request, section)


@router.get("/manifest.webmanifest")
def manifest():
    return JSONResponse(MANIFEST, media_type="application/manifest+json")


@router.get("/sw.js")
def service_worker():
    # Servido desde la raíz para que su alcance cubra toda la aplicación
    return FileResponse(
        APP_DIR / "static" / "sw.js",
        media_type="application/javascript",
        headers={"Service-Worker-Allowed": "/", "Cache-Control": "no-cache"},
    )
