# app/core/route_guard.py
"""
Interceptor de peticiones de páginas.

- Rutas públicas: pasan sin comprobar sesión.
- Sin sesión: redirección a /auth/signin?callbackUrl=<url original>.
- Rol no permitido para el prefijo: redirección a /unauthorized.

Las rutas /api/* no pasan por aquí; cada endpoint declara su dependencia de
rol y responde 401/403 en JSON.
"""
from typing import Iterable, Optional, Sequence, Tuple
from urllib.parse import quote

from fastapi import Request
from fastapi.responses import RedirectResponse

from app.core.config import Roles
from app.core.security import decode_access_token, extract_token

SIGNIN_PATH = "/auth/signin"
UNAUTHORIZED_PATH = "/unauthorized"

PUBLIC_PREFIXES: Tuple[str, ...] = (
    "/auth",
    "/api",
    "/static",
    "/manifest.webmanifest",
    "/sw.js",
    "/favicon.ico",
    "/health",
    "/docs",
    "/redoc",
    "/openapi.json",
    UNAUTHORIZED_PATH,
)
PUBLIC_EXACT = ("/",)

# Ordenado del prefijo más específico al más general
ROLE_POLICY: Sequence[Tuple[str, Tuple[str, ...]]] = (
    ("/admin/users", (Roles.ADMIN, Roles.IT_ADMIN)),
    ("/admin/bookings", (Roles.IT_ADMIN, Roles.CONSERJE)),
    ("/admin", (Roles.IT_ADMIN,)),
    ("/manager", (Roles.MANAGER, Roles.IT_ADMIN)),
    ("/notifications", (Roles.CONSERJE,)),
)


def _matches(path: str, prefix: str) -> bool:
    return path == prefix or path.startswith(prefix.rstrip("/") + "/")


def is_public(path: str) -> bool:
    if path in PUBLIC_EXACT:
        return True
    return any(_matches(path, prefix) for prefix in PUBLIC_PREFIXES)


def allowed_roles(path: str) -> Optional[Iterable[str]]:
    """Roles permitidos para la ruta; None si basta con estar autenticado."""
    for prefix, roles in ROLE_POLICY:
        if _matches(path, prefix):
            return roles
    return None


def signin_redirect(request: Request) -> RedirectResponse:
    callback = quote(str(request.url), safe="")
    return RedirectResponse(f"{SIGNIN_PATH}?callbackUrl={callback}", status_code=307)


async def guard_pages(request: Request, call_next):
    path = request.url.path
    if is_public(path):
        return await call_next(request)

    token = extract_token(request)
    payload = decode_access_token(token) if token else None
    if payload is None:
        return signin_redirect(request)

    roles = allowed_roles(path)
    if roles is not None and payload.get("role") not in roles:
        return RedirectResponse(UNAUTHORIZED_PATH, status_code=307)

    request.state.session = payload
    return await call_next(request)
