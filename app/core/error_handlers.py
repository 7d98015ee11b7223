import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.exceptions import ServiceError

logger = logging.getLogger("reservas_backend")


def error_response(status_code: int, error: str, details=None, headers=None) -> JSONResponse:
    content = {"error": error}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content), headers=headers)


def register_error_handlers(app: FastAPI):
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.error("Error HTTP %s en %s - %s", exc.status_code, request.url, exc.detail)
        return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

    @app.exception_handler(ServiceError)
    async def service_exception_handler(request: Request, exc: ServiceError):
        logger.warning("Error de dominio %s en %s - %s", exc.status_code, request.url, exc.message)
        return error_response(exc.status_code, exc.message, exc.details)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.error("Error de validación en %s - %s", request.url, exc.errors())
        return error_response(status.HTTP_400_BAD_REQUEST, "Error de validación", exc.errors())

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        logger.error("Valor no válido en %s - %s", request.url, exc)
        return error_response(status.HTTP_400_BAD_REQUEST, "Error de validación", str(exc))

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError):
        # Restricciones UNIQUE de la base de datos (mesas, email, apartamento)
        logger.warning("Conflicto de integridad en %s - %s", request.url, exc.orig)
        return error_response(status.HTTP_409_CONFLICT, "Conflicto con un registro existente")

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Error no controlado en %s", request.url)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Error interno del servidor")
