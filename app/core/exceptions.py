# app/core/exceptions.py
"""
Errores de dominio.

Los servicios lanzan estas excepciones y los manejadores registrados en
app.core.error_handlers las convierten en respuestas {"error": ...}.
"""
from fastapi import status


class ServiceError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, details: str | None = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationFailedError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST


class PermissionDeniedError(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(ServiceError):
    status_code = status.HTTP_409_CONFLICT


class AppendOnlyViolation(ConflictError):
    """Intento de modificar o borrar un registro de auditoría."""
