"""
Excepciones HTTP personalizadas para la API.
"""

from fastapi import HTTPException, status

from agenda.scheduling.errors import SchedulingError, SlotConflictError


class CredentialsException(HTTPException):
    """Error de credenciales inválidas (401)."""

    def __init__(self, detail: str = "Credenciales inválidas"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class ForbiddenException(HTTPException):
    """Error de permisos insuficientes (403)."""

    def __init__(self, detail: str = "No tiene permisos para realizar esta acción"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
        )


class NotFoundException(HTTPException):
    """Recurso no encontrado (404)."""

    def __init__(self, resource: str = "Recurso", detail: str | None = None):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail or f"{resource} no encontrado",
        )


class ConflictException(HTTPException):
    """Conflicto de datos (409) — ej: email duplicado o cita solapada."""

    def __init__(self, detail: str | dict = "El recurso ya existe"):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
        )


class ValidationException(HTTPException):
    """Error de validación de negocio (422)."""

    def __init__(self, detail: str | dict = "Error de validación"):
        super().__init__(
            status_code=422,
            detail=detail,
        )


def from_scheduling_error(exc: SchedulingError) -> HTTPException:
    """Traduce un error del agendador a la excepción HTTP correspondiente."""
    detail = {"code": exc.code, "message": exc.message}
    if isinstance(exc, SlotConflictError):
        detail["conflicto"] = {
            "id": exc.conflict.id,
            "paciente_nombre": exc.conflict.paciente_nombre,
            "hora_inicio": exc.conflict.hora_inicio,
            "hora_fin": exc.conflict.hora_fin,
        }
        return ConflictException(detail)
    return ValidationException(detail)
