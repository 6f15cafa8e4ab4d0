"""
Schemas para Cita — reservas de espacios.
Las horas viajan como texto "HH:mm", igual que en la grilla.
"""

from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator

from agenda.scheduling.entities import EstadoCita, Modalidad
from agenda.scheduling.timeutils import normalize_time


def _check_hhmm(v: str | None) -> str | None:
    if v is None:
        return v
    return normalize_time(v)


# ── CRUD de Citas ────────────────────────────────────

class CitaCreate(BaseModel):
    espacio_id: int
    paciente_id: int | None = Field(
        None,
        description="Solo administradores y terapeutas pueden reservar para otro paciente",
    )
    terapeuta_id: int
    fecha: date
    hora_inicio: str = Field(..., examples=["09:00"])
    hora_fin: str = Field(..., examples=["10:30"])
    modalidad: Modalidad = Modalidad.PRESENCIAL
    materia: str = Field(..., min_length=2, max_length=150)
    notas: str | None = Field(None, max_length=2000)

    @field_validator("hora_inicio", "hora_fin")
    @classmethod
    def valid_hhmm(cls, v: str | None) -> str | None:
        return _check_hhmm(v)


class CitaUpdate(BaseModel):
    espacio_id: int | None = None
    terapeuta_id: int | None = None
    fecha: date | None = None
    hora_inicio: str | None = None
    hora_fin: str | None = None
    modalidad: Modalidad | None = None
    materia: str | None = Field(None, min_length=2, max_length=150)
    notas: str | None = Field(None, max_length=2000)

    @field_validator("hora_inicio", "hora_fin")
    @classmethod
    def valid_hhmm(cls, v: str | None) -> str | None:
        return _check_hhmm(v)


class CitaEstadoChange(BaseModel):
    """Schema para cambiar el estado de una cita."""
    estado: EstadoCita


class CitaResponse(BaseModel):
    id: int
    espacio_id: int
    paciente_id: int
    terapeuta_id: int
    fecha: date
    hora_inicio: str
    hora_fin: str
    duracion_minutos: int
    estado: EstadoCita
    modalidad: Modalidad
    materia: str
    notas: str | None = None

    # Datos de relaciones
    espacio_nombre: str | None = None
    paciente_nombre: str | None = None
    terapeuta_nombre: str | None = None

    created_at: datetime
    updated_at: datetime


class CitaListResponse(BaseModel):
    """Respuesta paginada de listado de citas."""
    items: list[CitaResponse]
    total: int
    page: int
    size: int
    pages: int


class CitaConflicto(BaseModel):
    """Cita existente que bloquea el intervalo pedido."""
    id: str
    paciente_nombre: str
    hora_inicio: str
    hora_fin: str
