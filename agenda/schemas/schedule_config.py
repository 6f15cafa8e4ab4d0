"""
Schemas para la configuración de horarios por espacio y fecha.
"""

from datetime import date

from pydantic import BaseModel, Field, field_validator, model_validator

from agenda.config import get_settings
from agenda.schemas.appointment import CitaConflicto
from agenda.scheduling.timeutils import normalize_time


class ConfiguracionHorarioSave(BaseModel):
    """Guarda (crea o reemplaza) la configuración de un espacio en una fecha."""
    espacio_id: int
    fecha: date
    horas_deshabilitadas: list[str] = Field(default_factory=list)
    hora_inicio: int | None = Field(None, ge=0, le=23)
    hora_fin: int | None = Field(None, ge=1, le=23)
    motivo: str | None = Field(None, max_length=200)

    @field_validator("horas_deshabilitadas")
    @classmethod
    def valid_labels(cls, v: list[str]) -> list[str]:
        labels = []
        for hora in v:
            hora = normalize_time(hora)
            if hora not in labels:
                labels.append(hora)
        return labels

    @model_validator(mode="after")
    def fin_after_inicio(self) -> "ConfiguracionHorarioSave":
        # El límite omitido toma el valor por defecto del día
        settings = get_settings()
        inicio = self.hora_inicio if self.hora_inicio is not None else settings.HORA_APERTURA_DEFAULT
        fin = self.hora_fin if self.hora_fin is not None else settings.HORA_CIERRE_DEFAULT
        if fin <= inicio:
            raise ValueError(
                f"La hora de cierre ({fin}) debe ser posterior a la de apertura ({inicio})"
            )
        return self


class ConfiguracionHorarioResponse(BaseModel):
    """Horario efectivo del día: por defecto o configurado."""
    fecha: date
    espacio_id: int | None = None
    hora_inicio: int
    hora_fin: int
    horas: list[str]
    horas_deshabilitadas: list[str]
    es_horario_default: bool
    motivo: str | None = None


class HorariosDisponiblesResponse(BaseModel):
    fecha: date
    espacio_id: int | None = None
    horas: list[str]


class ConfiguracionEspecialResponse(BaseModel):
    fecha: date
    espacio_id: int
    tiene_configuracion_especial: bool


class DisponibilidadResponse(BaseModel):
    """Resultado de verificar un intervalo contra las citas del día."""
    disponible: bool
    conflicto: CitaConflicto | None = None
