"""
Schemas de la agenda diaria: grilla espacio × hora.
"""

from datetime import date

from pydantic import BaseModel

from agenda.scheduling.entities import EstadoCita, Modalidad, TipoEspacio


class CitaResumen(BaseModel):
    """Cita tal como se dibuja en una celda de la grilla."""
    id: int
    espacio_id: int
    fecha: date
    hora_inicio: str
    hora_fin: str
    paciente_id: int | None = None
    paciente_nombre: str
    terapeuta_id: int | None = None
    terapeuta_nombre: str
    estado: EstadoCita
    modalidad: Modalidad
    materia: str


class CeldaAgenda(BaseModel):
    hora: str
    cita: CitaResumen | None = None
    span: int = 1
    skip: bool = False
    deshabilitada: bool = False


class FilaAgenda(BaseModel):
    espacio_id: int
    espacio_nombre: str
    tipo: TipoEspacio
    es_horario_default: bool
    horas: list[str]
    horas_deshabilitadas: list[str]
    celdas: list[CeldaAgenda]


class AgendaDiaResponse(BaseModel):
    fecha: date
    filas: list[FilaAgenda]
    citas: list[CitaResumen]


class BorradorReserva(BaseModel):
    """Datos con que se pre-llena el formulario al elegir una celda libre."""
    espacio_id: int
    fecha: date
    hora_inicio: str
    hora_fin: str
