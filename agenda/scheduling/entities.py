"""
Valores en memoria con los que trabaja el núcleo de agendamiento.

Son independientes de SQLAlchemy: los servicios convierten los modelos
a estos valores antes de invocar al detector o a la grilla.
"""

import enum
from dataclasses import dataclass, field
from datetime import date


class EstadoCita(str, enum.Enum):
    """Ciclo de vida de una cita."""
    AGENDADO = "Agendado"
    COMPLETADO = "Completado"
    CANCELADO = "Cancelado"
    NO_ASISTIO = "NoAsistio"


class Modalidad(str, enum.Enum):
    PRESENCIAL = "Presencial"
    ONLINE = "Online"


class TipoEspacio(str, enum.Enum):
    CUBICULO = "Cubículo"
    CONSULTORIO = "Consultorio"
    SALA = "Sala"


# Estados terminales: no admiten transiciones
VALID_TRANSITIONS: dict[EstadoCita, list[EstadoCita]] = {
    EstadoCita.AGENDADO: [
        EstadoCita.COMPLETADO,
        EstadoCita.CANCELADO,
        EstadoCita.NO_ASISTIO,
    ],
    EstadoCita.COMPLETADO: [],
    EstadoCita.CANCELADO: [],
    EstadoCita.NO_ASISTIO: [],
}


def is_valid_transition(current: EstadoCita, new: EstadoCita) -> bool:
    """Verifica si una transición de estado es válida (o si no hay cambio)."""
    return current == new or new in VALID_TRANSITIONS.get(current, [])


@dataclass(frozen=True)
class AppointmentSlot:
    """Una cita ya reservada, vista por el agendador (solo lectura)."""
    id: str
    fecha: date
    hora_inicio: str
    hora_fin: str
    cubiculo_id: str
    paciente_id: int | None = None
    paciente_nombre: str = ""
    terapeuta_id: int | None = None
    terapeuta_nombre: str = ""
    estado: EstadoCita = EstadoCita.AGENDADO
    modalidad: Modalidad = Modalidad.PRESENCIAL
    materia: str = ""
    notas: str = ""


@dataclass(frozen=True)
class Space:
    """Espacio reservable del catálogo (cubículo, consultorio, sala)."""
    id: str
    nombre: str
    tipo: TipoEspacio = TipoEspacio.CUBICULO
    disponible: bool = True
    costo_por_hora: float = 0.0


@dataclass(frozen=True)
class DayScheduleConfig:
    """
    Horario efectivo de un espacio en una fecha.

    horas_deshabilitadas es un frozenset para que la configuración sea
    hasheable y pueda memoizarse la secuencia de horas.
    """
    fecha: date
    espacio_id: str | None
    hora_inicio: int
    hora_fin: int
    horas_deshabilitadas: frozenset[str] = field(default_factory=frozenset)
    es_horario_default: bool = True
