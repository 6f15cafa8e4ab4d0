"""
Grilla espacio × hora de la agenda diaria.

Cada celda sabe si inicia una cita (owner), cuántas columnas de media
hora ocupa (span) y si queda cubierta por una cita anterior (skip).
"""

import math
from collections.abc import Collection, Iterable
from dataclasses import dataclass
from datetime import date

from agenda.scheduling.day_schedule import hour_labels
from agenda.scheduling.entities import AppointmentSlot, DayScheduleConfig, Space
from agenda.scheduling.errors import HourDisabledError
from agenda.scheduling.timeutils import calendar_day, duration_minutes, time_to_minutes

SLOT_MINUTES = 30


@dataclass(frozen=True)
class GridCell:
    hora: str
    owner: AppointmentSlot | None = None
    span: int = 1
    skip: bool = False
    deshabilitada: bool = False


@dataclass(frozen=True)
class GridRow:
    espacio: Space
    config: DayScheduleConfig
    cells: list[GridCell]


@dataclass(frozen=True)
class BookingDraft:
    """Datos con los que se abre el formulario al hacer click en una celda."""
    cubiculo_id: str
    fecha: date
    hora_inicio: str
    hora_fin: str


def _same_space_and_day(appt: AppointmentSlot, espacio_id: str, fecha: date) -> bool:
    return appt.cubiculo_id == str(espacio_id) and calendar_day(appt.fecha) == calendar_day(fecha)


def should_skip_cell(
    espacio_id: str,
    hora: str,
    fecha: date,
    appointments: Iterable[AppointmentSlot],
) -> bool:
    """True si la celda cae estrictamente dentro de una cita que empezó antes."""
    current = time_to_minutes(hora)
    for appt in appointments:
        if not _same_space_and_day(appt, espacio_id, fecha):
            continue
        if time_to_minutes(appt.hora_inicio) < current < time_to_minutes(appt.hora_fin):
            return True
    return False


def get_appointment_at(
    espacio_id: str,
    hora: str,
    fecha: date,
    appointments: Iterable[AppointmentSlot],
) -> AppointmentSlot | None:
    """La cita que empieza exactamente en esta celda (la que se dibuja)."""
    for appt in appointments:
        if _same_space_and_day(appt, espacio_id, fecha) and appt.hora_inicio == hora:
            return appt
    return None


def get_appointment_span(appointment: AppointmentSlot, slot_minutes: int = SLOT_MINUTES) -> int:
    """Columnas de media hora que ocupa la cita."""
    return math.ceil(duration_minutes(appointment.hora_inicio, appointment.hora_fin) / slot_minutes)


def next_slot(hora: str, labels: list[str]) -> str:
    """Siguiente etiqueta de la grilla, o la misma si es la última."""
    try:
        index = labels.index(hora)
    except ValueError:
        return hora
    if index + 1 < len(labels):
        return labels[index + 1]
    return hora


def check_cell_click(
    espacio_id: str,
    hora: str,
    fecha: date,
    appointments: Collection[AppointmentSlot],
    disabled: Collection[str],
    labels: list[str] | None = None,
) -> BookingDraft | None:
    """
    Valida un click sobre una celda vacía.

    Raises:
        HourDisabledError: la hora está deshabilitada para ese día

    Returns:
        None si la celda ya tiene dueña (no se hace nada), o el borrador
        de reserva que abre el formulario.
    """
    if hora in disabled:
        raise HourDisabledError(hora)
    if get_appointment_at(espacio_id, hora, fecha, appointments):
        return None

    return BookingDraft(
        cubiculo_id=str(espacio_id),
        fecha=calendar_day(fecha),
        hora_inicio=hora,
        hora_fin=next_slot(hora, labels or []),
    )


def build_grid_row(
    espacio: Space,
    config: DayScheduleConfig,
    appointments: Collection[AppointmentSlot],
) -> GridRow:
    """Arma las celdas de un espacio para el día de la configuración."""
    cells: list[GridCell] = []
    for hora in hour_labels(config):
        deshabilitada = hora in config.horas_deshabilitadas
        if should_skip_cell(espacio.id, hora, config.fecha, appointments):
            cells.append(GridCell(hora=hora, skip=True, deshabilitada=deshabilitada))
            continue

        owner = get_appointment_at(espacio.id, hora, config.fecha, appointments)
        cells.append(GridCell(
            hora=hora,
            owner=owner,
            span=get_appointment_span(owner) if owner else 1,
            deshabilitada=deshabilitada,
        ))

    return GridRow(espacio=espacio, config=config, cells=cells)
