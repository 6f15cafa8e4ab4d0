"""
Detección de conflictos entre citas del mismo espacio y día.

Recorre las citas en el orden recibido y devuelve la primera que se
solapa con el intervalo candidato. No filtra por estado: una cita
Cancelada o NoAsistio también bloquea el horario.
"""

from collections.abc import Iterable
from datetime import date

from agenda.scheduling.entities import AppointmentSlot
from agenda.scheduling.errors import EndNotAfterStartError, SlotConflictError
from agenda.scheduling.timeutils import calendar_day, duration_minutes, time_to_minutes


def intervals_overlap(
    cand_start: int,
    cand_end: int,
    existing_start: int,
    existing_end: int,
) -> bool:
    """
    Solapamiento entre [cand_start, cand_end) y [existing_start, existing_end).

    La primera cláusula basta para intervalos semiabiertos; las de
    contención cubren intervalos que se envuelven por completo.
    """
    return (
        (cand_start < existing_end and cand_end > existing_start)
        or (cand_start <= existing_start and cand_end >= existing_end)
        or (existing_start <= cand_start and existing_end >= cand_end)
    )


def find_conflict(
    espacio_id: str,
    fecha: date,
    hora_inicio: str,
    hora_fin: str,
    appointments: Iterable[AppointmentSlot],
    exclude_id: str | None = None,
) -> AppointmentSlot | None:
    """
    Busca la primera cita que choque con el intervalo candidato.

    Args:
        espacio_id: espacio a reservar
        fecha: día de la reserva (solo cuenta el día calendario)
        hora_inicio / hora_fin: intervalo "HH:mm" semiabierto
        appointments: citas conocidas, en el orden en que se evalúan
        exclude_id: cita en edición, que no puede chocar consigo misma

    Returns:
        La cita en conflicto, o None si la reserva es posible.

    Raises:
        EndNotAfterStartError: si hora_fin no es posterior a hora_inicio
    """
    if duration_minutes(hora_inicio, hora_fin) <= 0:
        raise EndNotAfterStartError(hora_inicio, hora_fin)

    cand_start = time_to_minutes(hora_inicio)
    cand_end = time_to_minutes(hora_fin)
    espacio_id = str(espacio_id)
    day = calendar_day(fecha)
    exclude = str(exclude_id) if exclude_id is not None else None

    for appt in appointments:
        if exclude is not None and appt.id == exclude:
            continue
        if appt.cubiculo_id != espacio_id:
            continue
        if calendar_day(appt.fecha) != day:
            continue

        if intervals_overlap(
            cand_start,
            cand_end,
            time_to_minutes(appt.hora_inicio),
            time_to_minutes(appt.hora_fin),
        ):
            return appt

    return None


def validate_slot(
    espacio_id: str,
    fecha: date,
    hora_inicio: str,
    hora_fin: str,
    appointments: Iterable[AppointmentSlot],
    exclude_id: str | None = None,
) -> None:
    """Como find_conflict, pero lanza SlotConflictError si hay choque."""
    conflict = find_conflict(
        espacio_id, fecha, hora_inicio, hora_fin, appointments, exclude_id=exclude_id
    )
    if conflict is not None:
        raise SlotConflictError(conflict)
