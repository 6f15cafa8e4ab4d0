"""
Servicio de la agenda diaria: arma la grilla espacio × hora y valida
la selección de celdas para nuevas reservas.
"""

import logging
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from agenda.core.exceptions import from_scheduling_error
from agenda.scheduling.day_schedule import hour_labels
from agenda.scheduling.entities import AppointmentSlot
from agenda.scheduling.errors import SchedulingError
from agenda.scheduling.grid import build_grid_row, check_cell_click
from agenda.scheduling.timeutils import normalize_time
from agenda.schemas.agenda import (
    AgendaDiaResponse,
    BorradorReserva,
    CeldaAgenda,
    CitaResumen,
    FilaAgenda,
)
from agenda.services import appointment_service, space_service
from agenda.services.schedule_config_service import resolve_schedule, schedule_cache

logger = logging.getLogger(__name__)


def _resumen(slot: AppointmentSlot) -> CitaResumen:
    return CitaResumen(
        id=int(slot.id),
        espacio_id=int(slot.cubiculo_id),
        fecha=slot.fecha,
        hora_inicio=slot.hora_inicio,
        hora_fin=slot.hora_fin,
        paciente_id=slot.paciente_id,
        paciente_nombre=slot.paciente_nombre,
        terapeuta_id=slot.terapeuta_id,
        terapeuta_nombre=slot.terapeuta_nombre,
        estado=slot.estado,
        modalidad=slot.modalidad,
        materia=slot.materia,
    )


async def get_day_agenda(
    db: AsyncSession,
    fecha: date,
    espacio_id: int | None = None,
) -> AgendaDiaResponse:
    """
    Grilla del día para los espacios activos (o uno solo).
    Cada espacio se dibuja con su propio horario resuelto.
    """
    if espacio_id is not None:
        espacios = [await space_service.get_space(db, espacio_id)]
    else:
        espacios = await space_service.list_spaces(db, solo_activos=True)

    slots = await appointment_service.day_slots(db, fecha, espacio_id)
    cache = await schedule_cache(db, fecha, [e.id for e in espacios])

    filas: list[FilaAgenda] = []
    for espacio in espacios:
        space = space_service.espacio_to_space(espacio)
        config = cache.get(fecha, space.id)
        row = build_grid_row(space, config, slots)
        filas.append(FilaAgenda(
            espacio_id=espacio.id,
            espacio_nombre=espacio.nombre,
            tipo=espacio.tipo,
            es_horario_default=config.es_horario_default,
            horas=hour_labels(config),
            horas_deshabilitadas=sorted(config.horas_deshabilitadas),
            celdas=[
                CeldaAgenda(
                    hora=cell.hora,
                    cita=_resumen(cell.owner) if cell.owner else None,
                    span=cell.span,
                    skip=cell.skip,
                    deshabilitada=cell.deshabilitada,
                )
                for cell in row.cells
            ],
        ))

    logger.debug(
        "Agenda %s: %d espacios, %d citas", fecha, len(filas), len(slots)
    )
    return AgendaDiaResponse(
        fecha=fecha,
        filas=filas,
        citas=[_resumen(s) for s in slots],
    )


async def select_cell(
    db: AsyncSession,
    fecha: date,
    espacio_id: int,
    hora: str,
) -> BorradorReserva | None:
    """
    Valida la selección de una celda de la grilla.

    Devuelve None si la celda ya tiene una cita, o el borrador con que se
    abre el formulario de reserva (hora_fin = siguiente columna).
    """
    await space_service.get_space(db, espacio_id)
    config = await resolve_schedule(db, fecha, espacio_id)
    slots = await appointment_service.day_slots(db, fecha, espacio_id)

    try:
        hora = normalize_time(hora)
        draft = check_cell_click(
            str(espacio_id),
            hora,
            fecha,
            slots,
            config.horas_deshabilitadas,
            labels=hour_labels(config),
        )
    except SchedulingError as exc:
        raise from_scheduling_error(exc) from exc

    if draft is None:
        return None
    return BorradorReserva(
        espacio_id=int(draft.cubiculo_id),
        fecha=draft.fecha,
        hora_inicio=draft.hora_inicio,
        hora_fin=draft.hora_fin,
    )
