"""
Servicio de configuración de horarios por espacio y fecha.

La existencia de un registro en configuracion_horarios convierte el día
en un horario explícito (grilla de media hora + horas deshabilitadas);
sin registro rige el horario por defecto de la configuración global.
"""

import logging
from collections.abc import Iterable
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agenda.config import get_settings
from agenda.core.exceptions import NotFoundException, ValidationException
from agenda.models.schedule_config import ConfiguracionHorario
from agenda.models.user import User
from agenda.scheduling.day_schedule import (
    DayScheduleCache,
    ScheduleOverride,
    available_hours,
    hour_labels,
    resolve_day_schedule,
)
from agenda.scheduling.entities import DayScheduleConfig
from agenda.schemas.schedule_config import (
    ConfiguracionHorarioResponse,
    ConfiguracionHorarioSave,
    HorariosDisponiblesResponse,
)
from agenda.services.audit_service import log_action
from agenda.services.space_service import get_space

logger = logging.getLogger(__name__)
settings = get_settings()


def _to_override(row: ConfiguracionHorario) -> ScheduleOverride:
    return ScheduleOverride(
        horas_deshabilitadas=frozenset(row.horas_deshabilitadas or ()),
        hora_inicio=row.hora_inicio,
        hora_fin=row.hora_fin,
    )


def _to_response(
    config: DayScheduleConfig, motivo: str | None = None
) -> ConfiguracionHorarioResponse:
    return ConfiguracionHorarioResponse(
        fecha=config.fecha,
        espacio_id=int(config.espacio_id) if config.espacio_id is not None else None,
        hora_inicio=config.hora_inicio,
        hora_fin=config.hora_fin,
        horas=hour_labels(config),
        horas_deshabilitadas=sorted(config.horas_deshabilitadas),
        es_horario_default=config.es_horario_default,
        motivo=motivo,
    )


async def _get_row(
    db: AsyncSession, fecha: date, espacio_id: int
) -> ConfiguracionHorario | None:
    result = await db.execute(
        select(ConfiguracionHorario).where(
            ConfiguracionHorario.fecha == fecha,
            ConfiguracionHorario.espacio_id == espacio_id,
        )
    )
    return result.scalar_one_or_none()


async def schedule_cache(
    db: AsyncSession,
    fecha: date,
    espacio_ids: Iterable[int] | None = None,
) -> DayScheduleCache:
    """
    Caché de horarios del día, precargada con una sola consulta.

    Vive lo que dura la request: cada request parte de una foto nueva
    de las configuraciones guardadas.
    """
    query = select(ConfiguracionHorario).where(ConfiguracionHorario.fecha == fecha)
    if espacio_ids is not None:
        query = query.where(ConfiguracionHorario.espacio_id.in_(list(espacio_ids)))
    result = await db.execute(query)

    overrides = {
        (row.fecha, str(row.espacio_id)): _to_override(row)
        for row in result.scalars().all()
    }
    return DayScheduleCache(
        lambda f, e: overrides.get((f, e)),
        default_inicio=settings.HORA_APERTURA_DEFAULT,
        default_fin=settings.HORA_CIERRE_DEFAULT,
    )


async def resolve_schedule(
    db: AsyncSession, fecha: date, espacio_id: int | None
) -> DayScheduleConfig:
    """Horario efectivo de un espacio en una fecha."""
    if espacio_id is None:
        # Sin espacio no se consulta ninguna configuración
        return resolve_day_schedule(
            fecha,
            None,
            None,
            default_inicio=settings.HORA_APERTURA_DEFAULT,
            default_fin=settings.HORA_CIERRE_DEFAULT,
        )
    cache = await schedule_cache(db, fecha, [espacio_id])
    return cache.get(fecha, str(espacio_id))


async def get_configuration(
    db: AsyncSession, fecha: date, espacio_id: int | None
) -> ConfiguracionHorarioResponse:
    config = await resolve_schedule(db, fecha, espacio_id)
    motivo = None
    if not config.es_horario_default:
        row = await _get_row(db, fecha, espacio_id)
        motivo = row.motivo if row else None
    return _to_response(config, motivo)


async def has_special_configuration(
    db: AsyncSession, fecha: date, espacio_id: int
) -> bool:
    return await _get_row(db, fecha, espacio_id) is not None


async def get_available_hours(
    db: AsyncSession, fecha: date, espacio_id: int | None
) -> HorariosDisponiblesResponse:
    config = await resolve_schedule(db, fecha, espacio_id)
    return HorariosDisponiblesResponse(
        fecha=fecha,
        espacio_id=espacio_id,
        horas=available_hours(config),
    )


async def save_configuration(
    db: AsyncSession,
    user: User,
    data: ConfiguracionHorarioSave,
    ip_address: str | None = None,
) -> ConfiguracionHorarioResponse:
    """
    Crea o reemplaza la configuración de (fecha, espacio).
    Guardar una lista vacía también deja el día en modo configurado.
    """
    await get_space(db, data.espacio_id)

    requested = resolve_day_schedule(
        data.fecha,
        str(data.espacio_id),
        ScheduleOverride(
            horas_deshabilitadas=frozenset(data.horas_deshabilitadas),
            hora_inicio=data.hora_inicio,
            hora_fin=data.hora_fin,
        ),
        default_inicio=settings.HORA_APERTURA_DEFAULT,
        default_fin=settings.HORA_CIERRE_DEFAULT,
    )
    fuera = [h for h in data.horas_deshabilitadas if h not in hour_labels(requested)]
    if fuera:
        raise ValidationException(
            f"Horas fuera del horario del día: {', '.join(fuera)}"
        )

    row = await _get_row(db, data.fecha, data.espacio_id)
    old_data = None
    if row is None:
        row = ConfiguracionHorario(
            espacio_id=data.espacio_id,
            fecha=data.fecha,
            created_by=user.id,
        )
        db.add(row)
        action = "create"
    else:
        old_data = {
            "horas_deshabilitadas": list(row.horas_deshabilitadas or []),
            "hora_inicio": row.hora_inicio,
            "hora_fin": row.hora_fin,
            "motivo": row.motivo,
        }
        action = "update"

    row.horas_deshabilitadas = list(data.horas_deshabilitadas)
    row.hora_inicio = data.hora_inicio
    row.hora_fin = data.hora_fin
    row.motivo = data.motivo
    await db.flush()

    await log_action(
        db,
        user_id=user.id,
        entity="configuracion_horario",
        entity_id=str(row.id),
        action=action,
        old_data=old_data,
        new_data=data.model_dump(),
        ip_address=ip_address,
    )
    logger.info(
        "Configuración de horario %s espacio=%s fecha=%s deshabilitadas=%d",
        action, data.espacio_id, data.fecha, len(data.horas_deshabilitadas),
    )

    return _to_response(requested, row.motivo)


async def delete_configuration(
    db: AsyncSession,
    user: User,
    fecha: date,
    espacio_id: int,
    ip_address: str | None = None,
) -> None:
    """Vuelve el día al horario por defecto."""
    row = await _get_row(db, fecha, espacio_id)
    if row is None:
        raise NotFoundException(
            "Configuración de horario",
            detail="No existe configuración especial para ese espacio y fecha",
        )

    old_data = {
        "espacio_id": row.espacio_id,
        "fecha": row.fecha,
        "horas_deshabilitadas": list(row.horas_deshabilitadas or []),
    }
    row_id = row.id
    await db.delete(row)
    await db.flush()

    await log_action(
        db,
        user_id=user.id,
        entity="configuracion_horario",
        entity_id=str(row_id),
        action="delete",
        old_data=old_data,
        ip_address=ip_address,
    )
