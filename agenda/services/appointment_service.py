"""
Servicio de citas: CRUD, ciclo de estados y validación de solapamiento.

La validación de choques corre aquí, dentro de la transacción de la
request, contra las citas guardadas del mismo espacio y día.
"""

import logging
import math
from datetime import date

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from agenda.auth.rbac import can_manage_appointments
from agenda.core.exceptions import (
    ForbiddenException,
    NotFoundException,
    ValidationException,
    from_scheduling_error,
)
from agenda.models.appointment import Cita
from agenda.models.space import Espacio
from agenda.models.user import User, UserRole
from agenda.scheduling.conflicts import find_conflict, validate_slot
from agenda.scheduling.entities import (
    VALID_TRANSITIONS,
    AppointmentSlot,
    EstadoCita,
    is_valid_transition,
)
from agenda.scheduling.errors import HourDisabledError, SchedulingError
from agenda.scheduling.timeutils import duration_minutes, format_time, parse_time
from agenda.schemas.appointment import (
    CitaConflicto,
    CitaCreate,
    CitaEstadoChange,
    CitaListResponse,
    CitaResponse,
    CitaUpdate,
)
from agenda.schemas.schedule_config import DisponibilidadResponse
from agenda.services.audit_service import log_action
from agenda.services.schedule_config_service import resolve_schedule

logger = logging.getLogger(__name__)

TERMINAL_STATES = (EstadoCita.COMPLETADO, EstadoCita.CANCELADO, EstadoCita.NO_ASISTIO)


# ── Helpers ──────────────────────────────────────────

def cita_to_slot(cita: Cita) -> AppointmentSlot:
    """Vista de solo lectura que consumen el detector y la grilla."""
    return AppointmentSlot(
        id=str(cita.id),
        fecha=cita.fecha,
        hora_inicio=format_time(cita.hora_inicio),
        hora_fin=format_time(cita.hora_fin),
        cubiculo_id=str(cita.espacio_id),
        paciente_id=cita.paciente_id,
        paciente_nombre=cita.paciente.full_name if cita.paciente else "",
        terapeuta_id=cita.terapeuta_id,
        terapeuta_nombre=cita.terapeuta.full_name if cita.terapeuta else "",
        estado=cita.estado,
        modalidad=cita.modalidad,
        materia=cita.materia,
        notas=cita.notas or "",
    )


def _cita_to_response(cita: Cita) -> CitaResponse:
    hora_inicio = format_time(cita.hora_inicio)
    hora_fin = format_time(cita.hora_fin)
    return CitaResponse(
        id=cita.id,
        espacio_id=cita.espacio_id,
        paciente_id=cita.paciente_id,
        terapeuta_id=cita.terapeuta_id,
        fecha=cita.fecha,
        hora_inicio=hora_inicio,
        hora_fin=hora_fin,
        duracion_minutos=duration_minutes(hora_inicio, hora_fin),
        estado=cita.estado,
        modalidad=cita.modalidad,
        materia=cita.materia,
        notas=cita.notas,
        espacio_nombre=cita.espacio.nombre if cita.espacio else None,
        paciente_nombre=cita.paciente.full_name if cita.paciente else None,
        terapeuta_nombre=cita.terapeuta.full_name if cita.terapeuta else None,
        created_at=cita.created_at,
        updated_at=cita.updated_at,
    )


def _load_options():
    """Opciones de carga eager para relaciones de Cita."""
    return [
        joinedload(Cita.espacio),
        joinedload(Cita.paciente),
        joinedload(Cita.terapeuta),
    ]


async def _get_cita(db: AsyncSession, cita_id: int, *, refresh: bool = False) -> Cita:
    query = select(Cita).options(*_load_options()).where(Cita.id == cita_id)
    if refresh:
        query = query.execution_options(populate_existing=True)
    result = await db.execute(query)
    cita = result.scalar_one_or_none()
    if not cita:
        raise NotFoundException("Cita")
    return cita


def _check_ownership(cita: Cita, user: User) -> None:
    """Quien no administra citas solo opera sobre las propias."""
    if not can_manage_appointments(user.role) and cita.paciente_id != user.id:
        raise ForbiddenException("Solo puede modificar sus propias citas")


async def day_slots(
    db: AsyncSession,
    fecha: date,
    espacio_id: int | None = None,
) -> list[AppointmentSlot]:
    """Citas del día (de un espacio o de todos) en orden de inicio."""
    query = (
        select(Cita)
        .options(*_load_options())
        .where(Cita.fecha == fecha)
        .order_by(Cita.hora_inicio, Cita.id)
    )
    if espacio_id is not None:
        query = query.where(Cita.espacio_id == espacio_id)
    result = await db.execute(query)
    return [cita_to_slot(c) for c in result.scalars().unique().all()]


async def _check_overlap(
    db: AsyncSession,
    espacio_id: int,
    fecha: date,
    hora_inicio: str,
    hora_fin: str,
    exclude_id: int | None = None,
) -> None:
    """
    Verifica que no exista solapamiento de citas en el mismo espacio.
    Lanza ConflictException (409) con la cita en conflicto.
    """
    slots = await day_slots(db, fecha, espacio_id)
    try:
        validate_slot(
            str(espacio_id),
            fecha,
            hora_inicio,
            hora_fin,
            slots,
            exclude_id=str(exclude_id) if exclude_id is not None else None,
        )
    except SchedulingError as exc:
        logger.info(
            "Reserva rechazada espacio=%s fecha=%s %s-%s: %s",
            espacio_id, fecha, hora_inicio, hora_fin, exc.code,
        )
        raise from_scheduling_error(exc) from exc


async def _check_hour_enabled(
    db: AsyncSession, espacio_id: int, fecha: date, hora_inicio: str
) -> None:
    config = await resolve_schedule(db, fecha, espacio_id)
    if hora_inicio in config.horas_deshabilitadas:
        raise from_scheduling_error(HourDisabledError(hora_inicio))


async def _get_active_space(db: AsyncSession, espacio_id: int) -> Espacio:
    result = await db.execute(select(Espacio).where(Espacio.id == espacio_id))
    espacio = result.scalar_one_or_none()
    if not espacio:
        raise NotFoundException("Espacio")
    if not espacio.esta_activo:
        raise ValidationException(f"El espacio '{espacio.nombre}' no está disponible")
    return espacio


async def _get_active_user(
    db: AsyncSession, user_id: int, resource: str, role: UserRole | None = None
) -> User:
    query = select(User).where(User.id == user_id, User.is_active.is_(True))
    if role is not None:
        query = query.where(User.role == role)
    result = await db.execute(query)
    found = result.scalar_one_or_none()
    if not found:
        raise NotFoundException(resource)
    return found


# ── CRUD ─────────────────────────────────────────────

async def create_appointment(
    db: AsyncSession,
    user: User,
    data: CitaCreate,
    ip_address: str | None = None,
) -> CitaResponse:
    """
    Crea una cita validando espacio, participantes, hora habilitada y
    solapamiento. Quien no administra citas reserva siempre a su nombre.
    """
    if can_manage_appointments(user.role):
        if data.paciente_id is None:
            raise ValidationException("Debe indicar el paciente de la cita")
        paciente_id = data.paciente_id
    else:
        paciente_id = user.id

    await _get_active_space(db, data.espacio_id)
    await _get_active_user(db, paciente_id, "Paciente")
    await _get_active_user(db, data.terapeuta_id, "Terapeuta", role=UserRole.TERAPEUTA)

    await _check_overlap(db, data.espacio_id, data.fecha, data.hora_inicio, data.hora_fin)
    await _check_hour_enabled(db, data.espacio_id, data.fecha, data.hora_inicio)

    cita = Cita(
        espacio_id=data.espacio_id,
        paciente_id=paciente_id,
        terapeuta_id=data.terapeuta_id,
        fecha=data.fecha,
        hora_inicio=parse_time(data.hora_inicio),
        hora_fin=parse_time(data.hora_fin),
        estado=EstadoCita.AGENDADO,
        modalidad=data.modalidad,
        materia=data.materia,
        notas=data.notas,
        created_by=user.id,
    )
    db.add(cita)
    await db.flush()

    await log_action(
        db,
        user_id=user.id,
        entity="cita",
        entity_id=str(cita.id),
        action="create",
        new_data={
            "espacio_id": data.espacio_id,
            "paciente_id": paciente_id,
            "terapeuta_id": data.terapeuta_id,
            "fecha": data.fecha,
            "hora_inicio": data.hora_inicio,
            "hora_fin": data.hora_fin,
        },
        ip_address=ip_address,
    )
    logger.info(
        "Cita creada id=%s espacio=%s fecha=%s %s-%s",
        cita.id, data.espacio_id, data.fecha, data.hora_inicio, data.hora_fin,
    )

    # Recargar con relaciones
    cita = await _get_cita(db, cita.id, refresh=True)
    return _cita_to_response(cita)


async def get_appointment(db: AsyncSession, cita_id: int) -> CitaResponse:
    """Obtiene una cita por ID con espacio, paciente y terapeuta."""
    return _cita_to_response(await _get_cita(db, cita_id))


async def list_appointments(
    db: AsyncSession,
    *,
    page: int = 1,
    size: int = 20,
    fecha_desde: date | None = None,
    fecha_hasta: date | None = None,
    espacio_id: int | None = None,
    terapeuta_id: int | None = None,
    paciente_id: int | None = None,
    estado: EstadoCita | None = None,
) -> CitaListResponse:
    """Lista citas con paginación y filtros."""
    query = select(Cita).options(*_load_options())

    if fecha_desde:
        query = query.where(Cita.fecha >= fecha_desde)
    if fecha_hasta:
        query = query.where(Cita.fecha <= fecha_hasta)
    if espacio_id:
        query = query.where(Cita.espacio_id == espacio_id)
    if terapeuta_id:
        query = query.where(Cita.terapeuta_id == terapeuta_id)
    if paciente_id:
        query = query.where(Cita.paciente_id == paciente_id)
    if estado:
        query = query.where(Cita.estado == estado)

    count_query = select(func.count()).select_from(
        query.with_only_columns(Cita.id).subquery()
    )
    total_result = await db.execute(count_query)
    total = total_result.scalar() or 0

    offset = (page - 1) * size
    query = query.order_by(Cita.fecha.desc(), Cita.hora_inicio, Cita.id)
    query = query.offset(offset).limit(size)

    result = await db.execute(query)
    citas = result.scalars().unique().all()

    return CitaListResponse(
        items=[_cita_to_response(c) for c in citas],
        total=total,
        page=page,
        size=size,
        pages=math.ceil(total / size) if total > 0 else 0,
    )


async def list_my_appointments(db: AsyncSession, user: User) -> list[CitaResponse]:
    """Citas en las que el usuario es el paciente."""
    result = await db.execute(
        select(Cita)
        .options(*_load_options())
        .where(Cita.paciente_id == user.id)
        .order_by(Cita.fecha.desc(), Cita.hora_inicio)
    )
    return [_cita_to_response(c) for c in result.scalars().unique().all()]


async def update_appointment(
    db: AsyncSession,
    cita_id: int,
    user: User,
    data: CitaUpdate,
    ip_address: str | None = None,
) -> CitaResponse:
    """
    Actualiza una cita existente.
    Solo se pueden editar citas en estado Agendado; si cambia el espacio,
    la fecha o el horario se re-valida excluyendo la propia cita.
    """
    cita = await _get_cita(db, cita_id)
    _check_ownership(cita, user)

    if cita.estado in TERMINAL_STATES:
        raise ValidationException(
            f"No se puede editar una cita en estado '{cita.estado.value}'"
        )

    update_fields = data.model_dump(exclude_unset=True, exclude_none=True)
    old_data = {
        "espacio_id": cita.espacio_id,
        "fecha": cita.fecha,
        "hora_inicio": format_time(cita.hora_inicio),
        "hora_fin": format_time(cita.hora_fin),
    }

    espacio_id = update_fields.get("espacio_id", cita.espacio_id)
    fecha = update_fields.get("fecha", cita.fecha)
    hora_inicio = update_fields.get("hora_inicio", format_time(cita.hora_inicio))
    hora_fin = update_fields.get("hora_fin", format_time(cita.hora_fin))

    if "espacio_id" in update_fields:
        await _get_active_space(db, espacio_id)
    if "terapeuta_id" in update_fields:
        await _get_active_user(
            db, update_fields["terapeuta_id"], "Terapeuta", role=UserRole.TERAPEUTA
        )

    if update_fields.keys() & {"espacio_id", "fecha", "hora_inicio", "hora_fin"}:
        await _check_overlap(db, espacio_id, fecha, hora_inicio, hora_fin, exclude_id=cita.id)
        if update_fields.keys() & {"espacio_id", "fecha", "hora_inicio"}:
            await _check_hour_enabled(db, espacio_id, fecha, hora_inicio)

    for field, value in update_fields.items():
        if field in ("hora_inicio", "hora_fin"):
            value = parse_time(value)
        setattr(cita, field, value)

    await db.flush()

    await log_action(
        db,
        user_id=user.id,
        entity="cita",
        entity_id=str(cita.id),
        action="update",
        old_data=old_data,
        new_data=update_fields,
        ip_address=ip_address,
    )

    cita = await _get_cita(db, cita.id, refresh=True)
    return _cita_to_response(cita)


async def change_status(
    db: AsyncSession,
    cita_id: int,
    user: User,
    data: CitaEstadoChange,
    ip_address: str | None = None,
) -> CitaResponse:
    """
    Cambia el estado de una cita usando la máquina de estados.
    Valida que la transición sea permitida.
    """
    cita = await _get_cita(db, cita_id)

    if not is_valid_transition(cita.estado, data.estado):
        valid = VALID_TRANSITIONS.get(cita.estado, [])
        raise ValidationException(
            f"No se puede cambiar de '{cita.estado.value}' a '{data.estado.value}'. "
            f"Transiciones válidas: {', '.join(s.value for s in valid) or 'ninguna'}"
        )

    old_estado = cita.estado
    cita.estado = data.estado
    await db.flush()

    await log_action(
        db,
        user_id=user.id,
        entity="cita",
        entity_id=str(cita.id),
        action="status_change",
        old_data={"estado": old_estado},
        new_data={"estado": data.estado},
        ip_address=ip_address,
    )

    cita = await _get_cita(db, cita.id, refresh=True)
    return _cita_to_response(cita)


async def delete_appointment(
    db: AsyncSession,
    cita_id: int,
    user: User,
    ip_address: str | None = None,
) -> None:
    cita = await _get_cita(db, cita_id)
    _check_ownership(cita, user)

    old_data = {
        "espacio_id": cita.espacio_id,
        "paciente_id": cita.paciente_id,
        "fecha": cita.fecha,
        "hora_inicio": format_time(cita.hora_inicio),
        "hora_fin": format_time(cita.hora_fin),
        "estado": cita.estado,
    }
    await db.delete(cita)
    await db.flush()

    await log_action(
        db,
        user_id=user.id,
        entity="cita",
        entity_id=str(cita_id),
        action="delete",
        old_data=old_data,
        ip_address=ip_address,
    )
    logger.info("Cita eliminada id=%s por user_id=%s", cita_id, user.id)


# ── Disponibilidad ───────────────────────────────────

async def check_availability(
    db: AsyncSession,
    espacio_id: int,
    fecha: date,
    hora_inicio: str,
    hora_fin: str,
    exclude_id: int | None = None,
) -> DisponibilidadResponse:
    """Indica si el intervalo está libre y, si no, qué cita lo ocupa."""
    slots = await day_slots(db, fecha, espacio_id)
    try:
        conflict = find_conflict(
            str(espacio_id),
            fecha,
            hora_inicio,
            hora_fin,
            slots,
            exclude_id=str(exclude_id) if exclude_id is not None else None,
        )
    except SchedulingError as exc:
        raise from_scheduling_error(exc) from exc

    if conflict is None:
        return DisponibilidadResponse(disponible=True)
    return DisponibilidadResponse(
        disponible=False,
        conflicto=CitaConflicto(
            id=conflict.id,
            paciente_nombre=conflict.paciente_nombre,
            hora_inicio=conflict.hora_inicio,
            hora_fin=conflict.hora_fin,
        ),
    )
