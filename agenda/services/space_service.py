"""
Servicio del catálogo de espacios: CRUD, activación y conteo.
"""

import logging

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from agenda.core.exceptions import ConflictException, NotFoundException
from agenda.models.appointment import Cita
from agenda.models.schedule_config import ConfiguracionHorario
from agenda.models.space import Espacio
from agenda.models.user import User
from agenda.scheduling.entities import Space, TipoEspacio
from agenda.schemas.space import EspacioCreate, EspacioUpdate
from agenda.services.audit_service import log_action

logger = logging.getLogger(__name__)


def espacio_to_space(espacio: Espacio) -> Space:
    """Vista del espacio que consume la grilla."""
    return Space(
        id=str(espacio.id),
        nombre=espacio.nombre,
        tipo=espacio.tipo,
        disponible=espacio.esta_activo,
        costo_por_hora=float(espacio.costo_por_hora or 0),
    )


async def _ensure_unique_name(
    db: AsyncSession, nombre: str, exclude_id: int | None = None
) -> None:
    query = select(Espacio.id).where(func.lower(Espacio.nombre) == nombre.lower())
    if exclude_id is not None:
        query = query.where(Espacio.id != exclude_id)
    result = await db.execute(query)
    if result.first():
        raise ConflictException(f"Ya existe un espacio con el nombre '{nombre}'")


async def list_spaces(
    db: AsyncSession,
    *,
    tipo: TipoEspacio | None = None,
    solo_activos: bool = False,
) -> list[Espacio]:
    query = select(Espacio)
    if tipo:
        query = query.where(Espacio.tipo == tipo)
    if solo_activos:
        query = query.where(Espacio.esta_activo.is_(True))
    result = await db.execute(query.order_by(Espacio.nombre))
    return list(result.scalars().all())


async def get_space(db: AsyncSession, espacio_id: int) -> Espacio:
    result = await db.execute(select(Espacio).where(Espacio.id == espacio_id))
    espacio = result.scalar_one_or_none()
    if not espacio:
        raise NotFoundException("Espacio")
    return espacio


async def count_active(db: AsyncSession) -> int:
    result = await db.execute(
        select(func.count(Espacio.id)).where(Espacio.esta_activo.is_(True))
    )
    return result.scalar() or 0


async def create_space(
    db: AsyncSession,
    user: User,
    data: EspacioCreate,
    ip_address: str | None = None,
) -> Espacio:
    await _ensure_unique_name(db, data.nombre)

    espacio = Espacio(**data.model_dump())
    db.add(espacio)
    await db.flush()

    await log_action(
        db,
        user_id=user.id,
        entity="espacio",
        entity_id=str(espacio.id),
        action="create",
        new_data=data.model_dump(),
        ip_address=ip_address,
    )
    logger.info("Espacio creado id=%s nombre=%s", espacio.id, espacio.nombre)

    # Recargar con defaults del servidor
    return await _reload(db, espacio.id)


async def update_space(
    db: AsyncSession,
    espacio_id: int,
    user: User,
    data: EspacioUpdate,
    ip_address: str | None = None,
) -> Espacio:
    espacio = await get_space(db, espacio_id)
    update_fields = data.model_dump(exclude_unset=True)

    if update_fields.get("nombre"):
        await _ensure_unique_name(db, update_fields["nombre"], exclude_id=espacio.id)

    old_data = {field: getattr(espacio, field) for field in update_fields}
    for field, value in update_fields.items():
        if value is not None:
            setattr(espacio, field, value)
    await db.flush()

    await log_action(
        db,
        user_id=user.id,
        entity="espacio",
        entity_id=str(espacio.id),
        action="update",
        old_data=old_data,
        new_data=update_fields,
        ip_address=ip_address,
    )
    return await _reload(db, espacio.id)


async def change_status(
    db: AsyncSession,
    espacio_id: int,
    user: User,
    esta_activo: bool,
    ip_address: str | None = None,
) -> Espacio:
    espacio = await get_space(db, espacio_id)
    old_status = espacio.esta_activo
    espacio.esta_activo = esta_activo
    await db.flush()

    await log_action(
        db,
        user_id=user.id,
        entity="espacio",
        entity_id=str(espacio.id),
        action="status_change",
        old_data={"esta_activo": old_status},
        new_data={"esta_activo": esta_activo},
        ip_address=ip_address,
    )
    logger.info("Espacio id=%s esta_activo=%s", espacio.id, esta_activo)
    return await _reload(db, espacio.id)


async def delete_space(
    db: AsyncSession,
    espacio_id: int,
    user: User,
    ip_address: str | None = None,
) -> None:
    """Elimina un espacio sin citas; sus configuraciones de horario se borran con él."""
    espacio = await get_space(db, espacio_id)

    citas = await db.execute(
        select(func.count(Cita.id)).where(Cita.espacio_id == espacio.id)
    )
    if citas.scalar():
        raise ConflictException(
            "El espacio tiene citas registradas; desactívelo en lugar de eliminarlo"
        )

    await db.execute(
        delete(ConfiguracionHorario).where(ConfiguracionHorario.espacio_id == espacio.id)
    )
    old_data = {"nombre": espacio.nombre, "tipo": espacio.tipo}
    await db.delete(espacio)
    await db.flush()

    await log_action(
        db,
        user_id=user.id,
        entity="espacio",
        entity_id=str(espacio_id),
        action="delete",
        old_data=old_data,
        ip_address=ip_address,
    )
    logger.info("Espacio eliminado id=%s", espacio_id)


async def _reload(db: AsyncSession, espacio_id: int) -> Espacio:
    result = await db.execute(
        select(Espacio)
        .where(Espacio.id == espacio_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()
