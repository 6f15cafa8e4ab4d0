"""
Endpoints del catálogo de espacios (cubículos, consultorios, salas).
Lectura para cualquier usuario; escritura solo para administradores.
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from agenda.auth.dependencies import get_current_user, require_permission
from agenda.core.request import get_client_ip
from agenda.database import get_db
from agenda.models.user import User
from agenda.scheduling.entities import TipoEspacio
from agenda.schemas.space import (
    EspacioCount,
    EspacioCreate,
    EspacioEstadoChange,
    EspacioResponse,
    EspacioUpdate,
)
from agenda.services import space_service

router = APIRouter()


@router.get("", response_model=list[EspacioResponse])
async def list_spaces(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await space_service.list_spaces(db)


@router.get("/activos", response_model=list[EspacioResponse])
async def list_active_spaces(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await space_service.list_spaces(db, solo_activos=True)


@router.get("/conteo", response_model=EspacioCount)
async def count_active_spaces(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return EspacioCount(activos=await space_service.count_active(db))


@router.get("/tipo/{tipo}", response_model=list[EspacioResponse])
async def list_spaces_by_type(
    tipo: TipoEspacio,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await space_service.list_spaces(db, tipo=tipo)


@router.get("/{espacio_id}", response_model=EspacioResponse)
async def get_space(
    espacio_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await space_service.get_space(db, espacio_id)


@router.post("", response_model=EspacioResponse, status_code=201)
async def create_space(
    data: EspacioCreate,
    request: Request,
    user: User = Depends(require_permission("espacio", "create")),
    db: AsyncSession = Depends(get_db),
):
    return await space_service.create_space(
        db, user, data, ip_address=get_client_ip(request)
    )


@router.put("/{espacio_id}", response_model=EspacioResponse)
async def update_space(
    espacio_id: int,
    data: EspacioUpdate,
    request: Request,
    user: User = Depends(require_permission("espacio", "update")),
    db: AsyncSession = Depends(get_db),
):
    return await space_service.update_space(
        db, espacio_id, user, data, ip_address=get_client_ip(request)
    )


@router.put("/{espacio_id}/estado", response_model=EspacioResponse)
async def change_space_status(
    espacio_id: int,
    data: EspacioEstadoChange,
    request: Request,
    user: User = Depends(require_permission("espacio", "update")),
    db: AsyncSession = Depends(get_db),
):
    """Activa o desactiva un espacio. Un espacio inactivo no admite reservas."""
    return await space_service.change_status(
        db, espacio_id, user, data.esta_activo, ip_address=get_client_ip(request)
    )


@router.delete("/{espacio_id}", status_code=204)
async def delete_space(
    espacio_id: int,
    request: Request,
    user: User = Depends(require_permission("espacio", "delete")),
    db: AsyncSession = Depends(get_db),
):
    await space_service.delete_space(
        db, espacio_id, user, ip_address=get_client_ip(request)
    )
