"""
Endpoints de citas: CRUD, cambio de estado y citas propias.
"""

from datetime import date

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from agenda.auth.dependencies import get_current_user, require_permission
from agenda.core.request import get_client_ip
from agenda.database import get_db
from agenda.models.user import User
from agenda.scheduling.entities import EstadoCita
from agenda.schemas.appointment import (
    CitaCreate,
    CitaEstadoChange,
    CitaListResponse,
    CitaResponse,
    CitaUpdate,
)
from agenda.services import appointment_service

router = APIRouter()


@router.get("", response_model=CitaListResponse)
async def list_appointments(
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    fecha_desde: date | None = Query(None, description="Desde fecha (YYYY-MM-DD)"),
    fecha_hasta: date | None = Query(None, description="Hasta fecha (YYYY-MM-DD)"),
    espacio_id: int | None = Query(None),
    terapeuta_id: int | None = Query(None),
    paciente_id: int | None = Query(None),
    estado: EstadoCita | None = Query(None),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Lista citas con filtros por fecha, espacio, participantes y estado."""
    return await appointment_service.list_appointments(
        db,
        page=page,
        size=size,
        fecha_desde=fecha_desde,
        fecha_hasta=fecha_hasta,
        espacio_id=espacio_id,
        terapeuta_id=terapeuta_id,
        paciente_id=paciente_id,
        estado=estado,
    )


@router.get("/mis-citas", response_model=list[CitaResponse])
async def my_appointments(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Citas del usuario autenticado como paciente."""
    return await appointment_service.list_my_appointments(db, user)


@router.get("/{cita_id}", response_model=CitaResponse)
async def get_appointment(
    cita_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await appointment_service.get_appointment(db, cita_id)


@router.post("", response_model=CitaResponse, status_code=201)
async def create_appointment(
    data: CitaCreate,
    request: Request,
    user: User = Depends(require_permission("cita", "create")),
    db: AsyncSession = Depends(get_db),
):
    """
    Crea una cita. Rechaza con 409 si el espacio ya tiene una cita que se
    solapa con el intervalo, y con 422 si la hora está deshabilitada o el
    fin no es posterior al inicio.
    """
    return await appointment_service.create_appointment(
        db, user=user, data=data, ip_address=get_client_ip(request)
    )


@router.put("/{cita_id}", response_model=CitaResponse)
async def update_appointment(
    cita_id: int,
    data: CitaUpdate,
    request: Request,
    user: User = Depends(require_permission("cita", "update")),
    db: AsyncSession = Depends(get_db),
):
    """Actualiza una cita en estado Agendado, re-validando el horario."""
    return await appointment_service.update_appointment(
        db, cita_id=cita_id, user=user, data=data, ip_address=get_client_ip(request)
    )


@router.patch("/{cita_id}/estado", response_model=CitaResponse)
async def change_appointment_status(
    cita_id: int,
    data: CitaEstadoChange,
    request: Request,
    user: User = Depends(require_permission("cita", "manage")),
    db: AsyncSession = Depends(get_db),
):
    """
    Cambia el estado de una cita:

    - **Agendado** → Completado, Cancelado, NoAsistio
    - Completado, Cancelado, NoAsistio → (estados terminales)
    """
    return await appointment_service.change_status(
        db, cita_id=cita_id, user=user, data=data, ip_address=get_client_ip(request)
    )


@router.delete("/{cita_id}", status_code=204)
async def delete_appointment(
    cita_id: int,
    request: Request,
    user: User = Depends(require_permission("cita", "delete")),
    db: AsyncSession = Depends(get_db),
):
    await appointment_service.delete_appointment(
        db, cita_id=cita_id, user=user, ip_address=get_client_ip(request)
    )
