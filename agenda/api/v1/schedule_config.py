"""
Endpoints de configuración de horarios por espacio y fecha.
"""

from datetime import date

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from agenda.auth.dependencies import get_current_user, require_permission
from agenda.core.request import get_client_ip
from agenda.database import get_db
from agenda.models.user import User
from agenda.schemas.schedule_config import (
    ConfiguracionEspecialResponse,
    ConfiguracionHorarioResponse,
    ConfiguracionHorarioSave,
    DisponibilidadResponse,
    HorariosDisponiblesResponse,
)
from agenda.services import appointment_service, schedule_config_service

router = APIRouter()


@router.get("", response_model=ConfiguracionHorarioResponse)
async def get_configuration(
    fecha: date = Query(..., description="Fecha (YYYY-MM-DD)"),
    espacio_id: int | None = Query(None, description="Sin espacio se usa el horario por defecto"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Horario efectivo del día: la configuración guardada para
    (fecha, espacio) o el horario por defecto si no existe.
    """
    return await schedule_config_service.get_configuration(db, fecha, espacio_id)


@router.post("", response_model=ConfiguracionHorarioResponse)
async def save_configuration(
    data: ConfiguracionHorarioSave,
    request: Request,
    user: User = Depends(require_permission("configuracion_horario", "create")),
    db: AsyncSession = Depends(get_db),
):
    """Crea o reemplaza la configuración de un espacio en una fecha."""
    return await schedule_config_service.save_configuration(
        db, user, data, ip_address=get_client_ip(request)
    )


@router.delete("", status_code=204)
async def delete_configuration(
    request: Request,
    fecha: date = Query(...),
    espacio_id: int = Query(...),
    user: User = Depends(require_permission("configuracion_horario", "delete")),
    db: AsyncSession = Depends(get_db),
):
    """Elimina la configuración y el día vuelve al horario por defecto."""
    await schedule_config_service.delete_configuration(
        db, user, fecha, espacio_id, ip_address=get_client_ip(request)
    )


@router.get("/horarios-disponibles", response_model=HorariosDisponiblesResponse)
async def get_available_hours(
    fecha: date = Query(...),
    espacio_id: int | None = Query(None),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Horas del día que no están deshabilitadas."""
    return await schedule_config_service.get_available_hours(db, fecha, espacio_id)


@router.get("/configuracion-especial", response_model=ConfiguracionEspecialResponse)
async def has_special_configuration(
    fecha: date = Query(...),
    espacio_id: int = Query(...),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return ConfiguracionEspecialResponse(
        fecha=fecha,
        espacio_id=espacio_id,
        tiene_configuracion_especial=await schedule_config_service.has_special_configuration(
            db, fecha, espacio_id
        ),
    )


@router.get("/disponibilidad", response_model=DisponibilidadResponse)
async def check_availability(
    espacio_id: int = Query(...),
    fecha: date = Query(...),
    hora_inicio: str = Query(..., examples=["09:00"]),
    hora_fin: str = Query(..., examples=["10:00"]),
    excluir_cita_id: int | None = Query(None, description="Cita en edición"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Verifica si el intervalo está libre en el espacio."""
    return await appointment_service.check_availability(
        db, espacio_id, fecha, hora_inicio, hora_fin, exclude_id=excluir_cita_id
    )
