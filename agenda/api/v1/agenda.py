"""
Endpoints de la agenda diaria (grilla espacio × hora).
"""

from datetime import date

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from agenda.auth.dependencies import get_current_user
from agenda.database import get_db
from agenda.models.user import User
from agenda.schemas.agenda import AgendaDiaResponse, BorradorReserva
from agenda.services import agenda_service

router = APIRouter()


@router.get("/{fecha}", response_model=AgendaDiaResponse)
async def day_agenda(
    fecha: date,
    espacio_id: int | None = Query(None, description="Solo este espacio"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Grilla del día: una fila por espacio activo con sus horas, celdas
    (cita que inicia, columnas que ocupa, celdas cubiertas) y horas
    deshabilitadas.
    """
    return await agenda_service.get_day_agenda(db, fecha, espacio_id)


@router.get(
    "/{fecha}/celda",
    response_model=BorradorReserva,
    responses={204: {"description": "La celda ya tiene una cita"}},
)
async def select_cell(
    fecha: date,
    espacio_id: int = Query(...),
    hora: str = Query(..., examples=["09:00"]),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Selección de una celda: 422 si la hora está deshabilitada, 204 si
    la celda ya tiene cita, o el borrador de reserva pre-llenado.
    """
    draft = await agenda_service.select_cell(db, fecha, espacio_id, hora)
    if draft is None:
        return Response(status_code=204)
    return draft
