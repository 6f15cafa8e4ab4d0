"""
Schemas para Espacio — catálogo de cubículos, consultorios y salas.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from agenda.scheduling.entities import TipoEspacio


class EspacioCreate(BaseModel):
    nombre: str = Field(..., min_length=2, max_length=100)
    tipo: TipoEspacio = TipoEspacio.CUBICULO
    descripcion: str | None = Field(None, max_length=1000)
    capacidad: int = Field(1, ge=1, le=100)
    costo_por_hora: Decimal = Field(Decimal("0.00"), ge=0, max_digits=10, decimal_places=2)
    esta_activo: bool = True


class EspacioUpdate(BaseModel):
    nombre: str | None = Field(None, min_length=2, max_length=100)
    tipo: TipoEspacio | None = None
    descripcion: str | None = Field(None, max_length=1000)
    capacidad: int | None = Field(None, ge=1, le=100)
    costo_por_hora: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)


class EspacioEstadoChange(BaseModel):
    esta_activo: bool


class EspacioResponse(BaseModel):
    id: int
    nombre: str
    tipo: TipoEspacio
    descripcion: str | None = None
    capacidad: int
    costo_por_hora: Decimal
    esta_activo: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class EspacioCount(BaseModel):
    activos: int
