"""
Modelo Espacio — Cubículos, consultorios y salas reservables.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, Enum, Integer, Numeric, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from agenda.database import Base
from agenda.scheduling.entities import TipoEspacio


class Espacio(Base):
    __tablename__ = "espacios"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    nombre: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    tipo: Mapped[TipoEspacio] = mapped_column(
        Enum(TipoEspacio), nullable=False, default=TipoEspacio.CUBICULO
    )
    descripcion: Mapped[str | None] = mapped_column(Text)
    capacidad: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    costo_por_hora: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0.00")
    )
    esta_activo: Mapped[bool] = mapped_column(Boolean, default=True, index=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    def __repr__(self) -> str:
        return f"<Espacio {self.nombre} ({self.tipo.value})>"
