"""
Modelo ConfiguracionHorario — Horario explícito de un espacio en una fecha.

Su sola existencia reemplaza el horario por defecto (7-18 por hora) por
una grilla de media hora con horas deshabilitadas.
"""

from datetime import date, datetime

from sqlalchemy import (
    JSON,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    SmallInteger,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from agenda.database import Base


class ConfiguracionHorario(Base):
    __tablename__ = "configuracion_horarios"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    espacio_id: Mapped[int] = mapped_column(
        ForeignKey("espacios.id"), nullable=False
    )
    fecha: Mapped[date] = mapped_column(Date, nullable=False)

    # ── Límites del día (None = usar el horario por defecto) ──
    hora_inicio: Mapped[int | None] = mapped_column(SmallInteger)
    hora_fin: Mapped[int | None] = mapped_column(SmallInteger)

    horas_deshabilitadas: Mapped[list[str]] = mapped_column(
        JSON, nullable=False, default=list,
        comment="Etiquetas HH:mm deshabilitadas para ese día"
    )
    motivo: Mapped[str | None] = mapped_column(String(200))

    # ── Auditoría ───────────────────────────────────
    created_by: Mapped[int | None] = mapped_column(ForeignKey("users.id"))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    espacio: Mapped["Espacio"] = relationship("Espacio")  # noqa: F821

    __table_args__ = (
        UniqueConstraint("espacio_id", "fecha", name="uq_config_espacio_fecha"),
    )

    def __repr__(self) -> str:
        return f"<ConfiguracionHorario espacio={self.espacio_id} {self.fecha}>"
