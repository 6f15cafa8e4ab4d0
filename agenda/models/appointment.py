"""
Modelo Cita — Reserva de un espacio por un paciente con un terapeuta.

Estados válidos y transiciones:
    Agendado → Completado
    Agendado → Cancelado
    Agendado → NoAsistio
"""

from datetime import date, datetime, time

from sqlalchemy import (
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Time,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from agenda.database import Base
from agenda.scheduling.entities import EstadoCita, Modalidad


class Cita(Base):
    __tablename__ = "citas"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    espacio_id: Mapped[int] = mapped_column(
        ForeignKey("espacios.id"), nullable=False
    )
    paciente_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"), nullable=False
    )
    terapeuta_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"), nullable=False
    )

    # ── Horario ──────────────────────────────────────
    fecha: Mapped[date] = mapped_column(Date, nullable=False)
    hora_inicio: Mapped[time] = mapped_column(Time, nullable=False)
    hora_fin: Mapped[time] = mapped_column(Time, nullable=False)

    # ── Datos de la cita ─────────────────────────────
    estado: Mapped[EstadoCita] = mapped_column(
        Enum(EstadoCita), nullable=False, default=EstadoCita.AGENDADO
    )
    modalidad: Mapped[Modalidad] = mapped_column(
        Enum(Modalidad), nullable=False, default=Modalidad.PRESENCIAL
    )
    materia: Mapped[str] = mapped_column(String(150), nullable=False)
    notas: Mapped[str | None] = mapped_column(Text)

    created_by: Mapped[int | None] = mapped_column(ForeignKey("users.id"))

    # ── Timestamps ───────────────────────────────────
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # ── Relaciones ───────────────────────────────────
    espacio: Mapped["Espacio"] = relationship("Espacio")  # noqa: F821
    paciente: Mapped["User"] = relationship("User", foreign_keys=[paciente_id])  # noqa: F821
    terapeuta: Mapped["User"] = relationship("User", foreign_keys=[terapeuta_id])  # noqa: F821

    # ── Índices para consultas frecuentes ────────────
    __table_args__ = (
        Index("idx_cita_espacio_fecha", "espacio_id", "fecha"),
        Index("idx_cita_terapeuta_fecha", "terapeuta_id", "fecha"),
        Index("idx_cita_paciente_fecha", "paciente_id", "fecha"),
    )

    def __repr__(self) -> str:
        return f"<Cita {self.id} [{self.estado.value}] {self.fecha} {self.hora_inicio}>"
