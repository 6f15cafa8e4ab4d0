"""
Modelos SQLAlchemy — exportar todos para que Alembic los detecte.
"""

from agenda.models.user import User, UserRole
from agenda.models.space import Espacio
from agenda.models.appointment import Cita
from agenda.models.schedule_config import ConfiguracionHorario
from agenda.models.audit_log import AuditLog

__all__ = [
    "User",
    "UserRole",
    "Espacio",
    "Cita",
    "ConfiguracionHorario",
    "AuditLog",
]
