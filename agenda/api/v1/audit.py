"""
Consulta del audit log (solo administradores).
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from agenda.auth.dependencies import require_role
from agenda.database import get_db
from agenda.models.user import User, UserRole
from agenda.schemas.audit import AuditLogListResponse
from agenda.services import audit_service

router = APIRouter()


@router.get("", response_model=AuditLogListResponse)
async def list_audit_logs(
    page: int = Query(1, ge=1),
    size: int = Query(15, ge=1, le=100),
    action: str | None = Query(None, description="create, update, delete, status_change"),
    entity: str | None = Query(None, description="cita, espacio, configuracion_horario"),
    entity_id: str | None = Query(None),
    user: User = Depends(require_role(UserRole.ADMINISTRADOR)),
    db: AsyncSession = Depends(get_db),
):
    return await audit_service.get_audit_logs(
        db, page=page, size=size, action=action, entity=entity, entity_id=entity_id
    )
