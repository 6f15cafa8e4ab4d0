"""
Router principal de la API v1.
Agrupa todos los sub-routers de la versión 1.
"""

from fastapi import APIRouter

from agenda.api.v1.agenda import router as agenda_router
from agenda.api.v1.appointments import router as appointments_router
from agenda.api.v1.audit import router as audit_router
from agenda.api.v1.auth import router as auth_router
from agenda.api.v1.schedule_config import router as schedule_config_router
from agenda.api.v1.spaces import router as spaces_router
from agenda.api.v1.users import router as users_router

api_v1_router = APIRouter()

api_v1_router.include_router(
    auth_router,
    prefix="/auth",
    tags=["Autenticación"],
)

api_v1_router.include_router(
    users_router,
    prefix="/usuarios",
    tags=["Usuarios"],
)

api_v1_router.include_router(
    spaces_router,
    prefix="/espacios",
    tags=["Espacios"],
)

api_v1_router.include_router(
    schedule_config_router,
    prefix="/configuracion-horarios",
    tags=["Configuración de Horarios"],
)

api_v1_router.include_router(
    appointments_router,
    prefix="/citas",
    tags=["Citas"],
)

api_v1_router.include_router(
    agenda_router,
    prefix="/agenda",
    tags=["Agenda"],
)

api_v1_router.include_router(
    audit_router,
    prefix="/auditoria",
    tags=["Auditoría"],
)
