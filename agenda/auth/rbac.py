"""
Definición de permisos RBAC por rol.
Mapea qué acciones puede realizar cada rol.
"""

from agenda.models.user import UserRole

_ALL = [UserRole.ADMINISTRADOR, UserRole.TERAPEUTA, UserRole.ALUMNO, UserRole.PACIENTE]

# ── Permisos por recurso ─────────────────────────────
# Formato: {recurso: {acción: [roles permitidos]}}
PERMISSIONS: dict[str, dict[str, list[UserRole]]] = {
    "user": {
        "create": [UserRole.ADMINISTRADOR],
        "read": _ALL,
    },
    "espacio": {
        "create": [UserRole.ADMINISTRADOR],
        "read": _ALL,
        "update": [UserRole.ADMINISTRADOR],
        "delete": [UserRole.ADMINISTRADOR],
    },
    "configuracion_horario": {
        "create": [UserRole.ADMINISTRADOR],
        "read": _ALL,
        "delete": [UserRole.ADMINISTRADOR],
    },
    "cita": {
        "create": _ALL,
        "read": _ALL,
        "update": _ALL,
        "delete": _ALL,
        # Reservar, editar o borrar citas de otros pacientes
        "manage": [UserRole.ADMINISTRADOR, UserRole.TERAPEUTA],
    },
}


def has_permission(role: UserRole, resource: str, action: str) -> bool:
    """Verifica si un rol tiene permiso para una acción en un recurso."""
    resource_perms = PERMISSIONS.get(resource, {})
    allowed_roles = resource_perms.get(action, [])
    return role in allowed_roles


def can_manage_appointments(role: UserRole) -> bool:
    return has_permission(role, "cita", "manage")
