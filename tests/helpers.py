"""
Utilidades compartidas por los tests.
"""

from datetime import date

from agenda.auth.jwt import create_access_token
from agenda.models.user import User

FECHA = date(2026, 3, 10)


def auth_headers(user: User) -> dict[str, str]:
    token = create_access_token(user.id, user.role.value)
    return {"Authorization": f"Bearer {token}"}
