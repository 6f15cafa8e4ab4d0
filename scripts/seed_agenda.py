"""
Seed inicial de la agenda: usuario administrador + catálogo de espacios.

Uso:
    python scripts/seed_agenda.py <admin_email> <admin_password>

Idempotente: si el administrador o un espacio ya existen (por email /
nombre), no se duplican.
"""

import asyncio
import sys
from decimal import Decimal
from pathlib import Path

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

# Agregar el directorio raíz al path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from agenda.core.security import hash_password  # noqa: E402
from agenda.database import async_session_factory, engine  # noqa: E402
from agenda.models.space import Espacio  # noqa: E402
from agenda.models.user import User, UserRole  # noqa: E402
from agenda.scheduling.entities import TipoEspacio  # noqa: E402


DEFAULT_SPACES = [
    ("Cubículo 1", TipoEspacio.CUBICULO, 2, Decimal("0.00")),
    ("Cubículo 2", TipoEspacio.CUBICULO, 2, Decimal("0.00")),
    ("Cubículo 3", TipoEspacio.CUBICULO, 2, Decimal("0.00")),
    ("Consultorio A", TipoEspacio.CONSULTORIO, 3, Decimal("25.00")),
    ("Sala de Juntas", TipoEspacio.SALA, 10, Decimal("50.00")),
]


async def seed(db: AsyncSession, admin_email: str, admin_password: str) -> tuple[int, int]:
    """Crea lo que falte. Retorna (usuarios_creados, espacios_creados)."""
    users_created = 0
    spaces_created = 0

    result = await db.execute(select(User).where(User.email == admin_email))
    if result.scalar_one_or_none() is None:
        db.add(User(
            email=admin_email,
            hashed_password=hash_password(admin_password),
            role=UserRole.ADMINISTRADOR,
            first_name="Administrador",
            last_name="Agenda",
        ))
        users_created += 1

    for nombre, tipo, capacidad, costo in DEFAULT_SPACES:
        result = await db.execute(select(Espacio).where(Espacio.nombre == nombre))
        if result.scalar_one_or_none():
            continue
        db.add(Espacio(
            nombre=nombre,
            tipo=tipo,
            capacidad=capacidad,
            costo_por_hora=costo,
        ))
        spaces_created += 1

    await db.commit()
    return users_created, spaces_created


async def main(admin_email: str, admin_password: str) -> None:
    async with async_session_factory() as db:
        users_created, spaces_created = await seed(db, admin_email, admin_password)

    await engine.dispose()
    print(f"Usuarios creados: {users_created}")
    print(f"Espacios creados: {spaces_created}")


if __name__ == "__main__":
    if len(sys.argv) != 3:
        print("Uso: python scripts/seed_agenda.py <admin_email> <admin_password>")
        sys.exit(1)

    asyncio.run(main(sys.argv[1], sys.argv[2]))
