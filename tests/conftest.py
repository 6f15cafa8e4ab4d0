"""
Fixtures compartidas para Pytest.
Configura base de datos de test, clientes HTTP y datos base.
"""

from collections.abc import AsyncGenerator
from datetime import date, time

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from agenda.core.security import hash_password
from agenda.database import Base, get_db
from agenda.main import app
from agenda.models.appointment import Cita
from agenda.models.space import Espacio
from agenda.models.user import User, UserRole
from agenda.scheduling.entities import TipoEspacio
from tests.helpers import FECHA

# ── Engine de test (SQLite async) ────────────────────
TEST_DATABASE_URL = "sqlite+aiosqlite:///./test_agenda.db"

test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
test_session_factory = async_sessionmaker(
    test_engine, class_=AsyncSession, expire_on_commit=False
)


@pytest_asyncio.fixture
async def setup_database():
    """Crea y destruye las tablas para cada test que usa la DB."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def db_session(setup_database) -> AsyncGenerator[AsyncSession, None]:
    """Provee una sesión de DB de test."""
    async with test_session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Cliente HTTP de test que usa la DB de test."""

    async def _get_test_db():
        async with test_session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _get_test_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def _create_user(
    db: AsyncSession, email: str, role: UserRole, first_name: str, last_name: str
) -> User:
    user = User(
        email=email,
        hashed_password=hash_password("TestPass123"),
        role=role,
        first_name=first_name,
        last_name=last_name,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def admin_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "admin@test.com", UserRole.ADMINISTRADOR, "Ana", "Admin")


@pytest_asyncio.fixture
async def terapeuta_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "terapeuta@test.com", UserRole.TERAPEUTA, "Tomás", "Terapeuta")


@pytest_asyncio.fixture
async def paciente_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "paciente@test.com", UserRole.PACIENTE, "Ana", "López")


@pytest_asyncio.fixture
async def otro_paciente(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "otro@test.com", UserRole.PACIENTE, "Bruno", "Díaz")


@pytest_asyncio.fixture
async def espacio(db_session: AsyncSession) -> Espacio:
    espacio = Espacio(nombre="Cubículo 1", tipo=TipoEspacio.CUBICULO, capacidad=2)
    db_session.add(espacio)
    await db_session.commit()
    await db_session.refresh(espacio)
    return espacio


@pytest_asyncio.fixture
async def espacio_2(db_session: AsyncSession) -> Espacio:
    espacio = Espacio(nombre="Consultorio A", tipo=TipoEspacio.CONSULTORIO, capacidad=3)
    db_session.add(espacio)
    await db_session.commit()
    await db_session.refresh(espacio)
    return espacio


@pytest_asyncio.fixture
async def make_cita(db_session: AsyncSession, paciente_user: User, terapeuta_user: User):
    """Factory: inserta una cita directamente en la DB."""

    async def _make(
        espacio: Espacio,
        hora_inicio: time,
        hora_fin: time,
        fecha: date = FECHA,
        paciente: User | None = None,
        materia: str = "Terapia individual",
        **kwargs,
    ) -> Cita:
        cita = Cita(
            espacio_id=espacio.id,
            paciente_id=(paciente or paciente_user).id,
            terapeuta_id=terapeuta_user.id,
            fecha=fecha,
            hora_inicio=hora_inicio,
            hora_fin=hora_fin,
            materia=materia,
            **kwargs,
        )
        db_session.add(cita)
        await db_session.commit()
        await db_session.refresh(cita)
        return cita

    return _make
