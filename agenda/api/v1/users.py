"""
Endpoints de usuarios: alta (administrador) y selectores de
terapeutas / pacientes activos para el formulario de citas.
"""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agenda.auth.dependencies import get_current_user, require_permission
from agenda.core.exceptions import ConflictException
from agenda.core.security import hash_password
from agenda.database import get_db
from agenda.models.user import User, UserRole
from agenda.schemas.user import UserCreate, UserOption, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/activos", response_model=list[UserOption])
async def list_active_users(
    rol: UserRole | None = Query(None, description="Filtrar por rol"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Usuarios activos, opcionalmente de un rol (p. ej. Terapeuta)."""
    query = select(User).where(User.is_active.is_(True))
    if rol:
        query = query.where(User.role == rol)
    result = await db.execute(query.order_by(User.last_name, User.first_name))
    return [UserOption.model_validate(u) for u in result.scalars().all()]


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(
    data: UserCreate,
    user: User = Depends(require_permission("user", "create")),
    db: AsyncSession = Depends(get_db),
):
    """Crea un usuario con cualquier rol. Solo administradores."""
    existing = await db.execute(select(User.id).where(User.email == data.email))
    if existing.first():
        raise ConflictException("Ya existe un usuario con ese email")

    new_user = User(
        email=data.email,
        hashed_password=hash_password(data.password),
        role=data.role,
        first_name=data.first_name,
        last_name=data.last_name,
        phone=data.phone,
    )
    db.add(new_user)
    await db.flush()
    logger.info("Usuario creado id=%s rol=%s por user_id=%s", new_user.id, data.role.value, user.id)

    result = await db.execute(
        select(User)
        .where(User.id == new_user.id)
        .execution_options(populate_existing=True)
    )
    return UserResponse.model_validate(result.scalar_one())
