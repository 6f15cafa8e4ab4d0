"""
Endpoints de autenticación: login, refresh, usuario actual.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from agenda.auth.dependencies import get_current_user
from agenda.database import get_db
from agenda.models.user import User
from agenda.schemas.auth import LoginRequest, LoginResponse, RefreshRequest, TokenResponse
from agenda.schemas.user import UserMe
from agenda.services import auth_service

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
async def login(
    data: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    """Autentica un usuario con email y contraseña."""
    return await auth_service.login(db, data)


@router.post("/refresh", response_model=TokenResponse)
async def refresh_tokens(
    data: RefreshRequest,
    db: AsyncSession = Depends(get_db),
):
    """Refresca un par de tokens usando el refresh token."""
    return await auth_service.refresh_tokens(db, data.refresh_token)


@router.get("/me", response_model=UserMe)
async def get_me(
    user: User = Depends(get_current_user),
):
    """Retorna los datos del usuario autenticado."""
    return UserMe(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        full_name=user.full_name,
        role=user.role,
    )
