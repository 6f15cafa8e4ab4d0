"""
Servicio de autenticación: login y refresh de tokens.
"""

import logging
from datetime import datetime, timezone

import jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agenda.auth.jwt import (
    TokenType,
    create_access_token,
    create_refresh_token,
    decode_token,
)
from agenda.core.exceptions import CredentialsException
from agenda.core.security import verify_password
from agenda.models.user import User
from agenda.schemas.auth import (
    LoginRequest,
    LoginResponse,
    TokenData,
    TokenResponse,
    UserLoginData,
)

logger = logging.getLogger(__name__)


async def login(db: AsyncSession, data: LoginRequest) -> LoginResponse:
    """Autentica un usuario con email y contraseña."""
    result = await db.execute(
        select(User).where(User.email == data.email, User.is_active.is_(True))
    )
    user = result.scalar_one_or_none()

    if not user:
        logger.warning("Login fallido: usuario no encontrado para email=%s", data.email)
        raise CredentialsException("Email o contraseña incorrectos")

    if not verify_password(data.password, user.hashed_password):
        logger.warning(
            "Login fallido: contraseña incorrecta para user_id=%s email=%s",
            user.id, user.email,
        )
        raise CredentialsException("Email o contraseña incorrectos")

    user.last_login = datetime.now(timezone.utc)
    await db.flush()

    logger.info("Login exitoso user_id=%s rol=%s", user.id, user.role.value)

    return LoginResponse(
        user=UserLoginData(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            full_name=user.full_name,
            role=user.role,
        ),
        tokens=TokenData(
            access_token=create_access_token(user.id, user.role.value),
            refresh_token=create_refresh_token(user.id),
        ),
    )


async def refresh_tokens(db: AsyncSession, refresh_token_str: str) -> TokenResponse:
    """Refresca un par de tokens usando el refresh token."""
    try:
        payload = decode_token(refresh_token_str)
    except jwt.InvalidTokenError:
        raise CredentialsException("Refresh token inválido o expirado")

    if payload.get("type") != TokenType.REFRESH:
        raise CredentialsException("Token no es un refresh token")

    # Verificar que el usuario sigue activo
    result = await db.execute(
        select(User).where(User.id == int(payload["sub"]), User.is_active.is_(True))
    )
    user = result.scalar_one_or_none()
    if not user:
        raise CredentialsException("Usuario no encontrado o inactivo")

    return TokenResponse(
        access_token=create_access_token(user.id, user.role.value),
        refresh_token=create_refresh_token(user.id),
    )
