"""
Gestión de JWT: access tokens (15 min) + refresh tokens (7 días).
El algoritmo (HS256 o RS256) se toma de la configuración.
"""

from datetime import datetime, timedelta, timezone

import jwt

from agenda.config import get_settings

settings = get_settings()


class TokenType:
    ACCESS = "access"
    REFRESH = "refresh"


def create_access_token(
    user_id: int,
    role: str,
    extra_claims: dict | None = None,
) -> str:
    """Crea un access token JWT (corta duración)."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "role": role,
        "type": TokenType.ACCESS,
        "iat": now,
        "exp": now + timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES),
    }
    if extra_claims:
        payload.update(extra_claims)

    return jwt.encode(
        payload,
        settings.jwt_signing_key,
        algorithm=settings.JWT_ALGORITHM,
    )


def create_refresh_token(user_id: int) -> str:
    """Crea un refresh token JWT (larga duración)."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "type": TokenType.REFRESH,
        "iat": now,
        "exp": now + timedelta(days=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS),
    }

    return jwt.encode(
        payload,
        settings.jwt_signing_key,
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_token(token: str) -> dict:
    """
    Decodifica y verifica un token JWT.
    Lanza jwt.InvalidTokenError si el token es inválido o expirado.
    """
    return jwt.decode(
        token,
        settings.jwt_verifying_key,
        algorithms=[settings.JWT_ALGORITHM],
    )
