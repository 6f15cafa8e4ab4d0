"""
Utilidades sobre la request HTTP.
"""

from fastapi import Request


def get_client_ip(request: Request) -> str | None:
    """Obtiene la IP del cliente desde los headers o la conexión."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host
    return None
