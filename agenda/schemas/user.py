"""
Schemas para User.
"""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from agenda.models.user import UserRole


class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    first_name: str = Field(..., min_length=2, max_length=100)
    last_name: str = Field(..., min_length=2, max_length=100)
    role: UserRole = UserRole.PACIENTE
    phone: str | None = Field(None, max_length=20)


class UserResponse(BaseModel):
    id: int
    email: str
    first_name: str
    last_name: str
    full_name: str
    role: UserRole
    phone: str | None = None
    is_active: bool
    last_login: datetime | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class UserMe(BaseModel):
    """Respuesta para el endpoint /me."""
    id: int
    email: str
    first_name: str
    last_name: str
    full_name: str
    role: UserRole


class UserOption(BaseModel):
    """Usuario activo para los selectores del formulario de cita."""
    id: int
    full_name: str
    role: UserRole

    model_config = {"from_attributes": True}
