from __future__ import annotations

from pydantic import EmailStr, Field

from travel_api.domain import UserRole
from travel_api.schemas.base import CamelModel


class LoginPayload(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=6)


class RegisterPayload(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    role: UserRole = UserRole.TOURIST
