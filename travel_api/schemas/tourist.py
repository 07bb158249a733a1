from __future__ import annotations

from datetime import date
from typing import ClassVar, FrozenSet, Optional

from pydantic import EmailStr, Field

from travel_api.schemas.base import CamelModel, PartialUpdate


class EmergencyContactIn(CamelModel):
    name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    relationship: str = Field(..., min_length=1)


class TouristCreate(CamelModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=20)
    date_of_birth: date
    nationality: str = Field(..., min_length=1, max_length=100)
    passport_number: Optional[str] = Field(None, max_length=50)
    emergency_contact: Optional[EmergencyContactIn] = None
    user_id: Optional[str] = None


class TouristUpdate(PartialUpdate):
    non_nullable: ClassVar[FrozenSet[str]] = frozenset({"first_name", "last_name", "email", "date_of_birth", "nationality"})

    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=20)
    date_of_birth: Optional[date] = None
    nationality: Optional[str] = Field(None, min_length=1, max_length=100)
    passport_number: Optional[str] = Field(None, max_length=50)
    emergency_contact: Optional[EmergencyContactIn] = None
