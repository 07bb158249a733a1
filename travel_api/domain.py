"""Domain records returned by the repositories.

Records are plain frozen dataclasses so that handlers and policies never
touch ORM sessions, and tests can build them without a database.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional


class UserRole(str, Enum):
    EMPLOYEE = "employee"
    TOURIST = "tourist"


class TripStatus(str, Enum):
    PLANNED = "planned"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


ACTIVE_TRIP_STATUSES = (TripStatus.PLANNED, TripStatus.ONGOING)


def ensure_utc(value: datetime) -> datetime:
    """Naive datetimes are read as UTC; aware ones are converted to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return ensure_utc(value).isoformat() if value else None


@dataclass(frozen=True)
class EmergencyContact:
    name: str
    phone: str
    relationship: str

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "phone": self.phone, "relationship": self.relationship}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EmergencyContact":
        return cls(name=data["name"], phone=data["phone"], relationship=data["relationship"])


@dataclass(frozen=True)
class Coordinates:
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.latitude is not None:
            data["latitude"] = self.latitude
        if self.longitude is not None:
            data["longitude"] = self.longitude
        return data


@dataclass(frozen=True)
class Destination:
    name: str
    country: str
    city: str
    address: Optional[str] = None
    coordinates: Optional[Coordinates] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name, "country": self.country, "city": self.city}
        if self.address is not None:
            data["address"] = self.address
        if self.coordinates is not None:
            data["coordinates"] = self.coordinates.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Destination":
        coordinates = data.get("coordinates")
        return cls(
            name=data["name"],
            country=data["country"],
            city=data["city"],
            address=data.get("address"),
            coordinates=Coordinates(
                latitude=coordinates.get("latitude"),
                longitude=coordinates.get("longitude"),
            )
            if coordinates is not None
            else None,
        )


@dataclass(frozen=True)
class UserRecord:
    id: str
    email: str
    role: UserRole
    first_name: str
    last_name: str
    password_hash: str = field(repr=False, default="")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        # password hash never leaves the service
        return {
            "id": self.id,
            "email": self.email,
            "role": self.role.value,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


@dataclass(frozen=True)
class TouristRecord:
    id: str
    first_name: str
    last_name: str
    email: str
    date_of_birth: date
    nationality: str
    phone: Optional[str] = None
    passport_number: Optional[str] = None
    emergency_contact: Optional[EmergencyContact] = None
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "dateOfBirth": self.date_of_birth.isoformat(),
            "nationality": self.nationality,
            "passportNumber": self.passport_number,
            "emergencyContact": self.emergency_contact.to_dict() if self.emergency_contact else None,
            "userId": self.user_id,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


@dataclass(frozen=True)
class TripRecord:
    id: str
    tourist_id: str
    start_date: datetime
    end_date: datetime
    destination: Destination
    status: TripStatus = TripStatus.PLANNED
    total_cost: Optional[Decimal] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "touristId": self.tourist_id,
            "startDate": _iso(self.start_date),
            "endDate": _iso(self.end_date),
            "destination": self.destination.to_dict(),
            "status": self.status.value,
            "totalCost": float(self.total_cost) if self.total_cost is not None else None,
            "notes": self.notes,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


@dataclass(frozen=True)
class Claims:
    """Identity embedded in a session token, trusted as of issuance."""

    user_id: str
    email: str
    role: UserRole
    issued_at: datetime
    expires_at: datetime

    @property
    def is_employee(self) -> bool:
        return self.role == UserRole.EMPLOYEE

    @property
    def is_tourist(self) -> bool:
        return self.role == UserRole.TOURIST
