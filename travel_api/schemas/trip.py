from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import ClassVar, FrozenSet, Optional

from pydantic import Field, field_validator

from travel_api.domain import TripStatus
from travel_api.schemas.base import CamelModel, PartialUpdate


class CoordinatesIn(CamelModel):
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)


class DestinationIn(CamelModel):
    name: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    address: Optional[str] = None
    coordinates: Optional[CoordinatesIn] = None


class TripCreate(CamelModel):
    tourist_id: str = Field(..., min_length=1)
    start_date: datetime
    end_date: datetime
    destination: DestinationIn
    status: TripStatus = TripStatus.PLANNED
    total_cost: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    notes: Optional[str] = None

    @field_validator("tourist_id")
    @classmethod
    def _tourist_id_is_uuid(cls, value: str) -> str:
        try:
            return str(uuid.UUID(value))
        except ValueError as exc:
            raise ValueError("touristId must be a valid UUID") from exc


class TripUpdate(PartialUpdate):
    non_nullable: ClassVar[FrozenSet[str]] = frozenset({"start_date", "end_date", "destination", "status"})

    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    destination: Optional[DestinationIn] = None
    status: Optional[TripStatus] = None
    total_cost: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    notes: Optional[str] = None
