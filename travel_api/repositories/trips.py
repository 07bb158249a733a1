from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from travel_api.core.errors import InvalidInput, RepositoryError
from travel_api.domain import ACTIVE_TRIP_STATUSES, Destination, TripRecord, TripStatus, ensure_utc
from travel_api.models.trip import Trip
from travel_api.repositories.base import dump_json, load_json, storage_errors
from travel_api.schemas.trip import TripCreate

UPDATABLE_FIELDS = frozenset({"start_date", "end_date", "destination", "status", "total_cost", "notes"})


class TripRepository(ABC):
    @abstractmethod
    def list_all(self) -> List[TripRecord]:
        ...

    @abstractmethod
    def get_by_id(self, trip_id: str) -> Optional[TripRecord]:
        ...

    @abstractmethod
    def find_by_tourist_id(self, tourist_id: str) -> List[TripRecord]:
        ...

    @abstractmethod
    def find_upcoming(self, *, now: Optional[datetime] = None) -> List[TripRecord]:
        ...

    @abstractmethod
    def find_by_date_range(self, start: datetime, end: datetime) -> List[TripRecord]:
        ...

    @abstractmethod
    def create(self, payload: TripCreate) -> TripRecord:
        ...

    @abstractmethod
    def update(self, trip_id: str, changes: Dict[str, Any]) -> Optional[TripRecord]:
        """Replace only the supplied fields; ``None`` when the trip is absent."""

    @abstractmethod
    def delete(self, trip_id: str) -> bool:
        ...


def ensure_date_order(start: datetime, end: datetime) -> None:
    if ensure_utc(start) >= ensure_utc(end):
        raise InvalidInput("Start date must be before end date")


def _to_record(trip: Trip) -> TripRecord:
    destination = load_json(trip.destination, operation="Error reading trip destination")
    return TripRecord(
        id=trip.id,
        tourist_id=trip.tourist_id,
        start_date=ensure_utc(trip.start_date),
        end_date=ensure_utc(trip.end_date),
        destination=Destination.from_dict(destination),
        status=TripStatus(trip.status),
        total_cost=trip.total_cost,
        notes=trip.notes,
        created_at=ensure_utc(trip.created_at) if trip.created_at else None,
        updated_at=ensure_utc(trip.updated_at) if trip.updated_at else None,
    )


def _encode_destination(destination: Dict[str, Any]) -> str:
    return dump_json(Destination.from_dict(destination).to_dict())


class SqlTripRepository(TripRepository):
    def __init__(self, db: Session) -> None:
        self.db = db

    def _find(self, trip_id: str) -> Optional[Trip]:
        return self.db.query(Trip).filter(Trip.id == trip_id).first()

    def list_all(self) -> List[TripRecord]:
        with storage_errors(self.db, "Error fetching trips"):
            trips = self.db.query(Trip).order_by(Trip.created_at.desc()).all()
        return [_to_record(trip) for trip in trips]

    def get_by_id(self, trip_id: str) -> Optional[TripRecord]:
        with storage_errors(self.db, "Error finding trip"):
            trip = self._find(trip_id)
        return _to_record(trip) if trip else None

    def find_by_tourist_id(self, tourist_id: str) -> List[TripRecord]:
        with storage_errors(self.db, "Error finding trips for tourist"):
            trips = (
                self.db.query(Trip)
                .filter(Trip.tourist_id == tourist_id)
                .order_by(Trip.start_date.desc())
                .all()
            )
        return [_to_record(trip) for trip in trips]

    def find_upcoming(self, *, now: Optional[datetime] = None) -> List[TripRecord]:
        reference = ensure_utc(now) if now else datetime.now(timezone.utc)
        with storage_errors(self.db, "Error fetching upcoming trips"):
            trips = (
                self.db.query(Trip)
                .filter(
                    Trip.start_date > reference,
                    Trip.status.in_([status.value for status in ACTIVE_TRIP_STATUSES]),
                )
                .order_by(Trip.start_date.asc())
                .all()
            )
        return [_to_record(trip) for trip in trips]

    def find_by_date_range(self, start: datetime, end: datetime) -> List[TripRecord]:
        with storage_errors(self.db, "Error fetching trips by date range"):
            trips = (
                self.db.query(Trip)
                .filter(Trip.start_date >= ensure_utc(start), Trip.end_date <= ensure_utc(end))
                .order_by(Trip.start_date.asc())
                .all()
            )
        return [_to_record(trip) for trip in trips]

    def create(self, payload: TripCreate) -> TripRecord:
        ensure_date_order(payload.start_date, payload.end_date)

        trip_id = str(uuid.uuid4())
        with storage_errors(self.db, "Error creating trip"):
            self.db.add(
                Trip(
                    id=trip_id,
                    tourist_id=payload.tourist_id,
                    start_date=ensure_utc(payload.start_date),
                    end_date=ensure_utc(payload.end_date),
                    destination=_encode_destination(payload.destination.model_dump()),
                    status=TripStatus(payload.status).value,
                    total_cost=payload.total_cost,
                    notes=payload.notes,
                )
            )
            self.db.commit()

        created = self.get_by_id(trip_id)
        if created is None:
            raise RepositoryError("Failed to create trip", detail=f"trip {trip_id} not readable after insert")
        return created

    def update(self, trip_id: str, changes: Dict[str, Any]) -> Optional[TripRecord]:
        if not changes:
            return self.get_by_id(trip_id)

        unknown = sorted(set(changes) - UPDATABLE_FIELDS)
        if unknown:
            raise InvalidInput(f"Unknown trip fields: {', '.join(unknown)}")

        with storage_errors(self.db, "Error updating trip"):
            trip = self._find(trip_id)
            if trip is None:
                return None

            # ordering is checked against the merged start/end
            if "start_date" in changes or "end_date" in changes:
                ensure_date_order(
                    changes.get("start_date") or trip.start_date,
                    changes.get("end_date") or trip.end_date,
                )

            for name, value in changes.items():
                if name in {"start_date", "end_date"}:
                    value = ensure_utc(value)
                elif name == "destination":
                    value = _encode_destination(value)
                elif name == "status":
                    value = TripStatus(value).value
                setattr(trip, name, value)
            self.db.commit()

        return self.get_by_id(trip_id)

    def delete(self, trip_id: str) -> bool:
        with storage_errors(self.db, "Error deleting trip"):
            deleted = self.db.query(Trip).filter(Trip.id == trip_id).delete(synchronize_session=False)
            self.db.commit()
        return deleted > 0
