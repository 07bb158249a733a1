from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request

from travel_api.core.errors import InvalidInput, NotFound
from travel_api.core.responses import envelope
from travel_api.deps import (
    enforce,
    get_current_claims,
    get_own_tourist_profile,
    get_tourist_repository,
    get_trip_repository,
    require_employee,
)
from travel_api.domain import Claims, TouristRecord, TripRecord, ensure_utc
from travel_api.repositories.tourists import TouristRepository
from travel_api.repositories.trips import TripRepository
from travel_api.schemas.trip import TripCreate, TripUpdate
from travel_api.services.access_policy import AccessPolicy

router = APIRouter(prefix="/api/trips", tags=["trips"])


def _trips_to_list(trips: List[TripRecord]) -> list:
    return [trip.to_dict() for trip in trips]


@router.get("")
def list_trips(
    trips: TripRepository = Depends(get_trip_repository),
    _claims: Claims = Depends(require_employee),
):
    return envelope("Trips retrieved successfully", _trips_to_list(trips.list_all()))


@router.get("/my")
def list_my_trips(
    request: Request,
    claims: Claims = Depends(get_current_claims),
    own_profile: Optional[TouristRecord] = Depends(get_own_tourist_profile),
    trips: TripRepository = Depends(get_trip_repository),
):
    enforce(AccessPolicy.can_list_own_trips(claims, own_profile), request=request, claims=claims)
    return envelope("Your trips retrieved successfully", _trips_to_list(trips.find_by_tourist_id(own_profile.id)))


@router.get("/upcoming")
def list_upcoming_trips(
    trips: TripRepository = Depends(get_trip_repository),
    _claims: Claims = Depends(require_employee),
):
    return envelope("Upcoming trips retrieved successfully", _trips_to_list(trips.find_upcoming()))


@router.get("/range")
def list_trips_in_range(
    start: datetime = Query(...),
    end: datetime = Query(...),
    trips: TripRepository = Depends(get_trip_repository),
    _claims: Claims = Depends(require_employee),
):
    if ensure_utc(start) > ensure_utc(end):
        raise InvalidInput("Range start must not be after range end")
    return envelope("Trips retrieved successfully", _trips_to_list(trips.find_by_date_range(start, end)))


@router.get("/tourist/{tourist_id}")
def list_trips_by_tourist(
    tourist_id: str,
    request: Request,
    claims: Claims = Depends(get_current_claims),
    own_profile: Optional[TouristRecord] = Depends(get_own_tourist_profile),
    trips: TripRepository = Depends(get_trip_repository),
):
    enforce(
        AccessPolicy.can_view_tourist_trips(claims, tourist_id, own_profile),
        request=request,
        claims=claims,
    )
    return envelope("Tourist trips retrieved successfully", _trips_to_list(trips.find_by_tourist_id(tourist_id)))


@router.get("/{trip_id}")
def get_trip(
    trip_id: str,
    request: Request,
    claims: Claims = Depends(get_current_claims),
    own_profile: Optional[TouristRecord] = Depends(get_own_tourist_profile),
    trips: TripRepository = Depends(get_trip_repository),
):
    trip = trips.get_by_id(trip_id)
    if not trip:
        raise NotFound("Trip not found")

    enforce(AccessPolicy.can_view_trip(claims, trip, own_profile), request=request, claims=claims)
    return envelope("Trip retrieved successfully", trip.to_dict())


@router.post("", status_code=201)
def create_trip(
    payload: TripCreate,
    trips: TripRepository = Depends(get_trip_repository),
    tourists: TouristRepository = Depends(get_tourist_repository),
    _claims: Claims = Depends(require_employee),
):
    if tourists.get_by_id(payload.tourist_id) is None:
        raise NotFound("Tourist not found")

    trip = trips.create(payload)
    return envelope("Trip created successfully", trip.to_dict())


@router.put("/{trip_id}")
def update_trip(
    trip_id: str,
    payload: TripUpdate,
    trips: TripRepository = Depends(get_trip_repository),
    _claims: Claims = Depends(require_employee),
):
    trip = trips.update(trip_id, payload.changes())
    if not trip:
        raise NotFound("Trip not found")
    return envelope("Trip updated successfully", trip.to_dict())


@router.delete("/{trip_id}")
def delete_trip(
    trip_id: str,
    trips: TripRepository = Depends(get_trip_repository),
    _claims: Claims = Depends(require_employee),
):
    if not trips.delete(trip_id):
        raise NotFound("Trip not found")
    return envelope("Trip deleted successfully")
