from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from travel_api.core.errors import InvalidInput
from travel_api.domain import TripStatus
from travel_api.repositories.tourists import SqlTouristRepository
from travel_api.repositories.trips import SqlTripRepository
from travel_api.schemas.tourist import TouristCreate
from travel_api.schemas.trip import TripCreate

NOW = datetime(2030, 1, 1, tzinfo=timezone.utc)
BALI = {"name": "Kuta Beach", "country": "Indonesia", "city": "Bali"}


@pytest.fixture
def tourist(db):
    return SqlTouristRepository(db).create(
        TouristCreate(
            first_name="Ann",
            last_name="Lee",
            email="ann@travel.com",
            date_of_birth=date(1992, 3, 4),
            nationality="Indonesia",
        )
    )


def _trip(tourist_id: str, start: datetime, days: int = 3, **overrides) -> TripCreate:
    data = {
        "tourist_id": tourist_id,
        "start_date": start,
        "end_date": start + timedelta(days=days),
        "destination": BALI,
    }
    data.update(overrides)
    return TripCreate(**data)


def test_create_defaults_to_planned(db, tourist):
    trip = SqlTripRepository(db).create(_trip(tourist.id, NOW + timedelta(days=10)))

    assert trip.status == TripStatus.PLANNED
    assert trip.start_date == NOW + timedelta(days=10)
    assert trip.start_date.tzinfo is not None
    assert trip.destination.city == "Bali"


def test_create_keeps_cost_and_coordinates(db, tourist):
    destination = dict(BALI, address="Jl. Pantai Kuta", coordinates={"latitude": -8.72, "longitude": 115.17})
    trip = SqlTripRepository(db).create(
        _trip(tourist.id, NOW, destination=destination, total_cost=Decimal("1250.50"), notes="Surf lessons")
    )

    data = trip.to_dict()
    assert data["totalCost"] == 1250.5
    assert data["destination"]["coordinates"] == {"latitude": -8.72, "longitude": 115.17}
    assert data["notes"] == "Surf lessons"


@pytest.mark.parametrize("days", [0, -1])
def test_create_rejects_start_not_before_end(db, tourist, days):
    trips = SqlTripRepository(db)

    with pytest.raises(InvalidInput) as exc:
        trips.create(_trip(tourist.id, NOW, days=days))

    assert exc.value.message == "Start date must be before end date"
    assert trips.list_all() == []


def test_update_checks_order_against_stored_dates(db, tourist):
    trips = SqlTripRepository(db)
    trip = trips.create(_trip(tourist.id, NOW, days=5))

    with pytest.raises(InvalidInput):
        trips.update(trip.id, {"end_date": NOW - timedelta(days=1)})

    assert trips.get_by_id(trip.id).end_date == NOW + timedelta(days=5)


def test_update_replaces_only_supplied_fields(db, tourist):
    trips = SqlTripRepository(db)
    trip = trips.create(_trip(tourist.id, NOW, notes="original"))

    updated = trips.update(trip.id, {"status": TripStatus.ONGOING, "end_date": NOW + timedelta(days=7)})

    assert updated.status == TripStatus.ONGOING
    assert updated.end_date == NOW + timedelta(days=7)
    assert updated.start_date == trip.start_date
    assert updated.notes == "original"


def test_update_with_no_changes_returns_current_record(db, tourist):
    trips = SqlTripRepository(db)
    trip = trips.create(_trip(tourist.id, NOW))

    assert trips.update(trip.id, {}) == trip


def test_update_unknown_trip_returns_none(db):
    assert SqlTripRepository(db).update("missing", {"notes": "x"}) is None


def test_find_by_tourist_orders_latest_start_first(db, tourist):
    trips = SqlTripRepository(db)
    early = trips.create(_trip(tourist.id, NOW))
    late = trips.create(_trip(tourist.id, NOW + timedelta(days=30)))

    assert [trip.id for trip in trips.find_by_tourist_id(tourist.id)] == [late.id, early.id]


def test_find_upcoming_keeps_future_active_trips(db, tourist):
    trips = SqlTripRepository(db)
    past = trips.create(_trip(tourist.id, NOW - timedelta(days=10)))
    soon = trips.create(_trip(tourist.id, NOW + timedelta(days=2)))
    later = trips.create(_trip(tourist.id, NOW + timedelta(days=20), status=TripStatus.ONGOING))
    cancelled = trips.create(_trip(tourist.id, NOW + timedelta(days=5), status=TripStatus.CANCELLED))

    upcoming = [trip.id for trip in trips.find_upcoming(now=NOW)]

    assert upcoming == [soon.id, later.id]
    assert past.id not in upcoming
    assert cancelled.id not in upcoming


def test_find_by_date_range_requires_trip_inside_range(db, tourist):
    trips = SqlTripRepository(db)
    inside = trips.create(_trip(tourist.id, NOW + timedelta(days=1), days=2))
    overlapping = trips.create(_trip(tourist.id, NOW + timedelta(days=8), days=5))

    found = [trip.id for trip in trips.find_by_date_range(NOW, NOW + timedelta(days=10))]

    assert found == [inside.id]
    assert overlapping.id not in found


def test_delete_reports_whether_a_trip_was_removed(db, tourist):
    trips = SqlTripRepository(db)
    trip = trips.create(_trip(tourist.id, NOW))

    assert trips.delete(trip.id) is True
    assert trips.delete(trip.id) is False
    assert trips.get_by_id(trip.id) is None


def test_find_upcoming_excludes_now_completed_and_offset_past_starts(db, tourist):
    trips = SqlTripRepository(db)
    at_now = trips.create(_trip(tourist.id, NOW))
    completed = trips.create(_trip(tourist.id, NOW + timedelta(days=4), status=TripStatus.COMPLETED))
    # 01:00 at +07:00 is 18:00 UTC the day before NOW
    jakarta = timezone(timedelta(hours=7))
    offset_past = trips.create(_trip(tourist.id, datetime(2030, 1, 1, 1, 0, tzinfo=jakarta)))
    future = trips.create(_trip(tourist.id, NOW + timedelta(seconds=1)))

    upcoming = [trip.id for trip in trips.find_upcoming(now=NOW)]

    assert upcoming == [future.id]
    assert at_now.id not in upcoming
    assert completed.id not in upcoming
    assert offset_past.id not in upcoming
    assert trips.get_by_id(offset_past.id).start_date == datetime(2029, 12, 31, 18, 0, tzinfo=timezone.utc)
