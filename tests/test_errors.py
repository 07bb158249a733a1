import pytest

from travel_api.core.errors import (
    Conflict,
    ErrorKind,
    Forbidden,
    InvalidInput,
    InvalidToken,
    NotFound,
    RepositoryError,
    Unauthenticated,
    error_for_kind,
)
from travel_api.core.responses import envelope


@pytest.mark.parametrize(
    "error_cls, status_code",
    [
        (Unauthenticated, 401),
        (InvalidToken, 401),
        (Forbidden, 403),
        (NotFound, 404),
        (InvalidInput, 400),
        (Conflict, 409),
        (RepositoryError, 500),
    ],
)
def test_each_error_kind_maps_to_one_status(error_cls, status_code):
    assert error_cls().status_code == status_code


def test_error_for_kind_builds_matching_error():
    error = error_for_kind(ErrorKind.FORBIDDEN, "Access denied")

    assert isinstance(error, Forbidden)
    assert error.message == "Access denied"


def test_envelope_keeps_empty_lists_but_omits_missing_data():
    assert envelope("Trips retrieved successfully", []) == {
        "success": True,
        "message": "Trips retrieved successfully",
        "data": [],
    }
    assert envelope("Trip deleted successfully") == {"success": True, "message": "Trip deleted successfully"}
