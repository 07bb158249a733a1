from travel_api.models.user import User
from travel_api.models.tourist import Tourist
from travel_api.models.trip import Trip
