from fastapi import APIRouter, Depends

from travel_api.core.errors import Conflict, InvalidInput, NotFound
from travel_api.core.responses import envelope
from travel_api.deps import get_tourist_repository, get_user_repository, require_employee
from travel_api.domain import Claims, UserRole
from travel_api.repositories.tourists import TouristRepository
from travel_api.repositories.users import UserRepository
from travel_api.schemas.tourist import TouristCreate, TouristUpdate

router = APIRouter(prefix="/api/tourists", tags=["tourists"])


@router.get("")
def list_tourists(
    tourists: TouristRepository = Depends(get_tourist_repository),
    _claims: Claims = Depends(require_employee),
):
    records = tourists.list_all()
    return envelope("Tourists retrieved successfully", [tourist.to_dict() for tourist in records])


@router.get("/{tourist_id}")
def get_tourist(
    tourist_id: str,
    tourists: TouristRepository = Depends(get_tourist_repository),
    _claims: Claims = Depends(require_employee),
):
    tourist = tourists.get_by_id(tourist_id)
    if not tourist:
        raise NotFound("Tourist not found")
    return envelope("Tourist retrieved successfully", tourist.to_dict())


@router.post("", status_code=201)
def create_tourist(
    payload: TouristCreate,
    tourists: TouristRepository = Depends(get_tourist_repository),
    users: UserRepository = Depends(get_user_repository),
    _claims: Claims = Depends(require_employee),
):
    if payload.user_id is not None:
        user = users.get_by_id(payload.user_id)
        if user is None:
            raise NotFound("User not found")
        if user.role != UserRole.TOURIST:
            raise InvalidInput("Only tourist accounts can be linked to a tourist profile")
        if tourists.get_by_user_id(payload.user_id) is not None:
            raise Conflict("User account is already linked to a tourist profile")

    tourist = tourists.create(payload)
    return envelope("Tourist created successfully", tourist.to_dict())


@router.put("/{tourist_id}")
def update_tourist(
    tourist_id: str,
    payload: TouristUpdate,
    tourists: TouristRepository = Depends(get_tourist_repository),
    _claims: Claims = Depends(require_employee),
):
    tourist = tourists.update(tourist_id, payload.changes())
    if not tourist:
        raise NotFound("Tourist not found")
    return envelope("Tourist updated successfully", tourist.to_dict())


@router.delete("/{tourist_id}")
def delete_tourist(
    tourist_id: str,
    tourists: TouristRepository = Depends(get_tourist_repository),
    _claims: Claims = Depends(require_employee),
):
    if not tourists.delete(tourist_id):
        raise NotFound("Tourist not found")
    return envelope("Tourist deleted successfully")
