from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from travel_api.core.errors import InvalidInput, RepositoryError
from travel_api.domain import EmergencyContact, TouristRecord, ensure_utc
from travel_api.models.tourist import Tourist
from travel_api.repositories.base import dump_json, load_json, storage_errors
from travel_api.schemas.tourist import TouristCreate


UPDATABLE_FIELDS = frozenset(
    {
        "first_name",
        "last_name",
        "email",
        "phone",
        "date_of_birth",
        "nationality",
        "passport_number",
        "emergency_contact",
    }
)


class TouristRepository(ABC):
    @abstractmethod
    def list_all(self) -> List[TouristRecord]:
        ...

    @abstractmethod
    def get_by_id(self, tourist_id: str) -> Optional[TouristRecord]:
        ...

    @abstractmethod
    def get_by_user_id(self, user_id: str) -> Optional[TouristRecord]:
        ...

    @abstractmethod
    def create(self, payload: TouristCreate) -> TouristRecord:
        ...

    @abstractmethod
    def update(self, tourist_id: str, changes: Dict[str, Any]) -> Optional[TouristRecord]:
        """Replace only the supplied fields; ``None`` when the tourist is absent."""

    @abstractmethod
    def delete(self, tourist_id: str) -> bool:
        ...


def _to_record(tourist: Tourist) -> TouristRecord:
    contact = load_json(tourist.emergency_contact, operation="Error reading tourist emergency contact")
    return TouristRecord(
        id=tourist.id,
        first_name=tourist.first_name,
        last_name=tourist.last_name,
        email=tourist.email,
        phone=tourist.phone,
        date_of_birth=tourist.date_of_birth,
        nationality=tourist.nationality,
        passport_number=tourist.passport_number,
        emergency_contact=EmergencyContact.from_dict(contact) if contact else None,
        user_id=tourist.user_id,
        created_at=ensure_utc(tourist.created_at) if tourist.created_at else None,
        updated_at=ensure_utc(tourist.updated_at) if tourist.updated_at else None,
    )


def _encode_contact(contact: Optional[Dict[str, Any]]) -> Optional[str]:
    if contact is None:
        return None
    return dump_json(EmergencyContact.from_dict(contact).to_dict())


class SqlTouristRepository(TouristRepository):
    def __init__(self, db: Session) -> None:
        self.db = db

    def _find(self, tourist_id: str) -> Optional[Tourist]:
        return self.db.query(Tourist).filter(Tourist.id == tourist_id).first()

    def list_all(self) -> List[TouristRecord]:
        with storage_errors(self.db, "Error fetching tourists"):
            tourists = self.db.query(Tourist).order_by(Tourist.created_at.desc()).all()
        return [_to_record(tourist) for tourist in tourists]

    def get_by_id(self, tourist_id: str) -> Optional[TouristRecord]:
        with storage_errors(self.db, "Error finding tourist"):
            tourist = self._find(tourist_id)
        return _to_record(tourist) if tourist else None

    def get_by_user_id(self, user_id: str) -> Optional[TouristRecord]:
        with storage_errors(self.db, "Error finding tourist by user ID"):
            tourist = self.db.query(Tourist).filter(Tourist.user_id == user_id).first()
        return _to_record(tourist) if tourist else None

    def create(self, payload: TouristCreate) -> TouristRecord:
        tourist_id = str(uuid.uuid4())
        contact = payload.emergency_contact.model_dump() if payload.emergency_contact else None
        with storage_errors(
            self.db,
            "Error creating tourist",
            conflict_message="User account is already linked to a tourist profile",
        ):
            self.db.add(
                Tourist(
                    id=tourist_id,
                    first_name=payload.first_name,
                    last_name=payload.last_name,
                    email=str(payload.email),
                    phone=payload.phone,
                    date_of_birth=payload.date_of_birth,
                    nationality=payload.nationality,
                    passport_number=payload.passport_number,
                    emergency_contact=_encode_contact(contact),
                    user_id=payload.user_id,
                )
            )
            self.db.commit()

        created = self.get_by_id(tourist_id)
        if created is None:
            raise RepositoryError("Failed to create tourist", detail=f"tourist {tourist_id} not readable after insert")
        return created

    def update(self, tourist_id: str, changes: Dict[str, Any]) -> Optional[TouristRecord]:
        if not changes:
            return self.get_by_id(tourist_id)

        unknown = sorted(set(changes) - UPDATABLE_FIELDS)
        if unknown:
            raise InvalidInput(f"Unknown tourist fields: {', '.join(unknown)}")

        with storage_errors(self.db, "Error updating tourist"):
            tourist = self._find(tourist_id)
            if tourist is None:
                return None

            for name, value in changes.items():
                if name == "emergency_contact":
                    value = _encode_contact(value)
                elif name == "email" and value is not None:
                    value = str(value)
                setattr(tourist, name, value)
            self.db.commit()

        return self.get_by_id(tourist_id)

    def delete(self, tourist_id: str) -> bool:
        with storage_errors(self.db, "Error deleting tourist"):
            tourist = self._find(tourist_id)
            if tourist is None:
                return False
            # trips go with it through the relationship cascade
            self.db.delete(tourist)
            self.db.commit()
        return True
