from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from typing import Optional

from sqlalchemy.orm import Session

from travel_api.core.errors import RepositoryError
from travel_api.domain import UserRecord, UserRole, ensure_utc
from travel_api.models.user import User
from travel_api.repositories.base import storage_errors


class UserRepository(ABC):
    @abstractmethod
    def get_by_id(self, user_id: str) -> Optional[UserRecord]:
        ...

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[UserRecord]:
        ...

    @abstractmethod
    def create(
        self,
        *,
        email: str,
        password_hash: str,
        role: UserRole,
        first_name: str,
        last_name: str,
    ) -> UserRecord:
        ...


def _to_record(user: User) -> UserRecord:
    return UserRecord(
        id=user.id,
        email=user.email,
        role=UserRole(user.role),
        first_name=user.first_name,
        last_name=user.last_name,
        password_hash=user.password_hash,
        created_at=ensure_utc(user.created_at) if user.created_at else None,
        updated_at=ensure_utc(user.updated_at) if user.updated_at else None,
    )


class SqlUserRepository(UserRepository):
    def __init__(self, db: Session) -> None:
        self.db = db

    def get_by_id(self, user_id: str) -> Optional[UserRecord]:
        with storage_errors(self.db, "Error finding user by ID"):
            user = self.db.query(User).filter(User.id == user_id).first()
        return _to_record(user) if user else None

    def get_by_email(self, email: str) -> Optional[UserRecord]:
        with storage_errors(self.db, "Error finding user by email"):
            user = self.db.query(User).filter(User.email == email).first()
        return _to_record(user) if user else None

    def create(
        self,
        *,
        email: str,
        password_hash: str,
        role: UserRole,
        first_name: str,
        last_name: str,
    ) -> UserRecord:
        user_id = str(uuid.uuid4())
        with storage_errors(self.db, "Error creating user", conflict_message="User already exists"):
            self.db.add(
                User(
                    id=user_id,
                    email=email,
                    password_hash=password_hash,
                    role=UserRole(role).value,
                    first_name=first_name,
                    last_name=last_name,
                )
            )
            self.db.commit()

        created = self.get_by_id(user_id)
        if created is None:
            raise RepositoryError("Failed to create user", detail=f"user {user_id} not readable after insert")
        return created
