from __future__ import annotations

import logging
from typing import Optional

from travel_api.core.errors import Conflict
from travel_api.domain import UserRecord, UserRole
from travel_api.repositories.users import UserRepository
from travel_api.services.passwords import hash_password, verify_password

logger = logging.getLogger(__name__)


class CredentialStore:
    """User identities and password checks on top of a ``UserRepository``."""

    def __init__(self, users: UserRepository) -> None:
        self.users = users

    def find_by_id(self, user_id: str) -> Optional[UserRecord]:
        return self.users.get_by_id(user_id)

    def find_by_email(self, email: str) -> Optional[UserRecord]:
        return self.users.get_by_email(email)

    def register(
        self,
        *,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        role: UserRole = UserRole.TOURIST,
    ) -> UserRecord:
        if self.users.get_by_email(email) is not None:
            raise Conflict("User already exists")

        user = self.users.create(
            email=email,
            password_hash=hash_password(password),
            role=role,
            first_name=first_name,
            last_name=last_name,
        )
        logger.info("user registered user_id=%s role=%s", user.id, user.role.value)
        return user

    def authenticate(self, email: str, password: str) -> Optional[UserRecord]:
        """Return the user for valid credentials, ``None`` otherwise."""
        user = self.users.get_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            logger.info("login rejected reason=%s", "unknown_email" if user is None else "bad_password")
            return None
        return user
