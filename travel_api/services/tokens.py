from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from jose import ExpiredSignatureError, JWTError, jwt

from travel_api.core.config import JWT_ALGORITHM, JWT_EXPIRE_MINUTES
from travel_api.core.errors import InvalidToken
from travel_api.core.startup_checks import validate_jwt_secret
from travel_api.domain import Claims, UserRole


class TokenService:
    """Issues and verifies signed session tokens.

    The secret is checked on construction: an empty secret raises
    ``ConfigurationError`` so the process never starts without one.
    """

    def __init__(
        self,
        secret: str,
        *,
        algorithm: str = JWT_ALGORITHM,
        expires_minutes: int = JWT_EXPIRE_MINUTES,
    ) -> None:
        self._secret = validate_jwt_secret(secret)
        self.algorithm = algorithm
        self.expires_minutes = expires_minutes

    def issue(self, user_id: str, email: str, role: UserRole | str, *, now: datetime | None = None) -> str:
        """
        "sub" must be a string for python-jose; "userId" mirrors it so the
        claims read the same as the public user payload.
        """
        issued_at = now or datetime.now(timezone.utc)
        expires_at = issued_at + timedelta(minutes=self.expires_minutes)

        payload: Dict[str, Any] = {
            "sub": str(user_id),
            "userId": str(user_id),
            "email": email,
            "role": UserRole(role).value,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def decode(self, token: str) -> Dict[str, Any]:
        try:
            return jwt.decode(token, self._secret, algorithms=[self.algorithm])
        except ExpiredSignatureError as exc:
            raise InvalidToken(detail="Token expired") from exc
        except JWTError as exc:
            raise InvalidToken(detail=str(exc)) from exc

    def verify(self, token: str) -> Claims:
        if not token:
            raise InvalidToken(detail="Empty token")

        payload = self.decode(token)
        user_id = payload.get("userId") or payload.get("sub")
        email = payload.get("email")
        raw_role = payload.get("role")
        issued_at = payload.get("iat")
        expires_at = payload.get("exp")
        if not user_id or not email or raw_role is None or issued_at is None or expires_at is None:
            raise InvalidToken(detail="Token is missing identity claims")

        try:
            role = UserRole(raw_role)
        except ValueError as exc:
            raise InvalidToken(detail=f"Unknown role claim: {raw_role}") from exc

        return Claims(
            user_id=str(user_id),
            email=str(email),
            role=role,
            issued_at=datetime.fromtimestamp(int(issued_at), tz=timezone.utc),
            expires_at=datetime.fromtimestamp(int(expires_at), tz=timezone.utc),
        )
