# travel_api/deps.py
from __future__ import annotations

import logging
from typing import Iterable, Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from travel_api.core.database import get_db
from travel_api.core.errors import Unauthenticated
from travel_api.core.request_context import set_request_context
from travel_api.domain import Claims, TouristRecord, UserRole
from travel_api.repositories.tourists import SqlTouristRepository, TouristRepository
from travel_api.repositories.trips import SqlTripRepository, TripRepository
from travel_api.repositories.users import SqlUserRepository, UserRepository
from travel_api.services.access_policy import AccessPolicy, PolicyDecision
from travel_api.services.credentials import CredentialStore
from travel_api.services.tokens import TokenService

# Swagger "Authorize" (OAuth2 password flow) calls this endpoint.
# auto_error=False so a missing header reaches our own 401 envelope.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token", auto_error=False)

logger = logging.getLogger(__name__)


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    return SqlUserRepository(db)


def get_tourist_repository(db: Session = Depends(get_db)) -> TouristRepository:
    return SqlTouristRepository(db)


def get_trip_repository(db: Session = Depends(get_db)) -> TripRepository:
    return SqlTripRepository(db)


def get_credential_store(users: UserRepository = Depends(get_user_repository)) -> CredentialStore:
    return CredentialStore(users)


def enforce(decision: PolicyDecision, *, request: Request, claims: Optional[Claims]) -> None:
    if not decision.allowed:
        AccessPolicy.log_access_denied(
            decision=decision,
            claims=claims,
            endpoint=f"{request.method} {request.url.path}",
        )
    decision.raise_if_denied()


def get_current_claims(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    tokens: TokenService = Depends(get_token_service),
) -> Claims:
    """Reads the bearer token and returns its claims without a storage lookup."""
    if not token:
        raise Unauthenticated("Access token required")

    claims = tokens.verify(token)
    request.state.claims = claims
    set_request_context(user_id=claims.user_id, user_role=claims.role.value)
    return claims


def require_role(roles: Iterable[UserRole | str]):
    allowed = [UserRole(role) for role in roles]

    def _dependency(request: Request, claims: Claims = Depends(get_current_claims)) -> Claims:
        enforce(AccessPolicy.require_role(claims, allowed), request=request, claims=claims)
        return claims

    return _dependency


require_employee = require_role([UserRole.EMPLOYEE])


def get_own_tourist_profile(
    claims: Claims = Depends(get_current_claims),
    tourists: TouristRepository = Depends(get_tourist_repository),
) -> Optional[TouristRecord]:
    """Linked tourist profile of a tourist caller; ``None`` for employees."""
    if not claims.is_tourist:
        return None
    return tourists.get_by_user_id(claims.user_id)
