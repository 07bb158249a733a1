from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from travel_api.core.errors import ErrorKind, error_for_kind
from travel_api.domain import Claims, TouristRecord, TripRecord, UserRole

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PolicyDecision:
    allowed: bool
    kind: Optional[ErrorKind] = None
    reason: Optional[str] = None
    message: Optional[str] = None

    def raise_if_denied(self) -> None:
        if not self.allowed:
            raise error_for_kind(self.kind, self.message)


ALLOW = PolicyDecision(allowed=True)


def _deny(kind: ErrorKind, reason: str, message: str) -> PolicyDecision:
    return PolicyDecision(allowed=False, kind=kind, reason=reason, message=message)


class AccessPolicy:
    """Role and ownership rules for the travel agency endpoints.

    Every check is a pure function of the caller's claims and the records
    involved. Checks never raise; callers turn a denied decision into the
    matching error with ``PolicyDecision.raise_if_denied``.
    """

    @staticmethod
    def authenticate(claims: Optional[Claims]) -> PolicyDecision:
        if claims is None:
            return _deny(ErrorKind.UNAUTHENTICATED, "missing_token", "Access token required")
        return ALLOW

    @classmethod
    def require_role(cls, claims: Optional[Claims], roles: Iterable[UserRole | str]) -> PolicyDecision:
        decision = cls.authenticate(claims)
        if not decision.allowed:
            return decision

        allowed = {UserRole(role) for role in roles}
        if claims.role not in allowed:
            return _deny(ErrorKind.FORBIDDEN, "role_denied", "Insufficient permissions")
        return ALLOW

    @classmethod
    def require_employee(cls, claims: Optional[Claims]) -> PolicyDecision:
        return cls.require_role(claims, [UserRole.EMPLOYEE])

    @classmethod
    def can_view_tourist_trips(
        cls,
        claims: Optional[Claims],
        tourist_id: str,
        own_profile: Optional[TouristRecord],
    ) -> PolicyDecision:
        """Employees see every tourist's trips; tourists only their own."""
        decision = cls.authenticate(claims)
        if not decision.allowed or claims.is_employee:
            return decision

        if claims.is_tourist and own_profile is not None and own_profile.id == tourist_id:
            return ALLOW
        return _deny(ErrorKind.FORBIDDEN, "ownership_denied", "Access denied")

    @classmethod
    def can_view_trip(
        cls,
        claims: Optional[Claims],
        trip: TripRecord,
        own_profile: Optional[TouristRecord],
    ) -> PolicyDecision:
        return cls.can_view_tourist_trips(claims, trip.tourist_id, own_profile)

    @classmethod
    def can_list_own_trips(cls, claims: Optional[Claims], own_profile: Optional[TouristRecord]) -> PolicyDecision:
        decision = cls.authenticate(claims)
        if not decision.allowed:
            return decision

        if not claims.is_tourist:
            return _deny(ErrorKind.FORBIDDEN, "role_denied", "Only tourists can access this endpoint")
        if own_profile is None:
            return _deny(ErrorKind.NOT_FOUND, "profile_missing", "Tourist profile not found")
        return ALLOW

    @staticmethod
    def log_access_denied(*, decision: PolicyDecision, claims: Optional[Claims], endpoint: str) -> None:
        logger.warning(
            "Access denied (%s): user_id=%s user_role=%s endpoint=%s",
            decision.reason,
            getattr(claims, "user_id", None),
            getattr(getattr(claims, "role", None), "value", None),
            endpoint,
        )
