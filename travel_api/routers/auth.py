# travel_api/routers/auth.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm

from travel_api.core.errors import NotFound, Unauthenticated
from travel_api.core.responses import envelope
from travel_api.deps import (
    get_credential_store,
    get_current_claims,
    get_token_service,
    get_tourist_repository,
)
from travel_api.domain import Claims, UserRecord, UserRole
from travel_api.repositories.tourists import TouristRepository
from travel_api.schemas.auth import LoginPayload, RegisterPayload
from travel_api.services.credentials import CredentialStore
from travel_api.services.tokens import TokenService

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _issue_for(user: UserRecord, tokens: TokenService) -> str:
    return tokens.issue(user.id, user.email, user.role)


@router.post("/login")
def login(
    payload: LoginPayload,
    credentials: CredentialStore = Depends(get_credential_store),
    tokens: TokenService = Depends(get_token_service),
):
    user = credentials.authenticate(str(payload.email), payload.password)
    if user is None:
        raise Unauthenticated("Invalid credentials")

    return envelope(
        "Login successful",
        {"user": user.to_dict(), "token": _issue_for(user, tokens)},
    )


@router.post("/token")
def token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    credentials: CredentialStore = Depends(get_credential_store),
    tokens: TokenService = Depends(get_token_service),
):
    """Endpoint used by the Swagger UI Authorize button.

    It sends form-data with the fields username and password.
    """
    user = credentials.authenticate(form_data.username, form_data.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return {"access_token": _issue_for(user, tokens), "token_type": "bearer"}


@router.post("/register", status_code=201)
def register(
    payload: RegisterPayload,
    credentials: CredentialStore = Depends(get_credential_store),
):
    user = credentials.register(
        email=str(payload.email),
        password=payload.password,
        first_name=payload.first_name,
        last_name=payload.last_name,
        role=payload.role,
    )
    return envelope("User registered successfully", user.to_dict())


@router.get("/profile")
def profile(
    claims: Claims = Depends(get_current_claims),
    credentials: CredentialStore = Depends(get_credential_store),
    tourists: TouristRepository = Depends(get_tourist_repository),
):
    user = credentials.find_by_id(claims.user_id)
    if user is None:
        raise NotFound("User not found")

    data = {"user": user.to_dict()}
    if user.role == UserRole.TOURIST:
        tourist = tourists.get_by_user_id(user.id)
        data["touristProfile"] = tourist.to_dict() if tourist else None
    return envelope("Profile retrieved successfully", data)
