"""Registration, login and current-user endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from jewelry_api.api.deps import CurrentPrincipal
from jewelry_api.core.database import get_db
from jewelry_api.core.security import TokenConfig, get_token_config, issue_token
from jewelry_api.schemas.auth import AuthResponse, LoginRequest, MeResponse, RegisterRequest
from jewelry_api.services.accounts import authenticate_credentials, register_user

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
    token_config: Annotated[TokenConfig, Depends(get_token_config)],
) -> AuthResponse:
    """
    Create an account with role 'user' and return it with a bearer token.
    Include the token in the Authorization header as: Bearer <access_token>
    """
    principal = register_user(db, body)
    token = issue_token(principal.id, token_config)
    return AuthResponse(user=principal, access_token=token)


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
    token_config: Annotated[TokenConfig, Depends(get_token_config)],
) -> AuthResponse:
    """Authenticate with email and password; returns the user and a bearer token."""
    principal = authenticate_credentials(db, body.email, body.password)
    token = issue_token(principal.id, token_config)
    return AuthResponse(user=principal, access_token=token)


@router.get("/me", response_model=MeResponse)
def me(principal: CurrentPrincipal) -> MeResponse:
    """Return the authenticated user (never includes the password hash)."""
    return MeResponse(user=principal)
