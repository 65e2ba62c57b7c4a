"""Authentication and profile API endpoints."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import CurrentUser, get_current_user
from app.schemas.auth import (
    LoginRequest,
    LogoutAllResponse,
    ProfileResponse,
    ProfileUpdateRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from app.services.auth import get_auth_service
from app.services.tokens import get_token_service

logger = logging.getLogger("taskboard")

router = APIRouter(prefix="/api", tags=["Authentication"])

REGISTER_TOKEN_NAME = "auth_token"


@router.post("/register", response_model=TokenResponse, status_code=201)
def register(body: RegisterRequest, db: Session = Depends(get_db)) -> TokenResponse:
    """Register a new user account and sign it in."""
    auth_service = get_auth_service()
    user = auth_service.register(db, body.name, body.email, body.password)

    token = get_token_service().issue(db, user, REGISTER_TOKEN_NAME)
    return TokenResponse(token=token, user=UserResponse.model_validate(user))


@router.post("/login", response_model=TokenResponse)
def login(body: LoginRequest, db: Session = Depends(get_db)) -> TokenResponse:
    """Authenticate and receive a bearer token. Earlier tokens of the user are revoked."""
    auth_service = get_auth_service()
    user = auth_service.authenticate(db, body.email, body.password)

    token = get_token_service().issue_exclusive(db, user, body.device_name)
    logger.info("User %s logged in", user.id)
    return TokenResponse(token=token, user=UserResponse.model_validate(user))


@router.post("/logout")
def logout(current: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)) -> dict:
    """Revoke the token used for this request."""
    get_token_service().revoke(db, current.token)
    logger.info("User %s logged out", current.user_id)
    return {"detail": "Logged out"}


@router.post("/logout/all", response_model=LogoutAllResponse)
def logout_all(current: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)) -> LogoutAllResponse:
    """Revoke every token of the current user, including this one."""
    revoked = get_token_service().revoke_all_for_user(db, current.user)
    return LogoutAllResponse(detail="Logged out from all sessions", revoked=revoked)


@router.get("/user", response_model=UserResponse)
def me(current: CurrentUser = Depends(get_current_user)) -> UserResponse:
    """Return the authenticated user."""
    return UserResponse.model_validate(current.user)


@router.put("/user/profile", response_model=ProfileResponse)
def update_profile(
    body: ProfileUpdateRequest,
    current: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ProfileResponse:
    """Update name and email, and optionally the password."""
    auth_service = get_auth_service()
    user = auth_service.update_profile(
        db,
        current.user,
        name=body.name,
        email=body.email,
        current_password=body.password_current,
        new_password=body.password,
    )

    if body.password:
        # Other sessions must sign in again with the new password
        get_token_service().revoke_all_for_user(db, user, keep=current.token_id)

    return ProfileResponse(detail="Profile updated", user=UserResponse.model_validate(user))
