"""Authentication dependencies for FastAPI routes."""

from dataclasses import dataclass

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.errors import AuthenticationError
from app.models.user import User
from app.services.tokens import get_token_service


@dataclass
class CurrentUser:
    """Authenticated user context for one request."""

    user: User
    token: str
    token_id: int

    @property
    def user_id(self) -> int:
        return self.user.id


def bearer_token(request: Request) -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
) -> CurrentUser:
    """Resolve the bearer token to its user. Raises 401 if missing, invalid or revoked."""
    token = bearer_token(request)
    if not token:
        raise AuthenticationError("Unauthenticated.")

    token_service = get_token_service()
    record = token_service.resolve(db, token)
    user = db.get(User, record.user_id)
    if user is None:
        raise AuthenticationError("Unauthenticated.")

    return CurrentUser(user=user, token=token, token_id=record.id)
