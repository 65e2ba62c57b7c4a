"""Ownership checks for user-owned records."""

import enum

from app.errors import AuthorizationError


class Decision(enum.Enum):
    ALLOWED = "allowed"
    DENIED = "denied"


def authorize(actor_id: int, owner_id: int) -> Decision:
    """Allow only when the acting user owns the resource."""
    if actor_id is not None and actor_id == owner_id:
        return Decision.ALLOWED
    return Decision.DENIED


def ensure_owner(actor_id: int, owner_id: int, detail: str = "This action is unauthorized.") -> None:
    """Raise AuthorizationError unless the actor owns the resource."""
    if authorize(actor_id, owner_id) is Decision.DENIED:
        raise AuthorizationError(detail)
