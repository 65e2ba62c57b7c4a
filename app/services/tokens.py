"""Personal access token issuance, validation and revocation.

Tokens are opaque random strings. The plaintext is handed to the caller once;
the database keeps only its SHA-256 digest. A token authenticates for as
long as its row exists. Revoking it deletes the row, which makes
``Issued -> Revoked`` a one-way transition.
"""

import hashlib
import logging
import secrets

from sqlalchemy.orm import Session

from app.config import get_settings
from app.errors import AuthenticationError
from app.models.token import PersonalAccessToken
from app.models.user import User

logger = logging.getLogger("taskboard")


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class TokenService:
    """Issues and revokes bearer tokens tied to a user."""

    def __init__(self) -> None:
        self.token_bytes = get_settings().TOKEN_BYTES

    def issue(self, db: Session, user: User, name: str) -> str:
        """Create a token for the user and return its plaintext value."""
        plaintext = secrets.token_urlsafe(self.token_bytes)
        record = PersonalAccessToken(user_id=user.id, name=name, token_hash=hash_token(plaintext))
        db.add(record)
        db.commit()
        logger.info("Issued token %s (%s) for user %s", record.id, name, user.id)
        return plaintext

    def issue_exclusive(self, db: Session, user: User, name: str) -> str:
        """Revoke every existing token of the user, then issue a new one."""
        self.revoke_all_for_user(db, user)
        return self.issue(db, user, name)

    def resolve(self, db: Session, token: str | None) -> PersonalAccessToken:
        """Find the stored record for a plaintext token. Raises AuthenticationError if absent."""
        if not token:
            raise AuthenticationError("Unauthenticated.")
        record = db.query(PersonalAccessToken).filter(PersonalAccessToken.token_hash == hash_token(token)).first()
        if record is None:
            raise AuthenticationError("Unauthenticated.")
        return record

    def validate(self, db: Session, token: str | None) -> User:
        """Return the user a token belongs to. Raises AuthenticationError if invalid or revoked."""
        record = self.resolve(db, token)
        user = db.get(User, record.user_id)
        if user is None:
            raise AuthenticationError("Unauthenticated.")
        return user

    def revoke(self, db: Session, token: str) -> None:
        """Delete the token. Revoking an unknown or already revoked token is a no-op."""
        deleted = (
            db.query(PersonalAccessToken)
            .filter(PersonalAccessToken.token_hash == hash_token(token))
            .delete(synchronize_session=False)
        )
        db.commit()
        if deleted:
            logger.info("Revoked token")

    def revoke_all_for_user(self, db: Session, user: User, keep: int | None = None) -> int:
        """Delete every token of the user, optionally sparing the token with id ``keep``."""
        query = db.query(PersonalAccessToken).filter(PersonalAccessToken.user_id == user.id)
        if keep is not None:
            query = query.filter(PersonalAccessToken.id != keep)
        deleted = query.delete(synchronize_session=False)
        db.commit()
        logger.info("Revoked %d token(s) for user %s", deleted, user.id)
        return deleted


_token_service: TokenService | None = None


def get_token_service() -> TokenService:
    """Get singleton token service instance."""
    global _token_service
    if _token_service is None:
        _token_service = TokenService()
    return _token_service
