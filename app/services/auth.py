"""Credential store: registration, password checks and profile updates."""

import logging

import bcrypt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import get_settings
from app.errors import CredentialsError, ValidationError
from app.models.user import User

logger = logging.getLogger("taskboard")

# bcrypt ignores everything past 72 bytes and newer releases refuse longer input
_BCRYPT_MAX_BYTES = 72

EMAIL_TAKEN = "The email has already been taken."


def _password_bytes(password: str) -> bytes:
    encoded = password.encode("utf-8")
    if len(encoded) > _BCRYPT_MAX_BYTES:
        raise ValidationError.for_field(
            "password", f"The password must not be longer than {_BCRYPT_MAX_BYTES} bytes."
        )
    return encoded


def hash_password(password: str) -> str:
    rounds = get_settings().BCRYPT_ROUNDS
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _commit_user(db: Session) -> None:
    """Commit, reporting a lost race on the unique email index as a field error."""
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationError.for_field("email", EMAIL_TAKEN) from None


class AuthService:
    """Handles user registration, authentication and profile changes."""

    def find_by_email(self, db: Session, email: str) -> User | None:
        return db.query(User).filter(User.email == normalize_email(email)).first()

    def email_taken(self, db: Session, email: str, exclude_user_id: int | None = None) -> bool:
        query = db.query(User.id).filter(User.email == normalize_email(email))
        if exclude_user_id is not None:
            query = query.filter(User.id != exclude_user_id)
        return query.first() is not None

    def register(self, db: Session, name: str, email: str, password: str) -> User:
        """Create a user. Raises ValidationError if the email is already registered."""
        if self.email_taken(db, email):
            raise ValidationError.for_field("email", EMAIL_TAKEN)

        user = User(
            name=name.strip(),
            email=normalize_email(email),
            password_hash=hash_password(password),
        )
        db.add(user)
        _commit_user(db)
        db.refresh(user)
        logger.info("Registered user %s (%s)", user.id, user.email)
        return user

    def verify_password(self, user: User, password: str) -> bool:
        """Check a plaintext password against the stored bcrypt hash.

        Input longer than bcrypt's 72-byte limit never matches; it is not truncated.
        """
        if not password or not user.password_hash:
            return False
        encoded = password.encode("utf-8")
        if len(encoded) > _BCRYPT_MAX_BYTES:
            return False
        return bcrypt.checkpw(encoded, user.password_hash.encode("utf-8"))

    def authenticate(self, db: Session, email: str, password: str) -> User:
        """Return the user for valid credentials. Raises CredentialsError otherwise."""
        user = self.find_by_email(db, email)
        if not user or not self.verify_password(user, password):
            logger.info("Failed login for %s", normalize_email(email))
            raise CredentialsError("Invalid email or password")
        return user

    def update_profile(
        self,
        db: Session,
        user: User,
        name: str,
        email: str,
        current_password: str | None = None,
        new_password: str | None = None,
    ) -> User:
        """Update name and email, and the password when a new one is given.

        Changing the password requires the current one. All checks run before
        anything is written.
        """
        if self.email_taken(db, email, exclude_user_id=user.id):
            raise ValidationError.for_field("email", EMAIL_TAKEN)

        if new_password:
            if not current_password or not self.verify_password(user, current_password):
                raise CredentialsError("The current password is incorrect.")

        user.name = name.strip()
        user.email = normalize_email(email)
        if new_password:
            user.password_hash = hash_password(new_password)
        _commit_user(db)
        db.refresh(user)
        logger.info("Updated profile for user %s%s", user.id, " (password changed)" if new_password else "")
        return user


_auth_service: AuthService | None = None


def get_auth_service() -> AuthService:
    """Get singleton auth service instance."""
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService()
    return _auth_service
