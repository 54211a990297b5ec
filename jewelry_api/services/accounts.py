"""Registration and login: the only callers of the credential manager outside scripts."""

import logging
from functools import lru_cache

from sqlalchemy.orm import Session

from jewelry_api.core.errors import Unauthenticated, ValidationError
from jewelry_api.core.security import hash_password, verify_password
from jewelry_api.schemas.auth import Principal, RegisterRequest
from jewelry_api.services.users import find_user_by_email, insert_user, to_principal

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


@lru_cache
def _dummy_hash() -> str:
    # Verified against when the email is unknown so both failure paths cost one bcrypt check.
    return hash_password("dummy-password-for-timing")


def register_user(db: Session, body: RegisterRequest) -> Principal:
    """Create an ordinary user. Raises ValidationError if the email is already registered."""
    if find_user_by_email(db, body.email) is not None:
        raise ValidationError("User with this email already exists", code="email_taken")
    principal = insert_user(
        db,
        name=body.name,
        email=body.email,
        phone=body.phone,
        password_hash=hash_password(body.password),
        role="user",
    )
    logger.info("New user registered: id=%s email=%s", principal.id, principal.email)
    return principal


def authenticate_credentials(db: Session, email: str, password: str) -> Principal:
    """
    Check email/password. Unknown email and wrong password raise the same
    Unauthenticated error so the response does not reveal which accounts exist.
    """
    user = find_user_by_email(db, email)
    if user is None:
        verify_password(password, _dummy_hash())
        raise Unauthenticated(INVALID_CREDENTIALS, code="invalid_credentials")
    if not verify_password(password, user.password_hash):
        raise Unauthenticated(INVALID_CREDENTIALS, code="invalid_credentials")
    logger.info("User logged in: id=%s", user.id)
    return to_principal(user)
