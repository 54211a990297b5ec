"""User store access. The only module that reads or writes password hashes."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jewelry_api.core.errors import ValidationError
from jewelry_api.models import User
from jewelry_api.schemas.auth import Principal

logger = logging.getLogger(__name__)

# Every users column except password_hash.
PRINCIPAL_COLUMNS = (
    User.id,
    User.name,
    User.email,
    User.phone,
    User.role,
    User.created_at,
)


def find_user_by_email(db: Session, email: str) -> User | None:
    """Full row (including password_hash) for credential checks. Email match is case-insensitive."""
    return db.query(User).filter(User.email == email.strip().lower()).first()


def find_user_by_id(db: Session, user_id: int) -> Principal | None:
    """Projected lookup that never loads the password hash."""
    row = db.execute(select(*PRINCIPAL_COLUMNS).where(User.id == user_id)).first()
    if row is None:
        return None
    return Principal.model_validate(dict(row._mapping))


def insert_user(
    db: Session,
    *,
    name: str,
    email: str,
    phone: str,
    password_hash: str,
    role: str = "user",
) -> Principal:
    """Insert a user and return it as a Principal. Raises ValidationError on duplicate email."""
    user = User(
        name=name,
        email=email.strip().lower(),
        phone=phone,
        password_hash=password_hash,
        role=role,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ValidationError(
            "User with this email already exists", code="email_taken"
        ) from e
    db.refresh(user)
    return to_principal(user)


def to_principal(user: User) -> Principal:
    """Strip the password hash from a full row."""
    return Principal(
        id=user.id,
        name=user.name,
        email=user.email,
        phone=user.phone,
        role=user.role,
        created_at=user.created_at,
    )
