"""Password hashing and bearer token issuance/verification."""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Any

import bcrypt
import jwt

from jewelry_api.core.config import get_settings
from jewelry_api.core.errors import Internal

logger = logging.getLogger(__name__)

# Min/max lengths for registration input validation.
NAME_MIN_LEN = 2
NAME_MAX_LEN = 100
PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 72
# bcrypt ignores everything past 72 bytes, so longer secrets are refused rather than truncated.
PASSWORD_MAX_BYTES = 72


class HashingError(Internal):
    """Raised when the salt/entropy source fails while hashing."""


class TokenError(Exception):
    """Base class for token verification failures."""


class TokenInvalid(TokenError):
    """Signature mismatch, malformed token, or missing/invalid claims."""


class TokenExpired(TokenError):
    """Token was valid but its exp claim is in the past."""


@dataclass(frozen=True, slots=True)
class TokenConfig:
    """Process-wide signing configuration; built once at startup and never mutated."""

    secret: str = field(repr=False)
    algorithm: str = "HS256"
    expire_minutes: int = 10080


@dataclass(frozen=True, slots=True)
class TokenClaims:
    principal_id: int
    issued_at: datetime
    expires_at: datetime


@lru_cache
def get_token_config() -> TokenConfig:
    """Return the signing configuration derived from settings."""
    settings = get_settings()
    return TokenConfig(
        secret=settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
        expire_minutes=settings.JWT_EXPIRE_MINUTES,
    )


def password_too_long(plain_password: str) -> bool:
    return len(plain_password.encode("utf-8")) > PASSWORD_MAX_BYTES


def hash_password(plain_password: str, rounds: int | None = None) -> str:
    """Hash a plain-text password for storage. Each call uses a fresh salt."""
    if password_too_long(plain_password):
        raise ValueError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes")
    if rounds is None:
        rounds = get_settings().BCRYPT_ROUNDS
    try:
        salt = bcrypt.gensalt(rounds=rounds)
        return bcrypt.hashpw(plain_password.encode("utf-8"), salt).decode("utf-8")
    except (OSError, ValueError) as e:
        raise HashingError("Password hashing failed") from e


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored bcrypt hash. Never raises on mismatch."""
    if password_too_long(plain_password):
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed.encode("utf-8"))
    except (ValueError, TypeError, AttributeError):
        return False


def issue_token(
    principal_id: int,
    cfg: TokenConfig | None = None,
    now: datetime | None = None,
) -> str:
    """Create a signed token for principal_id with iat and exp. The role is not embedded."""
    cfg = cfg or get_token_config()
    now = now or datetime.now(UTC)
    expire = now + timedelta(minutes=cfg.expire_minutes)
    payload: dict[str, Any] = {
        "sub": str(principal_id),
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
    }
    return jwt.encode(payload, cfg.secret, algorithm=cfg.algorithm)


def verify_token(token: str, cfg: TokenConfig | None = None) -> TokenClaims:
    """
    Decode and validate a token.
    Raises TokenExpired when exp has passed and TokenInvalid for anything else.
    """
    cfg = cfg or get_token_config()
    try:
        payload = jwt.decode(
            token,
            cfg.secret,
            algorithms=[cfg.algorithm],
            options={"require": ["sub", "iat", "exp"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise TokenExpired(str(e)) from e
    except jwt.PyJWTError as e:
        raise TokenInvalid(str(e)) from e

    try:
        principal_id = int(payload["sub"])
    except (TypeError, ValueError) as e:
        raise TokenInvalid("Invalid subject claim") from e
    return TokenClaims(
        principal_id=principal_id,
        issued_at=datetime.fromtimestamp(payload["iat"], UTC),
        expires_at=datetime.fromtimestamp(payload["exp"], UTC),
    )
