"""
Create a user, e.g. the first admin. Run from project root:
  python -m jewelry_api.scripts.create_user --admin
  python -m jewelry_api.scripts.create_user EMAIL PASSWORD --name "Jane Doe" --phone 5551234567 [--role admin]
With --admin, missing values fall back to ADMIN_EMAIL, ADMIN_PASSWORD, ADMIN_NAME and ADMIN_PHONE.
"""
import argparse
import logging
import sys

from jewelry_api.core.config import get_settings
from jewelry_api.core.database import SessionLocal
from jewelry_api.core.errors import ValidationError
from jewelry_api.core.logging_config import configure_logging
from jewelry_api.core.security import (
    PASSWORD_MAX_BYTES,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    hash_password,
    password_too_long,
)
from jewelry_api.services.users import find_user_by_email, insert_user

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)

    parser = argparse.ArgumentParser(description="Create a jewelry catalog user or seed the admin.")
    parser.add_argument("email", nargs="?", help="Email address (case-insensitive)")
    parser.add_argument("password", nargs="?", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("--name", default=None)
    parser.add_argument("--phone", default=None)
    parser.add_argument("--role", default=None, choices=["user", "admin"])
    parser.add_argument("--admin", action="store_true", help="Seed the admin from ADMIN_* settings")
    args = parser.parse_args(argv)

    if args.admin:
        admin_password = settings.ADMIN_PASSWORD.get_secret_value() if settings.ADMIN_PASSWORD else None
        email = args.email or settings.ADMIN_EMAIL
        password = args.password or admin_password
        name = args.name or settings.ADMIN_NAME
        phone = args.phone or settings.ADMIN_PHONE
        role = args.role or "admin"
    else:
        email, password = args.email, args.password
        name, phone = args.name, args.phone
        role = args.role or "user"

    if not email or not password or not name or not phone:
        print("email, password, --name and --phone are required (or use --admin).", file=sys.stderr)
        return 1
    if not (PASSWORD_MIN_LEN <= len(password) <= PASSWORD_MAX_LEN):
        print(f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.", file=sys.stderr)
        return 1
    if password_too_long(password):
        print(f"Password must be at most {PASSWORD_MAX_BYTES} bytes (UTF-8).", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        if find_user_by_email(db, email) is not None:
            print(f"User '{email.lower()}' already exists.", file=sys.stderr)
            return 1
        try:
            principal = insert_user(
                db,
                name=name,
                email=email,
                phone=phone,
                password_hash=hash_password(password),
                role=role,
            )
        except ValidationError as e:
            print(e.message, file=sys.stderr)
            return 1
        logger.info("Created user id=%s email=%s role=%s", principal.id, principal.email, principal.role)
        print(f"Created user '{principal.email}' with role '{principal.role}'.")
        if role == "admin":
            print("Change the admin password after first login.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
