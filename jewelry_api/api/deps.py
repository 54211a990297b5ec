"""Auth and upload dependencies shared by route modules (get_current_principal, RequireRoles, SingleFileUpload)."""

import logging
from collections.abc import Iterable
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile

from jewelry_api.core.database import get_db
from jewelry_api.core.errors import Forbidden, Unauthenticated
from jewelry_api.core.security import TokenConfig, TokenExpired, TokenInvalid, get_token_config, verify_token
from jewelry_api.core.uploads import (
    StoredFile,
    UploadCategory,
    UploadDescriptor,
    UploadStore,
    require_single_file,
)
from jewelry_api.schemas.auth import Principal
from jewelry_api.services.users import find_user_by_id

logger = logging.getLogger(__name__)

NOT_AUTHORIZED = "Not authorized to access this route"

security = HTTPBearer(auto_error=False)


def get_current_principal(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
    token_config: Annotated[TokenConfig, Depends(get_token_config)],
) -> Principal:
    """
    Dependency: require a valid `Authorization: Bearer <token>` header and return the
    principal re-read from the store. Raises Unauthenticated (401) for a missing or
    malformed header, an invalid or expired token, or a user that no longer exists.
    """
    if credentials is None or not credentials.credentials:
        raise Unauthenticated(NOT_AUTHORIZED)
    try:
        claims = verify_token(credentials.credentials, token_config)
    except TokenExpired:
        logger.debug("Rejected expired token")
        raise Unauthenticated(NOT_AUTHORIZED) from None
    except TokenInvalid as e:
        logger.debug("Rejected invalid token: %s", e)
        raise Unauthenticated(NOT_AUTHORIZED) from None

    principal = find_user_by_id(db, claims.principal_id)
    if principal is None:
        logger.debug("Token subject %s no longer exists", claims.principal_id)
        raise Unauthenticated(NOT_AUTHORIZED)
    return principal


CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]


class RequireRoles:
    """
    Dependency factory: allow only principals whose role is in allowed_roles.
    There is no role hierarchy; list every role a route accepts.
    """

    def __init__(self, allowed_roles: Iterable[str]) -> None:
        self.allowed_roles = frozenset(allowed_roles)
        if not self.allowed_roles:
            raise ValueError("RequireRoles needs at least one role")

    def __call__(self, principal: CurrentPrincipal) -> Principal:
        if principal.role not in self.allowed_roles:
            raise Forbidden(
                f"User role '{principal.role}' is not authorized to access this route"
            )
        return principal


require_admin = RequireRoles({"admin"})

AdminPrincipal = Annotated[Principal, Depends(require_admin)]


class SingleFileUpload:
    """
    Dependency factory: return the file sent under field_name in a multipart body, or
    None. Rejects requests carrying more than one file or a file under another field.
    Nothing is written to disk here; see save_upload.
    """

    def __init__(self, field_name: str) -> None:
        self.field_name = field_name

    async def __call__(self, request: Request) -> UploadFile | None:
        content_type = request.headers.get("content-type", "")
        if not content_type.lower().startswith("multipart/form-data"):
            return None
        form = await request.form()
        # Browsers send an empty part with no filename when no file was chosen.
        files = [
            (key, value)
            for key, value in form.multi_items()
            if isinstance(value, UploadFile) and value.filename
        ]
        return require_single_file(files, self.field_name)


def save_upload(
    store: UploadStore,
    upload: UploadFile,
    category: UploadCategory,
    field_name: str,
) -> StoredFile:
    """Validate and persist an upload in the given category directory."""
    descriptor = UploadDescriptor(
        field_name=field_name,
        original_filename=upload.filename or "",
        content_type=upload.content_type or "",
        size=upload.size,
    )
    return store.store(descriptor, upload.file, category)
