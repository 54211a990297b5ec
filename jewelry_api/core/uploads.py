"""
Image upload validation and storage.

Files are written under UPLOAD_DIR/<category>/ with a generated name. The
category comes from the route that accepts the upload, never from the request.
"""

import logging
import os
import time
import uuid
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import BinaryIO

from jewelry_api.core.config import get_settings
from jewelry_api.core.errors import PayloadTooLarge, UnsupportedMediaType, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_EXTENSIONS = frozenset({".jpeg", ".jpg", ".png", ".gif", ".webp"})
ALLOWED_IMAGE_CONTENT_TYPES = frozenset(
    {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"}
)
READ_CHUNK_BYTES = 64 * 1024


class UploadCategory(str, Enum):
    """Destination directory for a stored upload."""

    DESIGNS = "designs"
    PRODUCTS = "products"


@dataclass(frozen=True, slots=True)
class UploadDescriptor:
    """What the client declared about the file."""

    field_name: str
    original_filename: str
    content_type: str
    size: int | None


@dataclass(frozen=True, slots=True)
class StoredFile:
    filename: str
    path: Path
    category: UploadCategory

    @property
    def relative_path(self) -> str:
        return f"{self.category.value}/{self.filename}"


def _declared_content_type(raw: str | None) -> str:
    return (raw or "").split(";")[0].strip().lower()


class UploadStore:
    """Validates single-file uploads and persists them under category directories."""

    def __init__(self, root: str | Path, max_file_size: int) -> None:
        self.root = Path(root).resolve()
        self.max_file_size = max_file_size

    def category_dir(self, category: UploadCategory) -> Path:
        return self.root / UploadCategory(category).value

    def ensure_dirs(self) -> None:
        """Create the root and every category directory. Called once at startup."""
        for category in UploadCategory:
            self.category_dir(category).mkdir(parents=True, exist_ok=True)

    def validate(self, descriptor: UploadDescriptor) -> str:
        """Check declared size, extension and content type; return the normalized extension."""
        if descriptor.size is not None and descriptor.size > self.max_file_size:
            raise self._too_large()

        ext = os.path.splitext(descriptor.original_filename or "")[1].lower()
        content_type = _declared_content_type(descriptor.content_type)
        # Both signals must pass.
        if ext not in ALLOWED_IMAGE_EXTENSIONS or content_type not in ALLOWED_IMAGE_CONTENT_TYPES:
            raise UnsupportedMediaType(
                "Only image files are allowed (jpeg, jpg, png, gif, webp)"
            )
        return ext

    def generate_filename(self, field_name: str, ext: str) -> str:
        millis = int(time.time() * 1000)
        return f"{field_name}-{millis}-{uuid.uuid4().hex}{ext}"

    def store(
        self,
        descriptor: UploadDescriptor,
        stream: BinaryIO,
        category: UploadCategory,
    ) -> StoredFile:
        """Validate the descriptor, then copy stream to a new file in the category directory."""
        ext = self.validate(descriptor)
        category = UploadCategory(category)
        filename = self.generate_filename(descriptor.field_name, ext)
        path = self.category_dir(category) / filename

        written = 0
        # "xb" fails instead of overwriting if the name somehow exists.
        with open(path, "xb") as out:
            try:
                while chunk := stream.read(READ_CHUNK_BYTES):
                    written += len(chunk)
                    if written > self.max_file_size:
                        raise self._too_large()
                    out.write(chunk)
            except BaseException:
                out.close()
                path.unlink(missing_ok=True)
                raise

        logger.info(
            "Stored upload: category=%s filename=%s bytes=%s",
            category.value,
            filename,
            written,
        )
        return StoredFile(filename=filename, path=path, category=category)

    def delete(self, category: UploadCategory, filename: str | None) -> bool:
        """Best-effort removal of a stored file. Missing files are not an error."""
        if not filename:
            return False
        directory = self.category_dir(category)
        path = (directory / filename).resolve()
        if path.parent != directory:
            logger.warning("Refusing to delete path outside upload dir: %s", filename)
            return False
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.warning("Could not delete upload %s: %s", path, e)
            return False
        logger.info("Deleted upload: category=%s filename=%s", category.value, filename)
        return True

    def _too_large(self) -> PayloadTooLarge:
        mib = self.max_file_size / (1024 * 1024)
        return PayloadTooLarge(f"File size too large. Maximum size is {mib:g}MB")


def require_single_file(files: list[tuple[str, object]], field_name: str) -> object | None:
    """
    Given (form field, file) pairs from a multipart body, return the file sent under
    field_name, or None. More than one file, or a file under any other field, is rejected.
    """
    if not files:
        return None
    if len(files) > 1:
        raise ValidationError("Only one file may be uploaded per request", code="too_many_files")
    name, upload = files[0]
    if name != field_name:
        raise ValidationError(f"Unexpected file field '{name}'", code="unexpected_file")
    return upload


@lru_cache
def get_upload_store() -> UploadStore:
    """Dependency returning the process-wide store configured from settings."""
    settings = get_settings()
    return UploadStore(settings.UPLOAD_DIR, settings.MAX_FILE_SIZE)
