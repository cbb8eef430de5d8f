# ecovive/storage/blob_store.py
"""
Photo blob storage.

Photos are written under UPLOAD_DIR and served from UPLOAD_BASE_URL by the
static mount in main.py.
"""

import logging
import uuid
from pathlib import Path
from typing import NamedTuple, Optional

from ecovive.config import settings
from ecovive.services.errors import StorageError, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".heic"}


class PhotoUpload(NamedTuple):
    data: bytes
    content_type: str
    filename: str


class StoredBlob(NamedTuple):
    url: str
    size: int
    filename: str


class BlobStore:
    """Interface for photo storage backends."""

    def upload(self, data: bytes, content_type: str, filename: str) -> StoredBlob:
        raise NotImplementedError

    def delete(self, filename: str) -> bool:
        raise NotImplementedError


class LocalBlobStore(BlobStore):
    def __init__(self, root_dir, base_url: str, max_bytes: Optional[int] = None):
        self.root_dir = Path(root_dir)
        self.base_url = base_url.rstrip("/")
        self.max_bytes = max_bytes if max_bytes is not None else settings.MAX_UPLOAD_BYTES

    def _validate(self, data: bytes, content_type: str) -> None:
        if not data:
            raise ValidationError("Photo is empty")
        if not (content_type or "").lower().startswith("image/"):
            raise ValidationError(f"Unsupported photo content type: {content_type!r}")
        if len(data) > self.max_bytes:
            raise ValidationError(
                f"Photo too large: {len(data)} bytes (max {self.max_bytes})"
            )

    def upload(self, data: bytes, content_type: str, filename: str) -> StoredBlob:
        self._validate(data, content_type)

        extension = Path(filename or "").suffix.lower()
        if extension not in ALLOWED_EXTENSIONS:
            extension = ""
        stored_name = f"{uuid.uuid4().hex}{extension}"

        try:
            self.root_dir.mkdir(parents=True, exist_ok=True)
            (self.root_dir / stored_name).write_bytes(data)
        except OSError as exc:
            logger.warning("Photo upload failed for '%s': %s", filename, exc)
            raise StorageError(f"Failed to store photo: {exc}") from exc

        return StoredBlob(
            url=f"{self.base_url}/{stored_name}",
            size=len(data),
            filename=stored_name,
        )

    def delete(self, filename: str) -> bool:
        """Best-effort removal used for cleanup; never raises."""
        try:
            (self.root_dir / Path(filename).name).unlink()
            return True
        except OSError as exc:
            logger.warning("Photo cleanup failed for '%s': %s", filename, exc)
            return False


def get_blob_store() -> BlobStore:
    return LocalBlobStore(settings.UPLOAD_DIR, settings.UPLOAD_BASE_URL)
