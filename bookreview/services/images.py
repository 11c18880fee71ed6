"""
Image Storage Service

Stores uploaded book cover images and returns the URL they are served
from. The local implementation writes into settings.media_root; the
application mounts that directory at settings.media_url.

The storage object is built once and passed to create_app(), so tests can
point it at a temporary directory.
"""

import logging
import secrets
from pathlib import Path, PurePath

from bookreview.config import Settings
from bookreview.exceptions import ValidationFailed

logger = logging.getLogger(__name__)

# Extensions used when the uploaded filename carries none
CONTENT_TYPE_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}


class LocalImageStorage:
    """
    Writes images under a directory on local disk.

    Args:
        media_root: Directory the files are written to (created if missing)
        media_url: Public URL prefix for that directory
        max_bytes: Largest accepted upload

    Example:
        storage = LocalImageStorage("media", "/media", 5 * 1024 * 1024)
        url = storage.save(data, filename="cover.png", content_type="image/png")
        # -> "/media/3f1c...e9.png"
    """

    def __init__(self, media_root: str | Path, media_url: str, max_bytes: int) -> None:
        self.media_root = Path(media_root)
        self.media_url = media_url.rstrip("/")
        self.max_bytes = max_bytes

    @classmethod
    def from_settings(cls, settings: Settings) -> "LocalImageStorage":
        return cls(settings.media_root, settings.media_url, settings.max_image_bytes)

    def ensure_root(self) -> Path:
        """Create the media directory if needed and return it."""
        self.media_root.mkdir(parents=True, exist_ok=True)
        return self.media_root

    def save(self, data: bytes, filename: str | None, content_type: str | None) -> str:
        """
        Store one image and return its public URL.

        Raises:
            ValidationFailed: Empty upload, non-image content type, or a
                file larger than max_bytes
        """
        if not data:
            raise ValidationFailed("Book image is required")

        if not content_type or not content_type.startswith("image/"):
            raise ValidationFailed("Uploaded file must be an image")

        if len(data) > self.max_bytes:
            raise ValidationFailed(
                f"Image is too large (max {self.max_bytes // 1024} KB)"
            )

        suffix = PurePath(filename or "").suffix.lower()
        if not suffix:
            suffix = CONTENT_TYPE_EXTENSIONS.get(content_type, "")

        stored_name = f"{secrets.token_hex(16)}{suffix}"
        path = self.ensure_root() / stored_name
        path.write_bytes(data)

        logger.info(f"Stored image {stored_name} ({len(data)} bytes)")

        return f"{self.media_url}/{stored_name}"
