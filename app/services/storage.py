"""Filesystem blob store for recipe images."""

import logging
import uuid
from pathlib import Path

from app.core.config import Settings
from app.core.errors import ValidationError

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_EXTENSIONS = {
    "png": ".png",
    "jpeg": ".jpg",
    "webp": ".webp",
}


def detect_image_type(content: bytes) -> str | None:
    """Identify png/jpeg/webp from magic bytes; None for anything else."""
    if content.startswith(b"\x89PNG\r\n\x1a\n"):
        return "png"
    if content.startswith(b"\xff\xd8\xff"):
        return "jpeg"
    if len(content) >= 12 and content[:4] == b"RIFF" and content[8:12] == b"WEBP":
        return "webp"
    return None


class ImageStore:
    """Stores images under UPLOAD_DIR with random names and maps them to public URLs."""

    def __init__(self, settings: Settings) -> None:
        self.root = Path(settings.UPLOAD_DIR)
        self.url_prefix = settings.UPLOAD_URL_PREFIX
        self.max_bytes = settings.MAX_IMAGE_BYTES

    def save(self, content: bytes) -> str:
        """Validate and write the image; return its public URL."""
        if not content:
            raise ValidationError("Uploaded file is empty.")
        if len(content) > self.max_bytes:
            raise ValidationError(
                f"Image must not exceed {self.max_bytes // 1024} KiB."
            )
        kind = detect_image_type(content)
        if kind is None:
            raise ValidationError("Image must be PNG, JPEG or WEBP.")
        self.root.mkdir(parents=True, exist_ok=True)
        filename = f"{uuid.uuid4().hex}{ALLOWED_IMAGE_EXTENSIONS[kind]}"
        (self.root / filename).write_bytes(content)
        logger.info("Image stored", extra={"image_file": filename, "size": len(content)})
        return f"{self.url_prefix}/{filename}"

    def delete(self, url: str | None) -> None:
        """Remove a previously stored image; URLs not produced by this store are ignored."""
        if not url or not url.startswith(self.url_prefix + "/"):
            return
        name = url[len(self.url_prefix) + 1:]
        if "/" in name or name.startswith("."):
            return
        path = self.root / name
        try:
            path.unlink()
        except FileNotFoundError:
            logger.warning("Image already missing", extra={"image_file": name})
