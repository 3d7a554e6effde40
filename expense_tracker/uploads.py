from __future__ import annotations

import logging
import re
import time
from pathlib import Path

from expense_tracker.errors import ValidationError

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/png", "image/jpg")

_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def save_image(upload_dir: str, filename: str | None, content_type: str | None, data: bytes) -> str:
    """Store an uploaded profile image and return its stored file name.

    Files are named ``<epoch millis>-<original basename>``, with characters
    outside ``[A-Za-z0-9._-]`` replaced by ``_``.
    """
    if content_type not in ALLOWED_IMAGE_TYPES:
        raise ValidationError("Invalid file type. Only JPEG, PNG, and JPG are allowed.")
    basename = _UNSAFE_NAME_CHARS.sub("_", Path(filename or "").name)
    if not basename:
        raise ValidationError("No file uploaded")

    target_dir = Path(upload_dir)
    target_dir.mkdir(parents=True, exist_ok=True)
    stored = f"{int(time.time() * 1000)}-{basename}"
    (target_dir / stored).write_bytes(data)
    logger.info("Stored upload %s (%d bytes)", stored, len(data))
    return stored
