"""
Upload Service - stores student photos and badge images on local disk.

Only jpeg/jpg/png/gif images up to 5 MB are accepted; both the file
extension and the declared content type must name an image type.
Files are written under UPLOAD_DIR/<kind>/ with a generated name
(<epoch ms>-<9 random digits><ext>) and served back from /uploads.
"""

import os
import re
import secrets
import time
from pathlib import Path
from typing import Optional

from student_hub.errors import ValidationError
from student_hub.logging_config import get_logger, log_with_context

logger = get_logger("uploads")

UPLOAD_DIR = Path(os.getenv("UPLOAD_DIR", "./public/uploads"))
BASE_URL = os.getenv("BASE_URL", "").rstrip("/")
MAX_UPLOAD_BYTES = 5 * 1024 * 1024
ALLOWED_TYPES = re.compile(r"jpeg|jpg|png|gif")

STUDENT_PHOTOS = "students"
BADGE_IMAGES = "badges"


def _is_image(filename: str, content_type: str) -> bool:
    extension = os.path.splitext(filename or "")[1].lower()
    return bool(ALLOWED_TYPES.search(extension)) and bool(ALLOWED_TYPES.search(content_type or ""))


def _generate_filename(original_name: str) -> str:
    extension = os.path.splitext(original_name)[1].lower()
    return "{}-{}{}".format(int(time.time() * 1000), secrets.randbelow(10 ** 9), extension)


def public_url(kind: str, filename: str) -> str:
    """URL stored on the record; student photos carry the BASE_URL prefix."""
    if kind == STUDENT_PHOTOS:
        return "{}/uploads/{}/{}".format(BASE_URL, kind, filename)
    return "/uploads/{}/{}".format(kind, filename)


def save_image(kind: str, upload) -> str:
    """
    Validate and store an uploaded image, returning its public URL.

    upload is any object exposing filename, content_type and a binary
    file attribute (FastAPI's UploadFile does).
    """
    if not _is_image(upload.filename, upload.content_type):
        log_with_context(logger, "WARNING", "Rejected non-image upload",
                         extra_data={"filename": upload.filename, "content_type": upload.content_type})
        raise ValidationError("Only image files are allowed")

    content = upload.file.read(MAX_UPLOAD_BYTES + 1)
    if len(content) > MAX_UPLOAD_BYTES:
        raise ValidationError("File too large: images are limited to {} MB".format(MAX_UPLOAD_BYTES // (1024 * 1024)))

    target_dir = UPLOAD_DIR / kind
    target_dir.mkdir(parents=True, exist_ok=True)
    filename = _generate_filename(upload.filename)
    (target_dir / filename).write_bytes(content)

    log_with_context(logger, "INFO", "Stored upload {}".format(filename),
                     extra_data={"kind": kind, "bytes": len(content)})
    return public_url(kind, filename)


def remove_file(url: Optional[str]) -> None:
    """Delete the file behind a stored URL; missing files are ignored."""
    if not url or "/uploads/" not in url:
        return
    relative = url.split("/uploads/", 1)[1]
    root = UPLOAD_DIR.resolve()
    path = (root / relative).resolve()
    if root not in path.parents:
        return
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        log_with_context(logger, "WARNING", "Could not remove upload {}".format(relative),
                         extra_data={"error": str(e)})
