# salary_tracker/utils/uploads.py
import logging
import uuid
from pathlib import Path
from typing import Optional

from fastapi import HTTPException, UploadFile

from salary_tracker import config

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}
URL_PREFIX = "/uploads/"
_CHUNK = 64 * 1024


def upload_dir() -> Path:
    path = Path(config.UPLOAD_DIR)
    path.mkdir(parents=True, exist_ok=True)
    return path


def save_profile_picture(file: UploadFile) -> str:
    """Store an uploaded image and return its public path (``/uploads/<name>``)."""
    ext = Path(file.filename or "").suffix.lower()
    if ext not in ALLOWED_IMAGE_EXTENSIONS:
        raise HTTPException(status_code=400, detail="Only image files are allowed")
    if file.content_type and not file.content_type.startswith("image/"):
        raise HTTPException(status_code=400, detail="Only image files are allowed")

    safe_name = f"profile-{uuid.uuid4().hex}{ext}"
    dest = upload_dir() / safe_name

    written = 0
    try:
        with dest.open("wb") as out_f:
            while True:
                chunk = file.file.read(_CHUNK)
                if not chunk:
                    break
                written += len(chunk)
                if written > config.MAX_UPLOAD_SIZE:
                    raise HTTPException(status_code=400, detail="File too large")
                out_f.write(chunk)
    except HTTPException:
        dest.unlink(missing_ok=True)
        raise
    finally:
        file.file.close()

    logger.info("Saved profile picture %s (%d bytes)", safe_name, written)
    return URL_PREFIX + safe_name


def delete_upload(public_path: Optional[str]) -> None:
    """Remove a file previously returned by save_profile_picture; unknown paths are ignored."""
    if not public_path or not public_path.startswith(URL_PREFIX):
        return
    name = Path(public_path[len(URL_PREFIX):]).name
    target = Path(config.UPLOAD_DIR) / name
    try:
        target.unlink(missing_ok=True)
    except OSError:
        logger.warning("Could not delete upload %s", target, exc_info=True)
