from pathlib import Path
import logging
import os
import uuid
import shutil
from typing import List, Optional
from fastapi import UploadFile

from app.config import get_settings

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parents[2]
MEDIA_ROOT = Path(get_settings().MEDIA_ROOT or BASE_DIR / "media")

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp", ".avif"}


def _ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def save_upload_file(upload_file: UploadFile, subdir: str = "products") -> str:
    """Save a single image upload to media/subdir and return its URL path (/media/subdir/filename)."""
    if not upload_file or not upload_file.filename:
        raise ValueError("No image uploaded")
    ext = os.path.splitext(upload_file.filename)[1].lower()
    if ext not in IMAGE_EXTENSIONS:
        raise ValueError(f"Unsupported image type: {ext or 'none'}")
    filename = f"{uuid.uuid4().hex}{ext}"
    dst_dir = MEDIA_ROOT / subdir
    _ensure_dir(dst_dir)
    file_path = dst_dir / filename
    with file_path.open("wb") as buffer:
        shutil.copyfileobj(upload_file.file, buffer)
    logger.info("Stored upload %s as %s", upload_file.filename, file_path)
    return f"/media/{subdir}/{filename}"


def save_multiple_upload_files(files: List[UploadFile], subdir: str = "products") -> List[str]:
    """Save multiple UploadFiles and return a list of URL paths."""
    return [save_upload_file(f, subdir=subdir) for f in files or [] if f and f.filename]


def delete_media_file(rel_url: Optional[str]) -> bool:
    """Delete a single media file by its stored relative URL (e.g. /media/banners/<file>). Returns True if removed.

    Only operates inside MEDIA_ROOT and ignores anything that is not a /media/ URL.
    """
    if not rel_url or not rel_url.startswith("/media/"):
        return False
    parts = rel_url.strip("/").split("/")  # [media, subdir, filename]
    if len(parts) < 3 or ".." in parts:
        return False
    target_path = MEDIA_ROOT.joinpath(*parts[1:])
    try:
        if target_path.is_file():
            target_path.unlink()
            return True
    except OSError as e:
        logger.warning("Could not delete media file %s: %s", target_path, e)
    return False


def delete_media_files(urls: Optional[List[str]]) -> int:
    """Delete multiple media files; returns count of successfully removed files."""
    return sum(1 for u in urls or [] if delete_media_file(u))
