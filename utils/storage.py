import os
from typing import Optional
from urllib.parse import quote

from botocore.exceptions import BotoCoreError, ClientError

from core.config import s3, R2_BUCKET, R2_PUBLIC_BASE_URL, STATIC_DIR, logger

# Allowed media content types for portfolio uploads
IMAGE_TYPES = ("image/jpeg", "image/png", "image/webp", "image/gif", "image/avif")
VIDEO_TYPES = ("video/mp4", "video/webm", "video/ogg")


class StorageError(Exception):
    """Object storage rejected or failed an upload."""


def is_allowed_media_type(content_type: Optional[str]) -> bool:
    ct = (content_type or "").split(";")[0].strip().lower()
    return ct in IMAGE_TYPES or ct in VIDEO_TYPES


def get_public_url(key: str) -> str:
    k = (key or "").lstrip("/")
    if s3 and R2_BUCKET and R2_PUBLIC_BASE_URL:
        return f"{R2_PUBLIC_BASE_URL}/{quote(k, safe='/')}"
    return f"/static/{k}"


def upload_bytes(key: str, data: bytes, content_type: str = "image/jpeg") -> str:
    """Store media under `key` and return the URL the site should reference."""
    if not s3 or not R2_BUCKET:
        local_path = os.path.join(STATIC_DIR, key)
        os.makedirs(os.path.dirname(local_path), exist_ok=True)
        with open(local_path, "wb") as f:
            f.write(data)
        logger.info(f"Saved locally: {local_path}")
        return get_public_url(key)

    bucket = s3.Bucket(R2_BUCKET)
    try:
        bucket.put_object(Key=key, Body=data, ContentType=content_type, CacheControl="public, max-age=604800")
    except (BotoCoreError, ClientError) as ex:
        logger.warning(f"upload failed for {key}: {ex}")
        raise StorageError(str(ex)) from ex
    return get_public_url(key)


def delete_key(key: str) -> bool:
    k = (key or "").lstrip("/")
    if not k:
        return False
    if not s3 or not R2_BUCKET:
        path = os.path.join(STATIC_DIR, k)
        if os.path.isfile(path):
            os.remove(path)
            return True
        return False
    try:
        s3.Object(R2_BUCKET, k).delete()
        return True
    except (BotoCoreError, ClientError) as ex:
        logger.warning(f"delete failed for {k}: {ex}")
        return False


def key_from_url(url: Optional[str]) -> Optional[str]:
    """Inverse of get_public_url for media this site stored itself; None for external URLs."""
    u = (url or "").strip()
    if u.startswith("/static/"):
        return u[len("/static/"):]
    if R2_PUBLIC_BASE_URL and u.startswith(R2_PUBLIC_BASE_URL + "/"):
        return u[len(R2_PUBLIC_BASE_URL) + 1:]
    return None
