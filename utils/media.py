"""
Media classification for portfolio entries.
Decides how a stored URL is rendered: embedded YouTube player, direct video
file, or image. Pure string inspection, no network calls.
"""
import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlsplit

MEDIA_YOUTUBE = "youtube"
MEDIA_VIDEO = "video"
MEDIA_IMAGE = "image"

VIDEO_EXTENSIONS = (".mp4", ".webm", ".ogg")

_YOUTUBE_PATTERNS = (
    # Standard watch URLs
    re.compile(r"(?:youtube\.com/watch\?v=)([a-zA-Z0-9_-]{11})"),
    # Shortened URLs
    re.compile(r"(?:youtu\.be/)([a-zA-Z0-9_-]{11})"),
    # Embed URLs
    re.compile(r"(?:youtube\.com/embed/)([a-zA-Z0-9_-]{11})"),
    # Shorts
    re.compile(r"(?:youtube\.com/shorts/)([a-zA-Z0-9_-]{11})"),
)

_THUMB_QUALITY = {
    "default": "default",
    "medium": "mqdefault",
    "high": "hqdefault",
    "standard": "sddefault",
    "maxres": "maxresdefault",
}


@dataclass(frozen=True)
class MediaInfo:
    kind: str
    url: str
    embed_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    video_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "url": self.url,
            "embedUrl": self.embed_url,
            "thumbnailUrl": self.thumbnail_url,
            "videoId": self.video_id,
        }


def extract_youtube_id(url: Optional[str]) -> Optional[str]:
    if not url or not isinstance(url, str):
        return None
    for pattern in _YOUTUBE_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


def is_youtube_url(url: Optional[str]) -> bool:
    return extract_youtube_id(url) is not None


def youtube_embed_url(url: Optional[str]) -> Optional[str]:
    video_id = extract_youtube_id(url)
    if not video_id:
        return None
    return f"https://www.youtube.com/embed/{video_id}?autoplay=0&rel=0&modestbranding=1"


def youtube_thumbnail_url(url: Optional[str], quality: str = "high") -> Optional[str]:
    video_id = extract_youtube_id(url)
    if not video_id:
        return None
    suffix = _THUMB_QUALITY.get(quality, _THUMB_QUALITY["high"])
    return f"https://img.youtube.com/vi/{video_id}/{suffix}.jpg"


def is_video_file(url: Optional[str]) -> bool:
    """True when the URL path ends in a browser-playable video extension."""
    if not url or not isinstance(url, str):
        return False
    try:
        path = urlsplit(url.strip()).path
    except ValueError:
        return False
    return path.lower().endswith(VIDEO_EXTENSIONS)


def media_type(url: Optional[str]) -> str:
    if is_youtube_url(url):
        return MEDIA_YOUTUBE
    if is_video_file(url):
        return MEDIA_VIDEO
    return MEDIA_IMAGE


def classify_media(url: Optional[str]) -> MediaInfo:
    """Classify a stored media URL. Anything unrecognised falls back to an image."""
    raw = url if isinstance(url, str) else ""
    video_id = extract_youtube_id(raw)
    if video_id:
        return MediaInfo(
            kind=MEDIA_YOUTUBE,
            url=raw,
            embed_url=youtube_embed_url(raw),
            thumbnail_url=youtube_thumbnail_url(raw),
            video_id=video_id,
        )
    if is_video_file(raw):
        return MediaInfo(kind=MEDIA_VIDEO, url=raw)
    return MediaInfo(kind=MEDIA_IMAGE, url=raw)
