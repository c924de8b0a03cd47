"""
Source classification.

Decides whether a RecipeSource is a recipe page, a social-media video, typed
text, a photo, or a video or audio file, and validates raw source payloads.
"""
from __future__ import annotations

import logging
import re
from pathlib import PurePosixPath
from typing import Any, NamedTuple
from urllib.parse import urlparse

import voluptuous as vol

from ..const import DATA_FILE, DATA_TEXT, DATA_URL
from ..models.recipe import SourceKind
from ..models.source import FileRef, RecipeSource

_LOGGER = logging.getLogger(__name__)

FILE_SCHEMA = vol.Schema(
    {
        vol.Optional("data"): vol.Any(None, bytes),
        vol.Optional("uri"): vol.Any(None, str),
        vol.Optional("mime_type"): vol.Any(None, vol.All(str, vol.Lower)),
        vol.Optional("name"): vol.Any(None, str),
    }
)

SOURCE_SCHEMA = vol.Schema(
    {
        vol.Optional(DATA_URL): vol.Any(None, vol.All(str, vol.Strip, vol.Url())),
        vol.Optional(DATA_TEXT): vol.Any(None, str),
        vol.Optional(DATA_FILE): vol.Any(None, FILE_SCHEMA),
    }
)

# Hosts whose links point at a video rather than a recipe page
VIDEO_PLATFORM_PATTERNS = {
    "tiktok": [
        re.compile(r'(?:^|\.)tiktok\.com$', re.IGNORECASE),
    ],
    "instagram": [
        re.compile(r'instagram\.com/(?:reel|reels|tv)/', re.IGNORECASE),
    ],
    "youtube": [
        re.compile(r'youtube\.com/(?:watch\?v=|shorts/)', re.IGNORECASE),
        re.compile(r'(?:^|//)youtu\.be/', re.IGNORECASE),
    ],
    "facebook": [
        re.compile(r'facebook\.com/(?:.*/videos/|watch|reel/)', re.IGNORECASE),
        re.compile(r'(?:^|//)fb\.watch/', re.IGNORECASE),
    ],
}

RECIPE_SITE_PATTERN = re.compile(
    r'allrecipes\.com|foodnetwork\.com|epicurious\.com|bonappetit\.com|seriouseats\.com|'
    r'bbcgoodfood\.com|chefkoch\.de|recipe|rezept|opskrift',
    re.IGNORECASE
)

IMAGE_EXTENSIONS = {'jpg', 'jpeg', 'png', 'webp', 'heic', 'heif', 'gif', 'bmp'}
VIDEO_EXTENSIONS = {'mp4', 'mov', 'avi', 'webm', 'm4v', 'mkv', '3gp'}
# Audio is transcribed like video
AUDIO_EXTENSIONS = {'mp3', 'm4a', 'wav', 'aac', 'ogg', 'oga', 'flac', 'opus'}

_EXTENSION_MIME_TYPES = {
    'jpg': 'image/jpeg',
    'jpeg': 'image/jpeg',
    'png': 'image/png',
    'webp': 'image/webp',
    'heic': 'image/heic',
    'heif': 'image/heif',
    'gif': 'image/gif',
    'bmp': 'image/bmp',
    'mp4': 'video/mp4',
    'mov': 'video/quicktime',
    'avi': 'video/x-msvideo',
    'webm': 'video/webm',
    'm4v': 'video/x-m4v',
    'mkv': 'video/x-matroska',
    '3gp': 'video/3gpp',
    'mp3': 'audio/mpeg',
    'm4a': 'audio/mp4',
    'wav': 'audio/wav',
    'aac': 'audio/aac',
    'ogg': 'audio/ogg',
    'oga': 'audio/ogg',
    'flac': 'audio/flac',
    'opus': 'audio/opus',
}

_SINGLE_URL_RE = re.compile(r'^https?://\S+$', re.IGNORECASE)


class Detection(NamedTuple):
    """Outcome of classifying a source."""

    kind: SourceKind
    confidence: float
    platform: str | None = None


def coerce_source(source: RecipeSource | dict[str, Any]) -> RecipeSource:
    """Validate a raw source payload into a RecipeSource.

    Raises:
        vol.Invalid: If the payload does not match SOURCE_SCHEMA
    """
    if isinstance(source, RecipeSource):
        return source

    data = SOURCE_SCHEMA(dict(source))
    file_data = data.get(DATA_FILE)
    return RecipeSource(
        url=data.get(DATA_URL),
        text=data.get(DATA_TEXT),
        file_ref=FileRef(**file_data) if file_data else None,
    )


def detect_video_platform(url: str) -> str | None:
    """Name of the social video platform a URL belongs to, if any."""
    parsed = urlparse(url if '://' in url else f'https://{url}')
    host = (parsed.hostname or '').lower()
    target = f"{host}{parsed.path}{'?' + parsed.query if parsed.query else ''}"

    for platform, patterns in VIDEO_PLATFORM_PATTERNS.items():
        for pattern in patterns:
            if pattern.search(host) or pattern.search(target) or pattern.search(url):
                return platform
    return None


def _file_extension(file_ref: FileRef) -> str:
    for candidate in (file_ref.name, file_ref.uri):
        if candidate:
            suffix = PurePosixPath(urlparse(candidate).path or candidate).suffix
            if suffix:
                return suffix.lstrip('.').lower()
    return ''


def guess_mime_type(file_ref: FileRef) -> str:
    """Declared mime type, or one derived from the file extension."""
    if file_ref.mime_type:
        return file_ref.mime_type.lower()
    return _EXTENSION_MIME_TYPES.get(_file_extension(file_ref), 'application/octet-stream')


def classify_file(file_ref: FileRef) -> Detection:
    """Classify an uploaded file by mime type first, then by extension."""
    mime_type = (file_ref.mime_type or '').lower()
    if mime_type.startswith('image/'):
        return Detection(SourceKind.IMAGE, 0.95)
    if mime_type.startswith(('video/', 'audio/')):
        return Detection(SourceKind.VIDEO, 0.95)

    extension = _file_extension(file_ref)
    if extension in IMAGE_EXTENSIONS:
        return Detection(SourceKind.IMAGE, 0.85)
    if extension in VIDEO_EXTENSIONS or extension in AUDIO_EXTENSIONS:
        return Detection(SourceKind.VIDEO, 0.85)

    _LOGGER.debug("Unknown file type for %s, assuming image", file_ref.display_name)
    return Detection(SourceKind.IMAGE, 0.3)


def classify_url(url: str) -> Detection:
    platform = detect_video_platform(url)
    if platform:
        return Detection(SourceKind.VIDEO, 0.95, platform)
    if RECIPE_SITE_PATTERN.search(url):
        return Detection(SourceKind.URL, 0.95)
    return Detection(SourceKind.URL, 0.85)


def classify_source(source: RecipeSource) -> Detection | None:
    """Classify a source. A URL wins over text, text wins over a file.

    Text that is nothing but a single link is classified as that link.

    Returns:
        Detection, or None when the source carries no usable input
    """
    if source.url and source.url.strip():
        return classify_url(source.url.strip())

    text = (source.text or '').strip()
    if text:
        if _SINGLE_URL_RE.match(text):
            return classify_url(text)
        return Detection(SourceKind.TEXT, 0.9)

    if source.file_ref and (source.file_ref.data or source.file_ref.uri):
        return classify_file(source.file_ref)

    return None
