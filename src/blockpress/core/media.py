"""Image and video URL helpers: Cloudinary asset URLs, video host detection, embed URLs"""

import re


DEFAULT_CLOUD_NAME = "dsq2xg1iw"

_PUBLIC_ID_RE = re.compile(r'data-public-id="([^"]+)"')
_VERSION_RE = re.compile(r'data-version="([^"]+)"')

# watch?v=, &v=, youtu.be/, embed/, v/, u/x/, shorts/, live/
_YOUTUBE_RE = re.compile(r'^.*(youtu.be/|v/|u/\w/|embed/|watch\?v=|&v=|shorts/|live/)([^#&?]*).*')
_VIMEO_RE = re.compile(r'vimeo\.com/([0-9]+)')
_VIDEO_FILE_RE = re.compile(r'\.(mp4|webm|ogg)$', re.IGNORECASE)


def cloudinary_url(html: str, cloud_name: str = DEFAULT_CLOUD_NAME) -> str | None:
    """Build an optimized Cloudinary URL from data-public-id/version/format attributes, else None."""
    public_id = _PUBLIC_ID_RE.search(html)
    if not public_id:
        return None
    version = _VERSION_RE.search(html)
    version_part = f"v{version.group(1)}/" if version else ''
    return f"https://res.cloudinary.com/{cloud_name}/images/f_webp,q_auto/{version_part}{public_id.group(1)}"


def video_type(url: str) -> str:
    """Classify a video URL by host marker: youtube, vimeo, or custom."""
    if 'youtube.com' in url or 'youtu.be' in url:
        return 'youtube'
    if 'vimeo.com' in url:
        return 'vimeo'
    return 'custom'


def youtube_id(url: str) -> str | None:
    m = _YOUTUBE_RE.match(url)
    return m.group(2) if m and len(m.group(2)) == 11 else None


def vimeo_id(url: str) -> str | None:
    m = _VIMEO_RE.search(url)
    return m.group(1) if m else None


def embed_url(url: str, kind: str) -> str | None:
    """Playable embed URL for a watch/short URL, or None when no video id can be extracted."""
    if kind == 'youtube':
        vid = youtube_id(url)
        return f"https://www.youtube.com/embed/{vid}" if vid else None
    if kind == 'vimeo':
        vid = vimeo_id(url)
        return f"https://player.vimeo.com/video/{vid}" if vid else None
    if kind == 'custom':
        return url or None
    return None


def is_video_file(url: str) -> bool:
    return bool(_VIDEO_FILE_RE.search(url))
