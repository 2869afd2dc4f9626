"""Kind-specific extraction that turns a protected construct back into a ContentBlock"""

import re
from typing import Callable

from blockpress.core.media import DEFAULT_CLOUD_NAME, cloudinary_url, video_type
from blockpress.core.models import (
    AccordionItem, AccordionMeta, BlockType, ContentBlock, GalleryImage,
    GalleryMeta, ImageMeta, ProtectedBlock, VideoMeta,
)
from blockpress.core.text import clean_for_label
from blockpress.core.utils.logging import get_logger


logger = get_logger(__name__)

IFRAME_SRC_RE = re.compile(r'<iframe[^>]*src="([^"]+)"[^>]*>', re.IGNORECASE)
ANCHOR_HREF_RE = re.compile(r'<a[^>]*href="([^"]+)"[^>]*>', re.IGNORECASE)
VIDEO_SRC_RE = re.compile(r'<(?:video|source)[^>]*src="([^"]+)"[^>]*>', re.IGNORECASE)
BARE_URL_RE = re.compile(r'(https?://[^\s<"]+)')
# either quote style, optional spaces around '='
IMG_SRC_RE = re.compile(r'<img\b[^>]*?\ssrc\s*=\s*(["\'])(?P<url>[^"\']+)\1', re.IGNORECASE)
FIGCAPTION_RE = re.compile(r'<figcaption[^>]*>([\s\S]*?)</figcaption>', re.IGNORECASE)
ALT_RE = re.compile(r'\balt\s*=\s*(?:"(?P<dq>[^"]*)"|\'(?P<sq>[^\']*)\')', re.IGNORECASE)
TAG_RE = re.compile(r'<[^>]+>')

ACCORDION_ITEM_RE = re.compile(
    r'<div.*?class="wp-block-accordion-item.*?<button.*?class="wp-block-accordion-heading__toggle'
    r'.*?<span.*?>(.*?)</span>.*?<div.*?class="wp-block-accordion-panel.*?>(.*?)</div>',
    re.DOTALL,
)
ACCORDION_TOGGLE_RE = re.compile(r'class="wp-block-accordion-heading__toggle"[^>]*>[\s\S]*?<span[^>]*>(.*?)</span>')
ACCORDION_PANEL_RE = re.compile(r'class="wp-block-accordion-panel"[^>]*>([\s\S]*?)</div>\s*</div>')

GALLERY_OUTER_OPEN_RE = re.compile(r'^<(figure|div)[^>]*>', re.IGNORECASE)
GALLERY_OUTER_CLOSE_RE = re.compile(r'</(figure|div)>$', re.IGNORECASE)
GALLERY_ITEM_RE = re.compile(r'<(figure|div|li)\b[^>]*>([\s\S]*?)</\1>', re.IGNORECASE)


def image_fields(html: str, cloud_name: str = DEFAULT_CLOUD_NAME) -> tuple[str | None, str | None, str | None]:
    """Return (url, caption, alt) from image markup; structured asset URL wins over img src."""
    img = IMG_SRC_RE.search(html)
    url = cloudinary_url(html, cloud_name) or (img.group('url') if img else None)
    caption = FIGCAPTION_RE.search(html)
    alt = ALT_RE.search(html)
    if alt:
        alt_text = alt.group('dq') if alt.group('dq') is not None else alt.group('sq')
    else:
        alt_text = None
    return (
        url,
        TAG_RE.sub('', caption.group(1)) if caption else None,
        alt_text,
    )


def resolve_video(pb: ProtectedBlock, cloud_name: str = DEFAULT_CLOUD_NAME) -> ContentBlock | None:
    """iframe or video src, then anchor href, then a bare URL in the embed wrapper; no URL means no block."""
    found = (IFRAME_SRC_RE.search(pb.content) or VIDEO_SRC_RE.search(pb.content) or ANCHOR_HREF_RE.search(pb.content)
             or BARE_URL_RE.search(TAG_RE.sub(' ', pb.content)))
    if not found:
        logger.debug("video_without_url", token=pb.token)
        return None
    url = found.group(1)
    return ContentBlock(id=pb.token, type=BlockType.video, content=url,
                        metadata=VideoMeta(video_type=video_type(url)))


def resolve_image(pb: ProtectedBlock, cloud_name: str = DEFAULT_CLOUD_NAME) -> ContentBlock | None:
    url, caption, alt = image_fields(pb.content, cloud_name)
    if not url:
        logger.debug("image_without_url", token=pb.token)
        return None
    return ContentBlock(id=pb.token, type=BlockType.image, content=url,
                        metadata=ImageMeta(caption=caption, alt=alt))


def accordion_items(html: str) -> list[AccordionItem]:
    """Question/answer pairs via the structural regex, else by zipping toggles and panels.

    The fallback pairs toggles and panels by index; a count mismatch is logged, not repaired.
    """
    items = [
        AccordionItem(question=clean_for_label(q), answer=clean_for_label(a))
        for q, a in ACCORDION_ITEM_RE.findall(html)
    ]
    if items:
        return items
    toggles = ACCORDION_TOGGLE_RE.findall(html)
    panels = ACCORDION_PANEL_RE.findall(html)
    if toggles and len(toggles) != len(panels):
        logger.warning("accordion_pair_mismatch", toggles=len(toggles), panels=len(panels))
    return [
        AccordionItem(
            question=clean_for_label(t),
            answer=clean_for_label(panels[i] if i < len(panels) else ''),
        )
        for i, t in enumerate(toggles)
    ]


def resolve_accordion(pb: ProtectedBlock, cloud_name: str = DEFAULT_CLOUD_NAME) -> ContentBlock:
    return ContentBlock(id=pb.token, type=BlockType.accordion, content='',
                        metadata=AccordionMeta(items=accordion_items(pb.content)))


def gallery_images(html: str, cloud_name: str = DEFAULT_CLOUD_NAME) -> list[GalleryImage]:
    """Images from the gallery's immediate child containers, or a flat img scan when there are none."""
    content = html.strip()
    inner = GALLERY_OUTER_CLOSE_RE.sub('', GALLERY_OUTER_OPEN_RE.sub('', content, count=1), count=1)
    children = [m.group(0) for m in GALLERY_ITEM_RE.finditer(inner)]
    if not children:
        return [GalleryImage(url=m.group('url')) for m in IMG_SRC_RE.finditer(content)]

    images = []
    for child in children:
        url, caption, alt = image_fields(child, cloud_name)
        if url:
            images.append(GalleryImage(url=url, caption=caption, alt=alt))
    return images


def resolve_gallery(pb: ProtectedBlock, cloud_name: str = DEFAULT_CLOUD_NAME) -> ContentBlock:
    return ContentBlock(
        id=pb.token, type=BlockType.gallery, content='',
        metadata=GalleryMeta(images=gallery_images(pb.content, cloud_name), gallery_style='carousel'),
    )


RESOLVERS: dict[str, Callable[..., ContentBlock | None]] = {
    'video':     resolve_video,
    'image':     resolve_image,
    'accordion': resolve_accordion,
    'gallery':   resolve_gallery,
}


def resolve(pb: ProtectedBlock, cloud_name: str = DEFAULT_CLOUD_NAME) -> ContentBlock | None:
    """Dispatch a protected block to its kind-specific extractor."""
    resolver = RESOLVERS.get(pb.kind)
    return resolver(pb, cloud_name) if resolver else None
