"""Gallery rendering: grid/masonry as a grid, carousel/fullwidth as a looping slider"""

from html import escape

from blockpress.core.models import ContentBlock, GalleryImage, GalleryMeta
from blockpress.render.state import ViewState


def _alt(img: GalleryImage, index: int) -> str:
    return img.alt or img.caption or f"Gallery Image {index + 1}"


def _image(img: GalleryImage, index: int) -> str:
    return (
        f'<button type="button" class="lightbox-trigger" data-gallery-index="{index}">'
        f'<img src="{escape(img.url)}" alt="{escape(_alt(img, index))}" loading="lazy"></button>'
    )


def render_grid(block: ContentBlock, images: list[GalleryImage], style: str) -> str:
    cells = []
    for i, img in enumerate(images):
        caption = f'<figcaption>{escape(img.caption)}</figcaption>' if img.caption else ''
        cells.append(f'<div class="gallery-cell"><figure>{_image(img, i)}</figure>{caption}</div>')
    return f'<div class="gallery gallery-{style}" data-block-id="{escape(block.id)}">{"".join(cells)}</div>'


def render_carousel(block: ContentBlock, images: list[GalleryImage], style: str, state: ViewState) -> str:
    selected = state.carousel(block.id, len(images)).index
    slides = ''.join(
        f'<div class="gallery-slide{" is-active" if i == selected else ""}">{_image(img, i)}</div>'
        for i, img in enumerate(images)
    )
    dots = ''.join(
        f'<button type="button" class="gallery-dot{" is-active" if i == selected else ""}" '
        f'data-slide="{i}" aria-label="Go to slide {i + 1}"></button>'
        for i in range(len(images))
    )
    caption = images[selected].caption
    caption_html = f'<figcaption class="gallery-caption">{escape(caption)}</figcaption>' if caption else ''
    return (
        f'<div class="gallery gallery-{style}" data-block-id="{escape(block.id)}">'
        f'<div class="gallery-track">{slides}</div>'
        '<button type="button" class="gallery-prev" aria-label="Previous slide">&lsaquo;</button>'
        '<button type="button" class="gallery-next" aria-label="Next slide">&rsaquo;</button>'
        f'<div class="gallery-dots">{dots}</div>'
        f'{caption_html}</div>'
    )


def render_gallery(block: ContentBlock, state: ViewState) -> str:
    """Empty image lists render nothing."""
    meta = block.metadata if isinstance(block.metadata, GalleryMeta) else GalleryMeta()
    if not meta.images:
        return ''
    if meta.gallery_style in ('grid', 'masonry'):
        return render_grid(block, meta.images, meta.gallery_style)
    return render_carousel(block, meta.images, meta.gallery_style, state)
