"""Render an ordered ContentBlock sequence into article HTML"""

import re
from dataclasses import dataclass
from html import escape
from typing import Callable

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import TextLexer, get_lexer_by_name
from pygments.util import ClassNotFound

from blockpress.core.models import (
    AccordionMeta, BlockType, CalloutMeta, CodeMeta, ContentBlock, FileMeta,
    HeadingMeta, ImageMeta, ListMeta, ParagraphMeta, SpacerMeta, VideoMeta,
)
from blockpress.core.media import embed_url, is_video_file
from blockpress.core.utils.logging import get_logger
from blockpress.render.gallery import render_gallery
from blockpress.render.inline import format_inline, format_text, has_rich_tags, inject_heading_ids, rewrite_cms_links
from blockpress.render.state import ViewState


logger = get_logger(__name__)

EMPTY_ARTICLE = '<div class="article-empty"><p>No content available.</p></div>'

HEADING_TIERS = {1: 'heading-xl', 2: 'heading-lg', 3: 'heading-md'}     # 4+ -> heading-sm
IMAGE_ALIGN = {'left': 'align-left', 'right': 'align-right', 'center': 'align-center', 'full': ''}
IMAGE_SIZE = {'small': 'size-small', 'medium': 'size-medium', 'large': 'size-large', 'full': 'size-full'}
SPACER_HEIGHTS = {'small': '3rem', 'medium': '6rem', 'large': '8rem'}
CALLOUT_STYLES = {
    'info':    ('info', '#3b82f6'),
    'warning': ('alert-triangle', '#eab308'),
    'success': ('check-circle', '#22c55e'),
    'error':   ('x-circle', '#ef4444'),
}
IFRAME_ALLOW = "accelerometer; autoplay; clipboard-write; encrypted-media; gyroscope; picture-in-picture"


@dataclass
class RenderOptions:
    enable_drop_cap: bool = True
    cms_base_url: str = ''
    highlight_code: bool = True


@dataclass
class _Context:
    accent: str | None
    options: RenderOptions
    state: ViewState
    drop_cap_id: str | None = None


def _meta(block: ContentBlock, cls):
    return block.metadata if isinstance(block.metadata, cls) else cls()


# --- per-type renderers ---

def render_paragraph(block: ContentBlock, ctx: _Context) -> str:
    meta = _meta(block, ParagraphMeta)
    drop_cap = meta.is_drop_cap if meta.is_drop_cap is not None else block.id == ctx.drop_cap_id
    cls = 'article-paragraph drop-cap' if drop_cap else 'article-paragraph'
    if has_rich_tags(block.content):
        body = rewrite_cms_links(inject_heading_ids(block.content), ctx.options.cms_base_url)
        return f'<div class="{cls} rich-content">{body}</div>'
    return f'<p class="{cls}">{format_inline(block.content, ctx.accent, ctx.options.cms_base_url)}</p>'


def render_heading(block: ContentBlock, ctx: _Context) -> str:
    level = _meta(block, HeadingMeta).level
    tier = HEADING_TIERS.get(level, 'heading-sm')
    return f'<h{level} id="heading-{escape(block.id)}" class="article-heading {tier}">{escape(block.content)}</h{level}>'


def render_image(block: ContentBlock, ctx: _Context) -> str:
    meta = _meta(block, ImageMeta)
    classes = ' '.join(c for c in ('article-image', IMAGE_ALIGN[meta.align], IMAGE_SIZE[meta.size]) if c)
    caption = f'<figcaption>{escape(meta.caption)}</figcaption>' if meta.caption else ''
    return (
        f'<figure class="{classes}">'
        f'<button type="button" class="lightbox-trigger" data-lightbox-url="{escape(block.content)}"'
        f' data-lightbox-caption="{escape(meta.caption or "")}" data-lightbox-alt="{escape(meta.alt or "")}">'
        f'<img src="{escape(block.content)}" alt="{escape(meta.alt or "")}" loading="lazy"></button>'
        f'{caption}</figure>'
    )


def render_video(block: ContentBlock, ctx: _Context) -> str:
    meta = _meta(block, VideoMeta)
    src = embed_url(block.content, meta.video_type)
    if not src:
        logger.debug("video_skipped", id=block.id, url=block.content)
        return ''
    if meta.video_type == 'custom' and is_video_file(block.content):
        player = f'<video src="{escape(src)}" controls preload="metadata"></video>'
    else:
        title = 'Embedded Content' if meta.video_type == 'custom' else 'Video player'
        player = (
            f'<div class="video-frame"><iframe src="{escape(src)}" title="{title}" frameborder="0"'
            f' allow="{IFRAME_ALLOW}" allowfullscreen></iframe></div>'
        )
    caption = f'<div class="video-caption">{escape(meta.caption)}</div>' if meta.caption else ''
    return f'<div class="article-video">{player}{caption}</div>'


def render_quote(block: ContentBlock, ctx: _Context) -> str:
    return f'<blockquote class="article-quote">{format_text(block.content, ctx.accent, ctx.options.cms_base_url)}</blockquote>'


def list_items(block: ContentBlock) -> list[str]:
    """Metadata items, else non-empty content lines with stray li tags removed."""
    meta = _meta(block, ListMeta)
    if meta.items is not None:
        return meta.items
    lines = (re.sub(r'</?li[^>]*>', '', line, flags=re.IGNORECASE).strip() for line in block.content.split('\n'))
    return [line for line in lines if line]


def render_list(block: ContentBlock, ctx: _Context) -> str:
    meta = _meta(block, ListMeta)
    tag = 'ol' if meta.list_type == 'numbered' or meta.ordered else 'ul'
    items = ''.join(
        f'<li>{format_text(item, ctx.accent, ctx.options.cms_base_url)}</li>' for item in list_items(block)
    )
    return f'<{tag} class="article-list">{items}</{tag}>'


def highlight_code(code: str, language: str) -> str:
    try:
        lexer = get_lexer_by_name(language.strip(), stripall=True) if language.strip() else TextLexer()
    except ClassNotFound:
        lexer = TextLexer()
    return highlight(code, lexer, HtmlFormatter(cssclass="highlight"))


def render_code(block: ContentBlock, ctx: _Context) -> str:
    language = _meta(block, CodeMeta).language
    if ctx.options.highlight_code:
        body = highlight_code(block.content, language)
    else:
        body = f'<pre><code class="language-{escape(language)}">{escape(block.content)}</code></pre>'
    return f'<div class="article-code" data-language="{escape(language)}">{body}</div>'


def render_gallery_block(block: ContentBlock, ctx: _Context) -> str:
    return render_gallery(block, ctx.state)


def render_spacer(block: ContentBlock, ctx: _Context) -> str:
    height = SPACER_HEIGHTS[_meta(block, SpacerMeta).height]
    return f'<div class="spacer" style="height: {height}" aria-hidden="true"></div>'


def render_accordion(block: ContentBlock, ctx: _Context) -> str:
    items = _meta(block, AccordionMeta).items
    if not items:
        return ''
    rows = []
    for i, item in enumerate(items):
        is_open = ctx.state.accordion.is_open(block.id, i)
        rows.append(
            f'<div class="accordion-item{" is-open" if is_open else ""}">'
            f'<button type="button" class="accordion-toggle" data-accordion="{escape(block.id)}:{i}"'
            f' aria-expanded="{"true" if is_open else "false"}"><span>{escape(item.question)}</span>'
            f'<span class="accordion-chevron" style="color: var(--accent-color)"></span></button>'
            f'<div class="accordion-panel"{"" if is_open else " hidden"}>{escape(item.answer)}</div></div>'
        )
    return f'<div class="accordion">{"".join(rows)}</div>'


def render_callout(block: ContentBlock, ctx: _Context) -> str:
    kind = _meta(block, CalloutMeta).callout_type
    icon, color = CALLOUT_STYLES[kind]
    return (
        f'<div class="callout callout-{kind}" role="note" style="--callout-color: {color}">'
        f'<span class="callout-icon" data-icon="{icon}"></span>'
        f'<div class="callout-body">{block.content}</div></div>'
    )


def render_divider(block: ContentBlock, ctx: _Context) -> str:
    return '<div class="divider" role="separator"><span></span><span></span><span></span></div>'


def render_file(block: ContentBlock, ctx: _Context) -> str:
    meta = _meta(block, FileMeta)
    size = f'<span class="file-size">{escape(meta.file_size)}</span>' if meta.file_size else ''
    return (
        f'<a class="file-download" href="{escape(block.content)}" download>'
        f'<span class="file-name">{escape(meta.file_name or "Download File")}</span>{size}</a>'
    )


RENDERERS: dict[BlockType, Callable[[ContentBlock, _Context], str]] = {
    BlockType.paragraph: render_paragraph,
    BlockType.heading:   render_heading,
    BlockType.image:     render_image,
    BlockType.video:     render_video,
    BlockType.quote:     render_quote,
    BlockType.list:      render_list,
    BlockType.code:      render_code,
    BlockType.gallery:   render_gallery_block,
    BlockType.spacer:    render_spacer,
    BlockType.accordion: render_accordion,
    BlockType.callout:   render_callout,
    BlockType.divider:   render_divider,
    BlockType.file:      render_file,
}


def render_lightbox(state: ViewState) -> str:
    """Overlay for the open lightbox, or '' when closed."""
    box = state.lightbox
    image = box.current
    if image is None:
        return ''
    nav = ''
    if len(box.images) > 1:
        nav = (
            '<button type="button" class="lightbox-prev" aria-label="Previous image">&lsaquo;</button>'
            '<button type="button" class="lightbox-next" aria-label="Next image">&rsaquo;</button>'
            f'<span class="lightbox-counter">{box.index + 1} / {len(box.images)}</span>'
        )
    caption = f'<p class="lightbox-caption">{escape(image.caption)}</p>' if image.caption else ''
    return (
        '<div class="lightbox" role="dialog" aria-modal="true" data-action="close">'
        '<button type="button" class="lightbox-close" aria-label="Close lightbox" data-action="close">&times;</button>'
        f'{nav}<figure class="lightbox-content"><img src="{escape(image.url)}" alt="{escape(image.alt or "")}">'
        f'{caption}</figure></div>'
    )


def render_blocks(
    blocks: list[ContentBlock],
    accent_color: str | None = None,
    options: RenderOptions | None = None,
    state: ViewState | None = None,
    ) -> str:
    """Render blocks in order inside the themed article wrapper. Unknown types render nothing."""
    if not blocks:
        return EMPTY_ARTICLE
    options = options or RenderOptions()
    state = state or ViewState()
    first_paragraph = next((b.id for b in blocks if b.type == BlockType.paragraph), None)
    ctx = _Context(accent_color, options, state, first_paragraph if options.enable_drop_cap else None)

    parts = []
    for block in blocks:
        renderer = RENDERERS.get(block.type)
        if renderer is None:
            continue
        parts.append(renderer(block, ctx))

    style = f' style="--accent-color: {escape(accent_color)}; --drop-cap-color: {escape(accent_color)}"' if accent_color else ''
    return f'<div class="prose-custom"{style}>{"".join(parts)}</div>{render_lightbox(state)}'
