"""Inline text formatting: markdown/HTML emphasis and links, heading anchors, CMS link rewriting"""

import re
from html import escape

from blockpress.core.utils.slug import slugify


INLINE_RE = re.compile(
    r'(\*\*(.+?)\*\*)'                                  # **bold**
    r'|(\*(.+?)\*)'                                     # *italic*
    r'|(\[(.+?)\]\((.+?)\))'                            # [text](url)
    r'|(<a[^>]+href="([^"]+)"[^>]*>(.*?)</a>)'          # <a href="url">text</a>
    r'|(<(strong|b)>(.*?)</\12>)'                       # <strong>/<b>
    r'|(<(em|i)>(.*?)</\15>)'                           # <em>/<i>
    r'|(<br\s*/?>)',
    re.IGNORECASE | re.DOTALL,
)

# block-level markup that is passed through untouched instead of inline-formatted
COMPLEX_HTML_RE = re.compile(r'<(p|div|blockquote|pre|ul|ol|li|table|iframe|img)[\s>/]', re.IGNORECASE)
RICH_TAG_RE = re.compile(r'<(b|strong|i|em|a|p|div|span|br|u|blockquote|pre|code|ul|ol|li)[\s>/]', re.IGNORECASE)
HEADING_TAG_RE = re.compile(r'<h([1-6])(.*?)>(.*?)</h\1>', re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r'<[^>]*>')


def _accent_style(accent: str | None) -> str:
    return f' style="color: {escape(accent)}"' if accent else ''


def strip_cms(href: str, cms_base_url: str = '') -> str:
    """Drop the CMS origin from an absolute URL so it resolves on this site."""
    if cms_base_url and href.startswith(cms_base_url.rstrip('/')):
        return href[len(cms_base_url.rstrip('/')):] or '/'
    return href


def render_link(href: str, label_html: str, accent: str | None = None, cms_base_url: str = '') -> str:
    """Internal links stay in-site; anything absolute opens in a new tab."""
    target = strip_cms(href, cms_base_url)
    if target.startswith('/') and not target.startswith('//'):
        return f'<a href="{escape(target)}" class="inline-link"{_accent_style(accent)}>{label_html}</a>'
    return (
        f'<a href="{escape(target)}" class="inline-link" target="_blank" rel="noopener noreferrer"'
        f'{_accent_style(accent)}>{label_html}</a>'
    )


def format_inline(text: str, accent: str | None = None, cms_base_url: str = '') -> str:
    """Single left-to-right pass over the inline forms; text between matches is kept verbatim."""
    out: list[str] = []
    last = 0
    for m in INLINE_RE.finditer(text):
        out.append(text[last:m.start()])
        last = m.end()
        if m.group(1):
            out.append(f'<strong class="inline-strong"{_accent_style(accent)}>{escape(m.group(2))}</strong>')
        elif m.group(3):
            out.append(f'<em>{escape(m.group(4))}</em>')
        elif m.group(5):
            out.append(render_link(m.group(7), escape(m.group(6)), accent, cms_base_url))
        elif m.group(8):
            out.append(render_link(m.group(9), m.group(10), accent, cms_base_url))
        elif m.group(11):
            out.append(f'<strong class="inline-strong"{_accent_style(accent)}>{escape(m.group(13))}</strong>')
        elif m.group(14):
            out.append(f'<em>{escape(m.group(16))}</em>')
        else:
            out.append('<br>')
    out.append(text[last:])
    return ''.join(out)


def format_text(text: str, accent: str | None = None, cms_base_url: str = '') -> str:
    """Block-level HTML is passed through (links rewritten); anything else gets the inline pass."""
    if COMPLEX_HTML_RE.search(text):
        return f'<div class="rich-content">{rewrite_cms_links(text, cms_base_url)}</div>'
    return format_inline(text, accent, cms_base_url)


def has_rich_tags(text: str) -> bool:
    return bool(RICH_TAG_RE.search(text))


def inject_heading_ids(html: str) -> str:
    """Give embedded headings a heading-<slug> id unless they already carry one."""
    def _add_id(m: re.Match) -> str:
        level, attrs, inner = m.group(1), m.group(2), m.group(3)
        if 'id=' in attrs:
            return m.group(0)
        slug = slugify(_TAG_RE.sub('', inner))
        if not slug:
            return m.group(0)
        return f'<h{level}{attrs} id="heading-{slug}">{inner}</h{level}>'

    return HEADING_TAG_RE.sub(_add_id, html)


def rewrite_cms_links(html: str, cms_base_url: str = '') -> str:
    """href="<cms>/path" becomes href="/path"."""
    base = cms_base_url.rstrip('/')
    if not base:
        return html
    return re.sub(r'href="' + re.escape(base) + r'(/[^"]*)?"', lambda m: f'href="{m.group(1) or "/"}"', html)
