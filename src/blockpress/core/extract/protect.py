"""Protect pass: swap complex WordPress constructs for placeholder tokens before splitting"""

import re
from typing import Iterator

from blockpress.core.models import ProtectedBlock, ProtectedHtml
from blockpress.core.scan import find_balanced
from blockpress.core.utils.logging import get_logger


logger = get_logger(__name__)

TOKEN_RE = re.compile(r'__PROTECTED_[A-Z]+_\d+__')

_EMPTY_P_RE = re.compile(r'<p>&nbsp;</p>')
_ACCORDION_START_RE = re.compile(r'<(div)\b[^>]*class="(?:[^"]*\s)?wp-block-accordion(?=[\s"])[^"]*"[^>]*>', re.IGNORECASE)
_GALLERY_START_RE = re.compile(r'<(figure|div)\b[^>]*class="[^"]*wp-block-gallery[^"]*"[^>]*>', re.IGNORECASE)


def _figure_re(marker: str) -> re.Pattern:
    return re.compile(rf'<figure[^>]*class="[^"]*{marker}[^"]*"[^>]*>[\s\S]*?</figure>', re.IGNORECASE)


# Order matters: nested constructs are protected before the generic gallery pass.
FIGURE_PASSES: list[tuple[str, re.Pattern]] = [
    ('video', _figure_re('wp-block-embed')),
    ('video', _figure_re('wp-block-video')),
    ('image', _figure_re('wp-block-image')),
]


def make_token(kind: str, n: int) -> str:
    return f"__PROTECTED_{kind.upper()}_{n}__"


def _absorb(content: str, blocks: list[ProtectedBlock]) -> str:
    """Restore tokens nested inside content and drop them from the side table."""
    for token in TOKEN_RE.findall(content):
        nested = next((b for b in blocks if b.token == token), None)
        if nested is not None:
            content = content.replace(token, nested.content)
            blocks.remove(nested)
    return content


def _protect_balanced(
    html: str,
    start_re: re.Pattern,
    kind: str,
    blocks: list[ProtectedBlock],
    ids: Iterator[int],
    ) -> str:
    """Replace each balanced construct found by start_re with a token.

    Rescans from zero after every replacement; an unbalanced start is skipped
    by resuming one character past it, so the loop is bounded by len(html).
    """
    pos = 0
    while (m := start_re.search(html, pos)) is not None:
        start = m.start()
        full = find_balanced(html, start, m.group(1))
        if full is None:
            logger.debug("unbalanced_construct", kind=kind, offset=start)
            pos = start + 1
            continue
        token = make_token(kind, next(ids))
        blocks.append(ProtectedBlock(token=token, content=_absorb(full, blocks), kind=kind))
        html = html[:start] + token + html[start + len(full):]
        pos = 0
    return html


def extract_protected(html: str, ids: Iterator[int]) -> ProtectedHtml:
    """Run the ordered protect passes over html and return the substituted text plus side table."""
    blocks: list[ProtectedBlock] = []
    processed = _EMPTY_P_RE.sub('', html)

    processed = _protect_balanced(processed, _ACCORDION_START_RE, 'accordion', blocks, ids)

    for kind, pattern in FIGURE_PASSES:
        def _swap(m: re.Match, kind: str = kind) -> str:
            token = make_token(kind, next(ids))
            blocks.append(ProtectedBlock(token=token, content=_absorb(m.group(0), blocks), kind=kind))
            return token
        processed = pattern.sub(_swap, processed)

    processed = _protect_balanced(processed, _GALLERY_START_RE, 'gallery', blocks, ids)

    if blocks:
        logger.debug("protected_blocks", count=len(blocks), kinds=[b.kind for b in blocks])
    return ProtectedHtml(html=processed, blocks=blocks)
