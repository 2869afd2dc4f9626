"""Top-level splitter: typed ContentBlocks from token-substituted HTML, in document order"""

import re
from typing import Iterator

from blockpress.core.extract.protect import TOKEN_RE
from blockpress.core.extract.resolve import image_fields, resolve
from blockpress.core.media import DEFAULT_CLOUD_NAME
from blockpress.core.models import (
    BlockType, CodeMeta, ContentBlock, HeadingMeta, ImageMeta, ListMeta, ProtectedHtml,
)
from blockpress.core.scan import find_balanced
from blockpress.core.text import clean_for_label, decode_entities, strip_tags
from blockpress.core.utils.logging import get_logger
from blockpress.core.utils.slug import unique_slug


logger = get_logger(__name__)

TOP_LEVEL_RE = re.compile(
    r'<(p|h[1-6]|ul|ol|blockquote|figure|div|pre)\b([^>]*)>([\s\S]*?)</\1>|<hr\b[^>]*>',
    re.IGNORECASE,
)
NESTABLE = {'div', 'ul', 'ol', 'blockquote', 'figure'}

LI_START_RE = re.compile(r'<li(?=[\s>])', re.IGNORECASE)
LI_OPEN_RE = re.compile(r'^<li[^>]*>', re.IGNORECASE)
LI_CLOSE_RE = re.compile(r'</li>\s*$', re.IGNORECASE)
CODE_TAG_RE = re.compile(r'</?code[^>]*>', re.IGNORECASE)
LANGUAGE_RE = re.compile(r'\b(?:language|lang)-([\w+#-]+)')
EMBEDDED_RE = re.compile(r'<(img|iframe|video|audio|table|svg)\b', re.IGNORECASE)


def has_content(html: str) -> bool:
    """True when html carries visible text or embedded media."""
    return bool(strip_tags(html)) or bool(EMBEDDED_RE.search(html))


def list_items(html: str) -> list[str]:
    """Inner HTML of each top-level <li>, using balanced scanning so nested lists stay intact."""
    items = []
    pos = 0
    while (m := LI_START_RE.search(html, pos)) is not None:
        full = find_balanced(html, m.start(), 'li')
        if full is None:
            pos = m.end()
            continue
        inner = LI_CLOSE_RE.sub('', LI_OPEN_RE.sub('', full, count=1))
        items.append(inner.strip())
        pos = m.start() + len(full)
    return items


def _inner(element: str) -> str:
    """Content between an element's opening tag and its final closing tag."""
    return element[element.index('>') + 1:element.rfind('</')]


class BlockSplitter:
    """One pass over protected HTML; owns the block list, used ids, and resolved tokens."""

    def __init__(self, protected: ProtectedHtml, ids: Iterator[int], cloud_name: str = DEFAULT_CLOUD_NAME):
        self.protected = protected
        self.ids = ids
        self.cloud_name = cloud_name
        self.blocks: list[ContentBlock] = []
        self._taken: set[str] = set()
        self._resolved: set[str] = set()

    def split(self) -> list[ContentBlock]:
        html = self.protected.html
        pos = 0
        while (m := TOP_LEVEL_RE.search(html, pos)) is not None:
            self._gap(html[pos:m.start()])
            element = m.group(0)
            tag = (m.group(1) or 'hr').lower()
            if tag in NESTABLE:
                element = find_balanced(html, m.start(), tag) or element
            self._element(tag, m.group(2) or '', element)
            pos = m.start() + len(element)
        self._gap(html[pos:])
        return self.blocks

    # --- ids ---

    def _next_id(self) -> str:
        while (candidate := str(next(self.ids))) in self._taken:
            pass
        self._taken.add(candidate)
        return candidate

    def _emit(self, block_type: BlockType, content: str, metadata=None, block_id: str | None = None) -> None:
        block_id = block_id or self._next_id()
        self.blocks.append(ContentBlock(id=block_id, type=block_type, content=content, metadata=metadata))

    # --- protected tokens ---

    def _resolve_tokens(self, text: str) -> str:
        """Emit a block for every token in text (document order) and return text without tokens."""
        for token in TOKEN_RE.findall(text):
            pb = self.protected.lookup(token)
            if pb is None or token in self._resolved:
                continue
            self._resolved.add(token)
            block = resolve(pb, self.cloud_name)
            if block is not None:
                self._taken.add(block.id)
                self.blocks.append(block)
        return TOKEN_RE.sub('', text)

    def _gap(self, text: str) -> None:
        rest = self._resolve_tokens(text).strip()
        if rest and has_content(rest):
            self._emit(BlockType.paragraph, rest)

    # --- top-level elements ---

    def _element(self, tag: str, attrs: str, element: str) -> None:
        if tag == 'hr':
            self._emit(BlockType.divider, '')
            return

        content = _inner(element)
        if TOKEN_RE.search(content):
            content = self._resolve_tokens(content)
            if not has_content(content):
                return

        if tag[0] == 'h' and tag[1:].isdigit():
            self._heading(int(tag[1]), content)
        elif tag == 'blockquote':
            self._emit(BlockType.quote, content.strip())
        elif tag in ('ul', 'ol'):
            items = list_items(content)
            self._emit(BlockType.list, content.strip(),
                       ListMeta(ordered=tag == 'ol', items=items or None))
        elif tag == 'figure':
            self._figure(content)
        elif tag == 'pre':
            self._code(attrs, content)
        elif has_content(content):
            self._emit(BlockType.paragraph, content.strip())

    def _heading(self, level: int, content: str) -> None:
        text = clean_for_label(content)
        if not text:
            return
        block_id = unique_slug(text, self._taken) or self._next_id()
        self._emit(BlockType.heading, text, HeadingMeta(level=level), block_id=block_id)

    def _figure(self, content: str) -> None:
        if '<img' not in content:
            if has_content(content):
                self._emit(BlockType.paragraph, content.strip())
            return
        url, caption, alt = image_fields(content, self.cloud_name)
        if not url:
            logger.debug("figure_without_src", snippet=content[:100])
            return
        self._emit(BlockType.image, url.strip(), ImageMeta(caption=caption, alt=alt))

    def _code(self, attrs: str, content: str) -> None:
        lang = LANGUAGE_RE.search(attrs) or LANGUAGE_RE.search(content.split('>', 1)[0])
        code = decode_entities(CODE_TAG_RE.sub('', content)).strip('\n')
        self._emit(BlockType.code, code, CodeMeta(language=lang.group(1) if lang else 'text'))


def split_blocks(protected: ProtectedHtml, ids: Iterator[int], cloud_name: str = DEFAULT_CLOUD_NAME) -> list[ContentBlock]:
    """Split protected HTML into typed blocks, resolving placeholder tokens where they occur."""
    return BlockSplitter(protected, ids, cloud_name).split()
