"""Table-of-contents extraction and active-heading tracking"""

import re
from typing import Iterable

from blockpress.core.models import BlockType, ContentBlock, HeadingMeta, TocEntry
from blockpress.core.utils.slug import slugify


EMBEDDED_HEADING_RE = re.compile(r'<h([1-6])(.*?)>(.*?)</h\1>', re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r'<[^>]*>')


def extract_headings(blocks: list[ContentBlock], levels: Iterable[int] | None = None) -> list[TocEntry]:
    """Walk blocks once, collecting heading blocks and headings embedded in rich paragraphs.

    Heading blocks keep their block id; embedded headings get slugify(text),
    matching the heading-<slug> anchors the renderer injects. levels filters
    the result when given.
    """
    wanted = set(levels) if levels else None
    entries: list[TocEntry] = []
    for block in blocks:
        if block.type == BlockType.heading:
            level = block.metadata.level if isinstance(block.metadata, HeadingMeta) else 2
            entries.append(TocEntry(id=block.id, text=block.content, level=level))
        elif block.type == BlockType.paragraph:
            for m in EMBEDDED_HEADING_RE.finditer(block.content):
                text = _TAG_RE.sub('', m.group(3))
                slug = slugify(text)
                if slug:
                    entries.append(TocEntry(id=slug, text=text, level=int(m.group(1))))
    if wanted is None:
        return entries
    return [e for e in entries if e.level in wanted]


class ActiveHeading:
    """Tracks the TOC entry currently in view from anchor visibility events."""

    def __init__(self, entries: list[TocEntry]):
        self.entries = entries
        self.active: str | None = entries[0].id if entries else None

    def observe(self, anchor_id: str, visible: bool) -> str | None:
        """Feed one visibility event for a heading-<id> anchor; returns the active id."""
        entry_id = anchor_id.removeprefix('heading-')
        if visible and any(e.id == entry_id for e in self.entries):
            self.active = entry_id
        return self.active

    def is_active(self, entry_id: str) -> bool:
        return self.active == entry_id
