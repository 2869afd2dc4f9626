"""Entity decoding, tag stripping, and plain-text helpers for labels and read times"""

import math
import re


ENTITIES: dict[str, str] = {
    '&#8217;': "'",
    '&#8216;': "'",
    '&#8220;': '"',
    '&#8221;': '"',
    '&#8211;': '–',
    '&#8212;': '—',
    '&nbsp;':  ' ',
    '&amp;':   '&',
    '&lt;':    '<',
    '&gt;':    '>',
    '&quot;':  '"',
    '&#039;':  "'",
    '&#160;':  ' ',
}

_P_OPEN_RE = re.compile(r'<p>', re.IGNORECASE)
_BREAK_RE = re.compile(r'</p>|<br\s*/?>', re.IGNORECASE)
_TAG_RE = re.compile(r'<[^>]+>')
_WS_RE = re.compile(r'\s+')

WORDS_PER_MINUTE = 200


def decode_entities(text: str) -> str:
    """Replace each table entity in turn, &amp; before &lt;/&gt;; unknown entities pass through."""
    for entity, char in ENTITIES.items():
        text = text.replace(entity, char)
    return text


def strip_tags(html: str) -> str:
    """Remove markup, turning paragraph and line breaks into single spaces."""
    text = _P_OPEN_RE.sub('', html)
    text = _BREAK_RE.sub(' ', text)
    text = _TAG_RE.sub('', text)
    return _WS_RE.sub(' ', text).strip()


def clean_for_label(html: str) -> str:
    """Plain text for contexts that must not carry markup (accordion labels, captions)."""
    return decode_entities(strip_tags(html)).strip()


def word_count(html: str) -> int:
    text = clean_for_label(html)
    return len(text.split()) if text else 0


def read_time(html: str) -> str:
    """Estimated reading time, e.g. '3 min read'."""
    minutes = max(1, math.ceil(word_count(html) / WORDS_PER_MINUTE))
    return f"{minutes} min read"
