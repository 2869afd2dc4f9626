"""Slug generation for heading anchors and article identifiers"""

import re


_TAG_RE = re.compile(r'<[^>]*>')
_NON_ALNUM_RE = re.compile(r'[^a-z0-9]+')


def slugify(text: str) -> str:
    """Strip tags, lowercase, and collapse every run of non-alphanumerics into one hyphen."""
    text = _TAG_RE.sub('', text).lower()
    return _NON_ALNUM_RE.sub('-', text).strip('-')


def unique_slug(text: str, taken: set[str]) -> str:
    """Return slugify(text), suffixed -2, -3, ... until it is not in taken. Records the result."""
    base = slugify(text)
    if not base:
        return ''
    slug, n = base, 2
    while slug in taken:
        slug = f"{base}-{n}"
        n += 1
    taken.add(slug)
    return slug
