"""Depth-counting scanner for nested same-named tags"""

import re
from functools import lru_cache


@lru_cache(maxsize=32)
def _tag_pattern(tag: str) -> re.Pattern:
    return re.compile(rf'</?{re.escape(tag)}(?=[\s>/])', re.IGNORECASE)


def find_balanced(source: str, start: int, tag: str) -> str | None:
    """Return source[start:] through the close tag that balances the first open tag.

    start must point at (or before) an opening <tag. Returns None when the
    construct never balances or a close tag precedes any open tag; callers
    treat None as "leave this span alone", never as an error.
    """
    depth = 0
    for m in _tag_pattern(tag).finditer(source, start):
        if m.group(0)[1] == '/':
            depth -= 1
            if depth < 0:
                return None
        else:
            depth += 1
        if depth == 0:
            end = source.find('>', m.start())
            return source[start:end + 1] if end != -1 else None
    return None
