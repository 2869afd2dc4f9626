"""Source file discovery, frontmatter extraction, and Markdown-to-HTML conversion"""

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any

import yaml
from markdown_it import MarkdownIt

from blockpress.core.utils.hashing import sha256
from blockpress.core.utils.slug import slugify


FRONTMATTER_RE = re.compile(r'^---\s*\n(.*?)\n---\s*\n', re.DOTALL)
HTML_EXTENSIONS = {'.html', '.htm'}
MD_EXTENSIONS = {'.md', '.mdx'}
SOURCE_EXTENSIONS = HTML_EXTENSIONS | MD_EXTENSIONS


@dataclass
class SourceDoc:
    """One article source file, body converted to HTML; not persisted as-is."""
    path:         Path
    slug:         str
    title:        str
    raw:          str          # full file content (includes frontmatter)
    html:         str          # body as HTML
    hash:         str
    frontmatter:  dict[str, Any] = field(default_factory=dict)

    def record(self) -> dict[str, Any]:
        """Flatten into the dict accepted by crud.articles.upsert_article."""
        fm = self.frontmatter
        return {
            "slug": self.slug,
            "title": self.title,
            "category": fm.get('category'),
            "accent_color": fm.get('accentColor') or fm.get('accent_color'),
            "excerpt": fm.get('excerpt'),
            "content": self.html,
            "hash": self.hash,
            "path": str(self.path),
            "published": bool(fm.get('published', True)),
            "published_at": _as_datetime(fm.get('date') or fm.get('published_at')),
        }


def _as_datetime(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value)
        except ValueError as e:
            raise ValueError(f"Invalid date in frontmatter: {value!r}") from e
    return None


def _make_parser(preset: str) -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name."""
    return MarkdownIt(preset, options_update={"linkify": False})


def _strip_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Return (frontmatter_dict, body) with YAML header removed."""
    m = FRONTMATTER_RE.match(text)
    if m:
        try:
            fm = yaml.safe_load(m.group(1)) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML frontmatter: {e}") from e
        if not isinstance(fm, dict):
            raise ValueError(f"Invalid YAML frontmatter: expected a mapping, got {type(fm).__name__}")
        return fm, text[m.end():]
    return {}, text


def discover_files(path: Path) -> list[Path]:
    """Return sorted article sources under path, or [path] if a single supported file."""
    if path.is_file():
        return [path] if path.suffix.lower() in SOURCE_EXTENSIONS else []
    return sorted(p for p in path.rglob('*') if p.suffix.lower() in SOURCE_EXTENSIONS)


def parse_file(path: Path, markdown_preset: str = 'gfm-like') -> SourceDoc:
    """Read one source file. Markdown bodies are rendered to HTML; HTML bodies are kept verbatim."""
    raw = path.read_text(encoding='utf-8')
    frontmatter, body = _strip_frontmatter(raw)
    if path.suffix.lower() in MD_EXTENSIONS:
        body = _make_parser(markdown_preset).render(body)
    slug = frontmatter.get('slug') or slugify(path.stem)
    title = frontmatter.get('title') or path.stem.replace('-', ' ').replace('_', ' ').title()
    return SourceDoc(
        path=path,
        slug=slug,
        title=str(title),
        raw=raw,
        html=body,
        hash=sha256(raw),
        frontmatter=frontmatter,
    )
