"""Export: render an article to a standalone HTML page plus a JSON sidecar"""

import json
from pathlib import Path

import jinja2

from blockpress.config import Settings
from blockpress.core.extract.extract import parse_content
from blockpress.core.models import ContentBlock, TocEntry
from blockpress.core.text import read_time
from blockpress.core.toc import extract_headings
from blockpress.crud.models import Article
from blockpress.render.blocks import RenderOptions, render_blocks


PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{{ title }}</title>
{% if excerpt %}<meta name="description" content="{{ excerpt }}">{% endif %}
</head>
<body style="--accent-color: {{ accent }}">
<article>
<header class="article-header">
{% if category %}<p class="article-category">{{ category }}</p>{% endif %}
<h1>{{ title }}</h1>
<p class="article-meta">{% if published_at %}<time datetime="{{ published_at.isoformat() }}">{{ published_at.strftime('%B %d, %Y') }}</time> &middot; {% endif %}{{ read_time }}</p>
</header>
{% if toc %}<nav class="article-toc" aria-label="Table of contents">
<p>In this article</p>
<ul>{% for entry in toc %}
<li class="toc-level-{{ entry.level }}"><a href="#heading-{{ entry.id }}">{{ entry.text }}</a></li>{% endfor %}
</ul>
</nav>{% endif %}
{{ body | safe }}
</article>
</body>
</html>
"""

_env = jinja2.Environment(autoescape=True, keep_trailing_newline=True)


def build_page(article: Article, blocks: list[ContentBlock], toc: list[TocEntry], settings: Settings) -> str:
    """Full HTML document: header, TOC nav, rendered block body."""
    accent = article.accent_color or settings.accent_color
    body = render_blocks(
        blocks,
        accent,
        RenderOptions(enable_drop_cap=settings.enable_drop_cap, cms_base_url=settings.cms_base_url),
    )
    return _env.from_string(PAGE_TEMPLATE).render(
        title=article.title,
        excerpt=article.excerpt,
        category=article.category,
        accent=accent,
        published_at=article.published_at,
        read_time=read_time(article.content),
        toc=toc,
        body=body,
    )


def build_sidecar(article: Article, blocks: list[ContentBlock], toc: list[TocEntry]) -> dict:
    """Sidecar JSON: slug, title, read time, TOC, and the parsed blocks in camelCase."""
    return {
        "slug": article.slug,
        "title": article.title,
        "category": article.category,
        "publishedAt": article.published_at.isoformat() if article.published_at else None,
        "readTime": read_time(article.content),
        "toc": [e.model_dump() for e in toc],
        "blocks": [b.model_dump(mode="json", by_alias=True) for b in blocks],
    }


def write_article(article: Article, settings: Settings, output_dir: Path) -> tuple[Path, Path]:
    """Parse, render and write output_dir/<slug>.html + <slug>.json. Returns (html_path, json_path)."""
    output_dir.mkdir(parents=True, exist_ok=True)
    blocks = parse_content(article.content, settings.cloudinary_cloud_name)
    toc = extract_headings(blocks, settings.toc_levels)

    html_path = output_dir / f"{article.slug}.html"
    json_path = output_dir / f"{article.slug}.json"
    html_path.write_text(build_page(article, blocks, toc, settings), encoding='utf-8')
    json_path.write_text(json.dumps(build_sidecar(article, blocks, toc), indent=2), encoding='utf-8')
    return html_path, json_path
