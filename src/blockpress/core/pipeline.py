"""Pipeline step functions: import sources into the store, render stored articles"""

from pathlib import Path

from sqlalchemy.engine import Engine
from sqlmodel import Session

from blockpress.config import Settings
from blockpress.core.export import write_article
from blockpress.core.source import discover_files, parse_file
from blockpress.core.utils.logging import get_logger
from blockpress.crud.articles import upsert_article
from blockpress.crud.models import Article


logger = get_logger(__name__)


def run_import(
    path: str,
    engine: Engine,
    markdown_preset: str = 'gfm-like',
    ) -> tuple[dict[str, int], list[tuple[str, str]]]:
    """Read every source under path and upsert it.

    Returns (counts, changes) where changes is a list of (status, slug) for
    created/updated articles. All files are committed in one transaction.
    """
    counts = {"created": 0, "updated": 0, "unchanged": 0}
    changes = []
    with Session(engine) as session:
        for p in discover_files(Path(path)):
            try:
                doc = parse_file(p, markdown_preset)
                article, status = upsert_article(session, doc.record())
            except (OSError, ValueError) as e:
                raise RuntimeError(f"Failed to import {p}: {e}") from e
            counts[status] += 1
            if status != 'unchanged':
                changes.append((status, article.slug))
        session.commit()
    logger.info("import_complete", **counts)
    return counts, changes


def run_render(
    articles: list[Article],
    settings: Settings,
    output_dir: Path,
    ) -> list[tuple[str, Path]]:
    """Write each article's page and sidecar. Returns (slug, html_path) pairs."""
    results = []
    for article in articles:
        html_path, _ = write_article(article, settings, output_dir)
        results.append((article.slug, html_path))
    return results
