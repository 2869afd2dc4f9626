"""CLI command implementations"""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer
from sqlmodel import Session, SQLModel

from blockpress.config import Settings, load_config
from blockpress.core.extract.extract import parse_content
from blockpress.core.pipeline import run_import, run_render
from blockpress.core.source import parse_file
from blockpress.core.toc import extract_headings
from blockpress.core.utils.logging import configure_logging
from blockpress.crud.articles import get_by_slug, list_articles
from blockpress.crud.database import init_db, make_engine


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling, then configure logging from it."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    configure_logging(settings.log_level)
    return settings


def init_cmd(
    reset: Annotated[bool, typer.Option("--reset", help="Drop and recreate all tables")] = False,
    ):
    """Initialize database schema. Use --reset to clear existing data."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    if reset:
        SQLModel.metadata.drop_all(engine)
        typer.echo("Existing data cleared.")
    init_db(engine)
    typer.echo(f"Database initialized at: {settings.db_url}")


def import_cmd(
    path: Annotated[str, typer.Argument(help="File or directory of .html/.md article sources")],
    preset: Annotated[Optional[str], typer.Option("--markdown-preset", help="MarkdownIt preset name")] = None,
    ):
    """Upsert article sources into the database; unchanged files are skipped."""
    settings = _settings(overrides={"markdown_preset": preset})
    engine = make_engine(settings.db_url)
    init_db(engine)
    try:
        counts, changes = run_import(path, engine, settings.markdown_preset)
    except RuntimeError as e:
        _fail(str(e))
    for status, slug in changes:
        typer.echo(f"  {status}: {slug}")
    typer.echo(
        f"Import complete - "
        f"{counts['created']} created, "
        f"{counts['updated']} updated, "
        f"{counts['unchanged']} unchanged"
    )


def parse_cmd(
    file: Annotated[Path, typer.Argument(help="HTML or Markdown file to parse")],
    toc: Annotated[bool, typer.Option("--toc", help="Print the table of contents instead of blocks")] = False,
    ):
    """Parse a single file and print its blocks (or TOC) as JSON."""
    settings = _settings()
    try:
        doc = parse_file(file, settings.markdown_preset)
    except (OSError, ValueError) as e:
        _fail(f"Cannot read {file}", e)
    blocks = parse_content(doc.html, settings.cloudinary_cloud_name)
    if toc:
        payload = [e.model_dump() for e in extract_headings(blocks, settings.toc_levels)]
    else:
        payload = [b.model_dump(mode="json", by_alias=True) for b in blocks]
    typer.echo(json.dumps(payload, indent=2))


def render_cmd(
    slug: Annotated[Optional[str], typer.Argument(help="Slug of the article to render")] = None,
    all_articles: Annotated[bool, typer.Option("--all", help="Render every published article")] = False,
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    ):
    """Write rendered HTML pages + JSON sidecars to the output dir."""
    if not slug and not all_articles:
        _fail("Specify a SLUG or --all.")
    settings = _settings(overrides={"output_dir": out})
    engine = make_engine(settings.db_url)
    init_db(engine)
    output_dir = Path(settings.output_dir)

    with Session(engine) as session:
        if all_articles:
            articles = list_articles(session, published_only=True)
        else:
            article = get_by_slug(session, slug)
            if article is None:
                _fail(f"No article with slug '{slug}'.")
            articles = [article]
        try:
            results = run_render(articles, settings, output_dir)
        except OSError as e:
            _fail("Render failed", e)

    if not results:
        typer.echo("No published articles to render.")
        raise typer.Exit(1)
    for name, html_path in results:
        typer.echo(f"  {name} -> {html_path}")
    typer.echo(f"Rendered {len(results)} article(s) to {output_dir}/")


def list_cmd(
    published: Annotated[bool, typer.Option("--published", help="Only published articles")] = False,
    ):
    """List stored articles as '<slug>  <title>'."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    init_db(engine)
    with Session(engine) as session:
        rows = [(a.slug, a.title, a.published) for a in list_articles(session, published_only=published)]
    if not rows:
        typer.echo("No articles found in database.")
        raise typer.Exit(1)
    for slug, title, is_published in rows:
        typer.echo(f"{slug}  {title}" + ("" if is_published else "  (draft)"))
