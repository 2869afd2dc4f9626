"""Integration tests for the import -> render pipeline.

Each test runs pipeline steps against the canonical article below and asserts
stable expected values. Read this file top-to-bottom as a reference for what
each stage produces with default settings.

Canonical article (pipeline-test.html)
--------------------------------------
    ---
    title: Pipeline Test
    date: 2026-01-15
    category: Production
    ---
    <h2>Introduction</h2>
    <p>An introductory paragraph.</p>
    <figure class="wp-block-gallery ...">  two nested wp-block-image figures  </figure>
    <h3>Details</h3>
    <p>More detailed content.</p>

Block layout after parse (5 blocks):
    [heading h2]  id "introduction"
    [paragraph]   "An introductory paragraph."   (drop cap)
    [gallery]     carousel, 2 images
    [heading h3]  id "details"
    [paragraph]   "More detailed content."
"""

import json

import pytest
from sqlalchemy import create_engine
from sqlmodel import SQLModel, Session, select

from blockpress.config import Settings
from blockpress.core.pipeline import run_import, run_render
from blockpress.crud.models import Article


CANONICAL_HTML = """\
---
title: Pipeline Test
date: 2026-01-15
category: Production
---
<h2>Introduction</h2>
<p>An introductory paragraph.</p>
<figure class="wp-block-gallery has-nested-images columns-2">
<figure class="wp-block-image"><img src="https://cdn.example.com/a.jpg" alt="A"/><figcaption>First</figcaption></figure>
<figure class="wp-block-image"><img src="https://cdn.example.com/b.jpg" alt="B"/></figure>
</figure>
<h3>Details</h3>
<p>More detailed content.</p>
"""


# --- fixtures ---

@pytest.fixture(name="engine")
def engine_fixture():
    """Fresh in-memory SQLite database for each test."""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False})
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="source_file")
def source_file_fixture(tmp_path):
    f = tmp_path / "articles" / "pipeline-test.html"
    f.parent.mkdir()
    f.write_text(CANONICAL_HTML)
    return f


@pytest.fixture(autouse=True)
def chdir_tmp(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)


def _render(engine, tmp_path, **settings):
    out = tmp_path / "dist"
    with Session(engine) as s:
        articles = s.exec(select(Article)).all()
        results = run_render(articles, Settings(**settings), out)
    return results, out


# --- import ---

def test_import_creates_article(source_file, engine):
    counts, changes = run_import(str(source_file.parent), engine)
    assert counts == {"created": 1, "updated": 0, "unchanged": 0}
    assert changes == [("created", "pipeline-test")]
    with Session(engine) as s:
        article = s.exec(select(Article)).one()
    assert article.title == "Pipeline Test"
    assert article.category == "Production"
    assert article.content.startswith("<h2>Introduction</h2>")


def test_reimport_unchanged(source_file, engine):
    """A second import of the same bytes touches nothing."""
    run_import(str(source_file), engine)
    counts, changes = run_import(str(source_file), engine)
    assert counts["unchanged"] == 1
    assert changes == []


def test_reimport_after_edit_updates(source_file, engine):
    run_import(str(source_file), engine)
    source_file.write_text(CANONICAL_HTML.replace("More detailed", "Revised"))
    counts, changes = run_import(str(source_file), engine)
    assert counts["updated"] == 1
    assert changes == [("updated", "pipeline-test")]


def test_import_bad_file_raises(tmp_path, engine):
    bad = tmp_path / "bad.html"
    bad.write_text("---\ndate: someday\n---\n<p>x</p>")
    with pytest.raises(RuntimeError, match="Failed to import"):
        run_import(str(bad), engine)


# --- render ---

def test_render_writes_page_and_sidecar(source_file, engine, tmp_path):
    run_import(str(source_file), engine)
    results, out = _render(engine, tmp_path)
    assert results == [("pipeline-test", out / "pipeline-test.html")]
    assert (out / "pipeline-test.json").exists()


def test_render_block_layout(source_file, engine, tmp_path):
    """Sidecar blocks follow the canonical layout."""
    run_import(str(source_file), engine)
    _, out = _render(engine, tmp_path)
    blocks = json.loads((out / "pipeline-test.json").read_text())["blocks"]
    assert [b["type"] for b in blocks] == ["heading", "paragraph", "gallery", "heading", "paragraph"]
    assert blocks[0]["id"] == "introduction"
    assert blocks[2]["metadata"]["galleryStyle"] == "carousel"
    assert [i["caption"] for i in blocks[2]["metadata"]["images"]] == ["First", None]


def test_render_toc_levels(source_file, engine, tmp_path):
    run_import(str(source_file), engine)
    _, out = _render(engine, tmp_path, toc_levels=[3])
    data = json.loads((out / "pipeline-test.json").read_text())
    assert data["toc"] == [{"id": "details", "text": "Details", "level": 3}]
    assert data["publishedAt"] == "2026-01-15T00:00:00"


def test_render_page_html(source_file, engine, tmp_path):
    run_import(str(source_file), engine)
    _, out = _render(engine, tmp_path, cms_base_url="https://cms.example.com")
    html = (out / "pipeline-test.html").read_text()
    assert '<a href="#heading-details">Details</a>' in html
    assert '<p class="article-paragraph drop-cap">An introductory paragraph.</p>' in html
    assert 'class="gallery gallery-carousel"' in html
    assert '<p class="article-category">Production</p>' in html
