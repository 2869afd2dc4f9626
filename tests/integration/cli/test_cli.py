"""Integration tests for the CLI commands (init, import, parse, list, render)"""

import json

import pytest
from typer.testing import CliRunner

from blockpress.cli.cli import app


ARTICLE = """\
---
title: Hello Stage
---
<h2>Cue One</h2><p>Lights up.</p>
"""

DRAFT = """\
---
title: Draft Notes
published: false
---
<p>Not yet.</p>
"""


@pytest.fixture(name="runner")
def runner_fixture():
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("BLOCKPRESS_DB_URL", f"sqlite:///{tmp_path}/test.db")


@pytest.fixture(name="articles_dir")
def articles_dir_fixture(tmp_path):
    d = tmp_path / "articles"
    d.mkdir()
    (d / "hello-stage.html").write_text(ARTICLE)
    (d / "draft-notes.html").write_text(DRAFT)
    return d


def test_help(runner):
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0


def test_init(runner, tmp_path):
    result = runner.invoke(app, ["init"])
    assert result.exit_code == 0, result.output
    assert "Database initialized" in result.output
    assert (tmp_path / "test.db").exists()


def test_init_reset(runner):
    result = runner.invoke(app, ["init", "--reset"])
    assert result.exit_code == 0, result.output
    assert "Existing data cleared." in result.output


def test_import_then_list(runner, articles_dir):
    """import reports per-article changes; list shows drafts marked."""
    result = runner.invoke(app, ["import", str(articles_dir)])
    assert result.exit_code == 0, result.output
    assert "Import complete - 2 created, 0 updated, 0 unchanged" in result.output

    result = runner.invoke(app, ["list"])
    assert result.exit_code == 0, result.output
    assert "draft-notes  Draft Notes  (draft)" in result.output
    assert "hello-stage  Hello Stage" in result.output

    result = runner.invoke(app, ["list", "--published"])
    assert "draft-notes" not in result.output


def test_reimport_is_unchanged(runner, articles_dir):
    runner.invoke(app, ["import", str(articles_dir)])
    result = runner.invoke(app, ["import", str(articles_dir)])
    assert "0 created, 0 updated, 2 unchanged" in result.output


def test_import_failure_exits_1(runner, tmp_path):
    bad = tmp_path / "bad.html"
    bad.write_text("---\ntitle: [unclosed\n---\n<p>x</p>")
    result = runner.invoke(app, ["import", str(bad)])
    assert result.exit_code == 1
    assert "Failed to import" in result.output


def test_list_empty_exits_1(runner):
    result = runner.invoke(app, ["list"])
    assert result.exit_code == 1
    assert "No articles found in database." in result.output


def test_parse_prints_blocks(runner, articles_dir):
    result = runner.invoke(app, ["parse", str(articles_dir / "hello-stage.html")])
    assert result.exit_code == 0, result.output
    blocks = json.loads(result.stdout)
    assert [(b["type"], b["content"]) for b in blocks] == [("heading", "Cue One"), ("paragraph", "Lights up.")]


def test_parse_toc(runner, articles_dir):
    result = runner.invoke(app, ["parse", str(articles_dir / "hello-stage.html"), "--toc"])
    assert json.loads(result.stdout) == [{"id": "cue-one", "text": "Cue One", "level": 2}]


def test_parse_missing_file(runner, tmp_path):
    result = runner.invoke(app, ["parse", str(tmp_path / "nope.html")])
    assert result.exit_code == 1
    assert "Cannot read" in result.output


def test_render_all(runner, articles_dir, tmp_path):
    """--all renders only published articles."""
    runner.invoke(app, ["import", str(articles_dir)])
    result = runner.invoke(app, ["render", "--all", "--out-dir", str(tmp_path / "site")])
    assert result.exit_code == 0, result.output
    assert "Rendered 1 article(s)" in result.output
    assert (tmp_path / "site" / "hello-stage.html").exists()
    assert not (tmp_path / "site" / "draft-notes.html").exists()


def test_render_single_slug(runner, articles_dir, tmp_path):
    runner.invoke(app, ["import", str(articles_dir)])
    result = runner.invoke(app, ["render", "draft-notes"])
    assert result.exit_code == 0, result.output
    assert (tmp_path / "dist" / "draft-notes.json").exists()


def test_render_unknown_slug(runner):
    result = runner.invoke(app, ["render", "missing"])
    assert result.exit_code == 1
    assert "No article with slug 'missing'." in result.output


def test_render_requires_target(runner):
    result = runner.invoke(app, ["render"])
    assert result.exit_code == 1
    assert "Specify a SLUG or --all." in result.output


def test_render_all_empty(runner):
    result = runner.invoke(app, ["render", "--all"])
    assert result.exit_code == 1
    assert "No published articles to render." in result.output
