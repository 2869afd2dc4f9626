"""Unit tests for render/inline.py"""

import pytest

from blockpress.render.inline import (
    format_inline, format_text, has_rich_tags, inject_heading_ids, render_link, rewrite_cms_links, strip_cms,
)


CMS = "https://cms.example.com"


def test_plain_text_passes_through():
    assert format_inline("No markup here.") == "No markup here."


def test_markdown_bold_carries_accent():
    assert format_inline("a **b** c", accent="#ff0000") == 'a <strong class="inline-strong" style="color: #ff0000">b</strong> c'


def test_markdown_bold_without_accent():
    assert format_inline("**b**") == '<strong class="inline-strong">b</strong>'


def test_markdown_italic():
    assert format_inline("an *idea*") == "an <em>idea</em>"


def test_markdown_link_internal():
    """Site-relative links stay in the tab."""
    assert format_inline("[Work](/work)") == '<a href="/work" class="inline-link">Work</a>'


def test_markdown_link_external():
    html = format_inline("[Docs](https://example.org)")
    assert 'href="https://example.org"' in html
    assert 'target="_blank"' in html
    assert 'rel="noopener noreferrer"' in html


def test_html_forms():
    """<a>, <strong>/<b>, <em>/<i> and <br> are recognized in the same pass."""
    html = format_inline('x <b>B</b> <i>I</i><br/><a href="/p">link <em>in</em></a>')
    assert html == (
        'x <strong class="inline-strong">B</strong> <em>I</em><br>'
        '<a href="/p" class="inline-link">link <em>in</em></a>'
    )


def test_matches_replaced_left_to_right():
    assert format_inline("*a* and **b** then [c](/c)") == (
        '<em>a</em> and <strong class="inline-strong">b</strong> then <a href="/c" class="inline-link">c</a>'
    )


def test_unmatched_markers_are_verbatim():
    assert format_inline("2 * 3 = 6 and [not a link]") == "2 * 3 = 6 and [not a link]"


def test_matched_text_is_escaped():
    assert format_inline("**<script>**") == '<strong class="inline-strong">&lt;script&gt;</strong>'


def test_cms_link_becomes_internal():
    assert format_inline(f"[About]({CMS}/about)", cms_base_url=CMS) == '<a href="/about" class="inline-link">About</a>'


def test_strip_cms():
    assert strip_cms(f"{CMS}/a/b", CMS + "/") == "/a/b"
    assert strip_cms(CMS, CMS) == "/"
    assert strip_cms("https://other.example.com/a", CMS) == "https://other.example.com/a"


def test_render_link_protocol_relative_is_external():
    assert 'target="_blank"' in render_link("//cdn.example.com/x", "x")


def test_format_text_passes_block_html_through():
    html = format_text(f'<p>One <a href="{CMS}/x">x</a></p>', cms_base_url=CMS)
    assert html == '<div class="rich-content"><p>One <a href="/x">x</a></p></div>'


def test_format_text_inline_for_simple_text():
    assert format_text("**hi**") == '<strong class="inline-strong">hi</strong>'


@pytest.mark.parametrize("text,expected", [
    ("Hello <strong>world</strong>", True),
    ("line<br>break", True),
    ('<span class="x">s</span>', True),
    ("3 < 4 and <abbr>", False),
    ("plain", False),
])
def test_has_rich_tags(text, expected):
    assert has_rich_tags(text) is expected


def test_inject_heading_ids():
    """Embedded headings get heading-<slug> ids; existing ids are left alone."""
    html = '<h2>The <em>Model</em> Box</h2><h3 id="keep">Kept</h3><h4>???</h4>'
    assert inject_heading_ids(html) == (
        '<h2 id="heading-the-model-box">The <em>Model</em> Box</h2><h3 id="keep">Kept</h3><h4>???</h4>'
    )


def test_rewrite_cms_links():
    html = f'<a href="{CMS}/work/hamlet">H</a> <a href="{CMS}">Home</a> <a href="https://else.org/">E</a>'
    assert rewrite_cms_links(html, CMS) == '<a href="/work/hamlet">H</a> <a href="/">Home</a> <a href="https://else.org/">E</a>'


def test_rewrite_cms_links_noop_without_base():
    assert rewrite_cms_links('<a href="https://x.org">x</a>') == '<a href="https://x.org">x</a>'
