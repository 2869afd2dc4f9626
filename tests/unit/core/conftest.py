"""Shared fixtures for core unit tests"""

from itertools import count

import pytest


GALLERY_HTML = """\
<figure class="wp-block-gallery has-nested-images columns-3 is-cropped">
<figure class="wp-block-image size-large"><img src="https://cdn.example.com/one.jpg" alt="One"/><figcaption class="wp-element-caption">First</figcaption></figure>
<figure class="wp-block-image size-large"><img src="https://cdn.example.com/two.jpg" alt="Two"/><figcaption class="wp-element-caption">Second</figcaption></figure>
<figure class="wp-block-image size-large"><img src="https://cdn.example.com/three.jpg" alt="Three"/><figcaption class="wp-element-caption"><em>Third</em></figcaption></figure>
</figure>
"""

# Items are not wrapped in wp-block-accordion-item divs, so only the toggle/panel fallback matches.
LOOSE_ACCORDION_HTML = """\
<div class="wp-block-accordion">
<div class="entry"><button class="wp-block-accordion-heading__toggle"><span>What is a ground plan?</span></button><div class="wp-block-accordion-panel"><p>A top-down drawing.</p></div></div>
<div class="entry"><button class="wp-block-accordion-heading__toggle"><span>Who reads it?</span></button><div class="wp-block-accordion-panel"><p>The whole crew &amp; cast.</p></div></div>
</div>
"""

ACCORDION_HTML = """\
<div class="wp-block-accordion">
<div class="wp-block-accordion-item"><h3 class="wp-block-accordion-heading"><button class="wp-block-accordion-heading__toggle"><span>Question one</span></button></h3><div class="wp-block-accordion-panel"><p>Answer one</p></div></div>
<div class="wp-block-accordion-item"><h3 class="wp-block-accordion-heading"><button class="wp-block-accordion-heading__toggle"><span>Question two</span></button></h3><div class="wp-block-accordion-panel"><p>Answer two</p></div></div>
</div>
"""

YOUTUBE_EMBED_HTML = """\
<figure class="wp-block-embed is-type-video is-provider-youtube wp-block-embed-youtube"><div class="wp-block-embed__wrapper">
<iframe title="Set reveal" src="https://www.youtube.com/embed/abc12345678?feature=oembed" allowfullscreen></iframe>
</div></figure>
"""


@pytest.fixture(name="ids")
def ids_fixture():
    """Fresh per-parse id counter."""
    return count(1)


@pytest.fixture(name="gallery_html")
def gallery_html_fixture():
    return GALLERY_HTML


@pytest.fixture(name="accordion_html")
def accordion_html_fixture():
    return ACCORDION_HTML


@pytest.fixture(name="loose_accordion_html")
def loose_accordion_html_fixture():
    return LOOSE_ACCORDION_HTML


@pytest.fixture(name="youtube_embed_html")
def youtube_embed_html_fixture():
    return YOUTUBE_EMBED_HTML
