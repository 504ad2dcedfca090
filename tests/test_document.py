"""Tests for document wrapping."""

from notepile.core.document import (
    DOCUMENT_CSS,
    ROOT_ELEMENT_ID,
    image_tag,
    plain_text_block,
    wrap_document,
)


def test_fragment_is_wrapped_verbatim():
    fragment = '<p>Hi <img src="attachments/a.png" width="320" /></p>'
    doc = wrap_document(fragment)

    assert doc.startswith("<!DOCTYPE html>")
    assert f'<div id="{ROOT_ELEMENT_ID}">{fragment}</div>' in doc
    assert DOCUMENT_CSS in doc
    assert '<meta charset="utf-8"/>' in doc
    assert "<base" not in doc
    assert 'name="viewport"' not in doc


def test_base_url_gets_trailing_slash():
    doc = wrap_document("<p>x</p>", base_url="file:///notes/Work/Meetings/notes")
    assert '<base href="file:///notes/Work/Meetings/notes/"/>' in doc

    doc = wrap_document("<p>x</p>", base_url="file:///n/")
    assert '<base href="file:///n/"/>' in doc


def test_base_url_is_escaped():
    doc = wrap_document("", base_url='file:///a"b/')
    assert 'href="file:///a&quot;b/"' in doc


def test_width_sets_viewport():
    doc = wrap_document("", width=468)
    assert '<meta name="viewport" content="width=468"/>' in doc


def test_document_css_lets_content_define_height():
    assert "height:auto" in DOCUMENT_CSS
    assert "img{max-width:100%" in DOCUMENT_CSS
    assert "pre-wrap" in DOCUMENT_CSS


def test_plain_text_block_escapes():
    assert plain_text_block("a < b & c") == "<pre>a &lt; b &amp; c</pre>"
    assert plain_text_block(None) == "<pre></pre>"


def test_image_tag():
    assert image_tag("plot.png") == '<img src="attachments/plot.png" alt="plot.png" />'
    assert image_tag("plot.png", 320) == (
        '<img src="attachments/plot.png" alt="plot.png" width="320" />'
    )
