from __future__ import annotations

import pytest

from essaywords.core.errors import StructuredDataError
from essaywords.scrape.extractor import extract_article_body, find_structured_block, parse_document


def test_extracts_article_body(essay_html):
    soup = parse_document(essay_html("The cat sat."))
    assert extract_article_body(soup) == "The cat sat."


def test_missing_article_body_is_not_found(essay_html):
    soup = parse_document(essay_html(None))
    assert extract_article_body(soup, "https://e.x/1") is None


def test_no_structured_block_is_not_found():
    soup = parse_document("<html><body><script>var a = 1;</script><p>text</p></body></html>")
    assert find_structured_block(soup) is None
    assert extract_article_body(soup) is None


def test_first_block_in_document_order_wins(essay_html):
    first = '<script type="application/ld+json">{"@type": "WebSite", "name": "site"}</script>'
    soup = parse_document(essay_html("second block body", extra_head=first))
    # the first block has no articleBody, later blocks are not consulted
    assert extract_article_body(soup) is None


def test_nested_block_is_found():
    html = (
        "<html><body><div><section><article>"
        '<script type="application/ld+json">{"articleBody": "deep"}</script>'
        "</article></section></div></body></html>"
    )
    assert extract_article_body(parse_document(html)) == "deep"


def test_malformed_json_is_fatal():
    html = '<html><head><script type="application/ld+json">{"articleBody": </script></head></html>'
    with pytest.raises(StructuredDataError) as ei:
        extract_article_body(parse_document(html), "https://e.x/bad")
    assert ei.value.url == "https://e.x/bad"


def test_empty_block_is_fatal():
    html = '<html><head><script type="application/ld+json"></script></head></html>'
    with pytest.raises(StructuredDataError):
        extract_article_body(parse_document(html))


def test_non_object_payloads_are_not_found():
    arr = '<script type="application/ld+json">[{"articleBody": "x"}]</script>'
    num = '<script type="application/ld+json">{"articleBody": 42}</script>'
    assert extract_article_body(parse_document(arr)) is None
    assert extract_article_body(parse_document(num)) is None
