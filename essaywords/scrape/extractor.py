"""Locate the ld+json block of an essay page and pull its article body."""

from __future__ import annotations

import json
from typing import Optional

from bs4 import BeautifulSoup, Tag

from essaywords.core.errors import DocumentParseError, StructuredDataError
from essaywords.infra.logging import get_logger

STRUCTURED_DATA_TYPE = "application/ld+json"
ARTICLE_BODY_FIELD = "articleBody"

logger = get_logger("scrape", "extract")


def parse_document(
    html: str | bytes, url: Optional[str] = None, encoding: Optional[str] = None
) -> BeautifulSoup:
    """Parse a page. Bytes without ``encoding`` are decoded from the page's own <meta charset>."""
    try:
        if isinstance(html, bytes) and encoding:
            return BeautifulSoup(html, "html.parser", from_encoding=encoding)
        return BeautifulSoup(html, "html.parser")
    except Exception as exc:
        raise DocumentParseError(f"cannot parse HTML from {url}: {exc}", url=url) from exc


def find_structured_block(soup: BeautifulSoup) -> Optional[Tag]:
    """First ``<script type="application/ld+json">`` in document order, if any.

    Only the first block is consulted, even when later blocks exist.
    """
    return soup.find("script", attrs={"type": STRUCTURED_DATA_TYPE})


def extract_article_body(soup: BeautifulSoup, url: Optional[str] = None) -> Optional[str]:
    """Return the ``articleBody`` string, or ``None`` when the page has none.

    Raises StructuredDataError when the block is not valid JSON.
    """
    block = find_structured_block(soup)
    if block is None:
        logger.debug("no %s block in %s", STRUCTURED_DATA_TYPE, url)
        return None

    raw = block.string or block.get_text()
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise StructuredDataError(f"malformed {STRUCTURED_DATA_TYPE} in {url}: {exc}", url=url) from exc

    if not isinstance(data, dict):
        logger.warning("%s block in %s is a %s, not an object", STRUCTURED_DATA_TYPE, url, type(data).__name__)
        return None
    body = data.get(ARTICLE_BODY_FIELD)
    if body is None:
        return None
    if not isinstance(body, str):
        logger.warning("%s in %s is a %s, not a string", ARTICLE_BODY_FIELD, url, type(body).__name__)
        return None
    return body
