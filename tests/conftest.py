# -*- coding: utf-8 -*-
from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Optional

import pytest
import requests


def pytest_sessionstart(session) -> None:
    # Ensure project root is importable for tests
    root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(root))


class FakeResponse:
    def __init__(self, text: str = "", status_code: int = 200) -> None:
        self.text = text
        self.content = text.encode("utf-8")
        self.status_code = status_code
        self.encoding = "utf-8"
        self.headers = {"Content-Type": "text/html; charset=utf-8"}

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


def _essay_html(body: Optional[str] = None, extra_head: str = "") -> str:
    data = {"@type": "NewsArticle", "headline": "x"}
    if body is not None:
        data["articleBody"] = body
    return (
        "<html><head>"
        + extra_head
        + '<script type="application/ld+json">'
        + json.dumps(data)
        + "</script></head><body><p>ignored text</p></body></html>"
    )


@pytest.fixture
def essay_html():
    return _essay_html


class FakeWeb:
    """In-memory stand-in for ``requests.get``; unknown URLs fail to connect."""

    def __init__(self) -> None:
        self.pages: dict = {}
        self.calls: list = []

    def add(self, url: str, text: str, status_code: int = 200) -> None:
        self.pages[url] = FakeResponse(text, status_code)

    def get(self, url, *args, **kwargs):
        self.calls.append(url)
        if url not in self.pages:
            raise requests.ConnectionError(f"no route to {url!r}")
        return self.pages[url]


@pytest.fixture
def fake_web(monkeypatch):
    web = FakeWeb()
    monkeypatch.setattr(requests, "get", web.get, raising=True)
    return web
