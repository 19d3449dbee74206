from __future__ import annotations

import random
import threading
import time
from typing import AbstractSet, Callable, List, Optional

import requests

from essaywords.core.config import RunSettings
from essaywords.core.errors import EssayFetchError, FetchAborted
from essaywords.infra.logging import get_logger
from essaywords.scrape.extractor import ARTICLE_BODY_FIELD, extract_article_body, parse_document
from essaywords.text.words import valid_words

logger = get_logger("scrape", "fetch")

# upstream throttling; the page is parsed and logged as a rate-limit anomaly instead of aborting
TOLERATED_STATUSES = frozenset({429})


class EssayFetcher:
    """Fetch one essay page and return the dictionary words it contains.

    One attempt per URL. Transport failures and non-2xx responses outside
    TOLERATED_STATUSES raise EssayFetchError, which the scheduler treats as
    fatal for the whole run.
    """

    def __init__(
        self,
        dictionary: AbstractSet[str],
        settings: RunSettings,
        abort: Optional[threading.Event] = None,
        sleep: Callable[[float], None] = time.sleep,
        jitter: Callable[[float, float], float] = random.uniform,
    ) -> None:
        self.dictionary = dictionary
        self.settings = settings
        self.abort = abort or threading.Event()
        self._sleep = sleep
        self._jitter = jitter
        self._headers = {"User-Agent": settings.user_agent}

    def _delay(self) -> float:
        lo, hi = self.settings.min_delay, self.settings.max_delay
        d = self._jitter(lo, hi)
        # uniform() may return hi itself; keep the window half-open
        return lo if d >= hi else d

    def _get(self, url: str) -> requests.Response:
        try:
            r = requests.get(url, headers=self._headers, timeout=self.settings.timeout)
            if r.status_code not in TOLERATED_STATUSES:
                r.raise_for_status()
        except requests.RequestException as exc:
            raise EssayFetchError(f"GET {url!r} failed: {exc}", url=url) from exc
        return r

    def fetch(self, url: str) -> List[str]:
        # spread requests out so a full batch doesn't hit the host at once
        self._sleep(self._delay())
        if self.abort.is_set():
            raise FetchAborted(f"run aborted before fetching {url}", url=url)

        r = self._get(url)
        throttled = r.status_code in TOLERATED_STATUSES
        # only trust a charset the server actually declared; requests would otherwise guess ISO-8859-1
        declared = r.encoding if "charset=" in r.headers.get("Content-Type", "").lower() else None
        soup = parse_document(r.content, url, declared)
        body = extract_article_body(soup, url)
        if body is None and not throttled:
            logger.warning("%s not found in %s", ARTICLE_BODY_FIELD, url)
            return []

        words = valid_words(body or "", self.dictionary)
        if not words:
            logger.warning("no valid words found in %s, likely being rate limited (HTTP %d)", url, r.status_code)
        else:
            logger.debug("%d valid words from %s", len(words), url)
        return words
