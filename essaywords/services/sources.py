from __future__ import annotations

from pathlib import Path
from typing import FrozenSet, List, Optional
from urllib.parse import urlparse

import requests

from essaywords.core.errors import DictionaryLoadError, EssayListError
from essaywords.infra.logging import get_logger

logger = get_logger("sources", "load")


def _is_remote(source: str) -> bool:
    return urlparse(source).scheme.lower() in ("http", "https")


def _scan_lines(text: str) -> List[str]:
    """Split on ``\\n`` only, dropping one trailing ``\\r`` per line and the empty tail after a final newline."""
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _build_dictionary(lines: List[str]) -> FrozenSet[str]:
    # entries are only lowercased; malformed ones are rejected later by the validator
    return frozenset(line.lower() for line in lines)


def load_dictionary(source: str, timeout: Optional[float] = None) -> FrozenSet[str]:
    """Load the reference word list from a URL or a local file."""
    if _is_remote(source):
        try:
            r = requests.get(source, timeout=timeout)
            r.raise_for_status()
        except requests.RequestException as exc:
            raise DictionaryLoadError(f"cannot fetch word list {source}: {exc}") from exc
        text = r.text
    else:
        try:
            text = Path(source).read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise DictionaryLoadError(f"cannot read word list {source}: {exc}") from exc

    words = _build_dictionary(_scan_lines(text))
    logger.info("words in dictionary: %d", len(words))
    return words


def load_essay_urls(path: str | Path) -> List[str]:
    """Read the essay list, one URL per line.

    The text is split on ``\\n`` only and nothing is trimmed, so a trailing
    newline produces a final empty entry.
    """
    try:
        text = Path(path).read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise EssayListError(f"cannot read essay list {path}: {exc}") from exc
    urls = text.split("\n")
    logger.info("essays: %d", len(urls))
    return urls
