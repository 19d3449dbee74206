"""Tokenizing and validating essay words."""

from __future__ import annotations

import re
from typing import AbstractSet, List

MIN_WORD_LENGTH = 3

_TOKEN_RE = re.compile(r"\b[a-z]{3,}\b")
_ASCII_LETTERS_RE = re.compile(r"[A-Za-z]+")


def is_well_formed(token: str) -> bool:
    """At least three characters, all ASCII letters."""
    return len(token) >= MIN_WORD_LENGTH and _ASCII_LETTERS_RE.fullmatch(token) is not None


def in_dictionary(token: str, dictionary: AbstractSet[str]) -> bool:
    return token.lower() in dictionary


def is_valid(token: str, dictionary: AbstractSet[str]) -> bool:
    return is_well_formed(token) and in_dictionary(token, dictionary)


def tokenize(text: str) -> List[str]:
    """Return runs of 3+ letters bounded by word boundaries, lowercased, in order."""
    return _TOKEN_RE.findall(text.lower())


def valid_words(text: str, dictionary: AbstractSet[str]) -> List[str]:
    return [t for t in tokenize(text) if is_valid(t, dictionary)]
