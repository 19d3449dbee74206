from __future__ import annotations

from typing import Dict, List, Mapping, Tuple

DEFAULT_K = 10


def top_k(table: Mapping[str, int], k: int = DEFAULT_K) -> List[Tuple[str, int]]:
    """Return the ``k`` most frequent ``(word, count)`` pairs.

    Sorted by count descending; equal counts are ordered by word ascending so
    the result never depends on dict iteration order.
    """
    if k < 0:
        raise ValueError(f"k must be >= 0, got {k}")
    ranked = sorted(table.items(), key=lambda item: (-item[1], item[0]))
    return ranked[:k]


def to_ordered_mapping(ranked: List[Tuple[str, int]]) -> Dict[str, int]:
    """Ranked pairs as a dict whose insertion order is the ranking."""
    return {word: count for word, count in ranked}
