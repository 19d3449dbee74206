from __future__ import annotations

import threading
from collections import Counter
from typing import Dict, Iterable


class FrequencyTable:
    """Word counts shared by every fetch thread of a run.

    All mutations go through ``record`` under a single lock. Summation is
    commutative, so completion order never changes the final counts.
    """

    def __init__(self) -> None:
        self._counts: Counter[str] = Counter()
        self._lock = threading.Lock()
        self._frozen = False

    def record(self, words: Iterable[str]) -> None:
        with self._lock:
            if self._frozen:
                raise RuntimeError("frequency table is frozen")
            self._counts.update(words)

    def snapshot(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._counts)

    def freeze(self) -> Dict[str, int]:
        """Stop accepting updates and return the final counts."""
        with self._lock:
            self._frozen = True
            return dict(self._counts)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __len__(self) -> int:
        with self._lock:
            return len(self._counts)
