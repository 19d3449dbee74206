from __future__ import annotations

import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from essaywords.aggregate.frequency import FrequencyTable
from essaywords.core.config import DEFAULT_MAX_BATCH
from essaywords.core.errors import FetchAborted
from essaywords.infra.logging import get_logger, log_batch_processing, mdc_scope

logger = get_logger("scrape", "batch")

FetchFn = Callable[[str], List[str]]


def partition(urls: Sequence[str], max_batch: int) -> List[List[str]]:
    """Split ``urls`` into contiguous batches of ``max_batch`` (the last may be shorter)."""
    if max_batch < 1:
        raise ValueError(f"max_batch must be >= 1, got {max_batch}")
    return [list(urls[i : i + max_batch]) for i in range(0, len(urls), max_batch)]


@dataclass
class ScheduleResults:
    total: int
    batches: int
    processed: int
    empty: int


class BatchScheduler:
    """Run fetches one batch at a time, fully parallel inside a batch.

    Each batch gets its own thread pool sized to the batch; leaving the pool's
    ``with`` block is the barrier before the next batch. The first fatal error
    sets ``abort``, cancels tasks that have not started, waits for the rest of
    the batch to wind down and is then re-raised. Later batches never start.
    """

    def __init__(self, max_batch: int = DEFAULT_MAX_BATCH, abort: Optional[threading.Event] = None) -> None:
        if max_batch < 1:
            raise ValueError(f"max_batch must be >= 1, got {max_batch}")
        self.max_batch = max_batch
        self.abort = abort or threading.Event()

    @staticmethod
    def _task(fetch: FetchFn, url: str) -> List[str]:
        with mdc_scope(url=url):
            return fetch(url)

    def run(self, urls: Sequence[str], fetch: FetchFn, aggregator: FrequencyTable) -> ScheduleResults:
        batches = partition(urls, self.max_batch)
        processed = 0
        empty = 0

        for n, batch in enumerate(batches, start=1):
            started = time.monotonic()
            failure: Optional[BaseException] = None

            with ThreadPoolExecutor(max_workers=len(batch), thread_name_prefix=f"batch{n}") as ex:
                futs = {ex.submit(self._task, fetch, u): u for u in batch}
                for fut in as_completed(futs):
                    if fut.cancelled():
                        continue
                    try:
                        words = fut.result()
                    except FetchAborted:
                        continue
                    except Exception as exc:
                        if failure is None:
                            failure = exc
                            logger.error("fatal error on %s, aborting run: %s", futs[fut], exc)
                            self.abort.set()
                            for other in futs:
                                other.cancel()
                        continue
                    if failure is not None:
                        continue
                    aggregator.record(words)
                    processed += 1
                    if not words:
                        empty += 1

            duration = time.monotonic() - started
            if failure is not None:
                log_batch_processing("scrape", "batch", n, len(batches), len(batch), duration, "aborted")
                raise failure
            log_batch_processing("scrape", "batch", n, len(batches), len(batch), duration, "done")

        return ScheduleResults(total=len(urls), batches=len(batches), processed=processed, empty=empty)
