"""End-to-end run: load inputs, fetch in batches, aggregate, rank."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import AbstractSet, Dict, List, Optional, Sequence, Tuple

from essaywords.aggregate.frequency import FrequencyTable
from essaywords.aggregate.ranking import to_ordered_mapping, top_k
from essaywords.core.config import RunSettings
from essaywords.infra.logging import get_logger, log_task_end, log_task_start
from essaywords.scrape.fetcher import EssayFetcher
from essaywords.scrape.scheduler import BatchScheduler, ScheduleResults
from essaywords.services.sources import load_dictionary, load_essay_urls

logger = get_logger("pipeline", "run")


@dataclass
class RunResults:
    ranked: List[Tuple[str, int]]
    schedule: ScheduleResults
    distinct_words: int
    top: Dict[str, int] = field(init=False)

    def __post_init__(self) -> None:
        self.top = to_ordered_mapping(self.ranked)


def count_words(
    urls: Sequence[str],
    dictionary: AbstractSet[str],
    settings: RunSettings,
    fetcher: Optional[EssayFetcher] = None,
) -> RunResults:
    """Fetch every essay, aggregate word counts and rank them.

    Any fatal error from a fetch propagates; nothing is ranked in that case.
    """
    fetcher = fetcher or EssayFetcher(dictionary, settings)
    scheduler = BatchScheduler(settings.max_batch, abort=fetcher.abort)
    table = FrequencyTable()

    log_task_start("pipeline", "run", {"essays": len(urls), "max_batch": settings.max_batch})
    schedule = scheduler.run(urls, fetcher.fetch, table)
    counts = table.freeze()
    ranked = top_k(counts, settings.top_k)
    res = RunResults(ranked=ranked, schedule=schedule, distinct_words=len(counts))
    log_task_end(
        "pipeline", "run", True, {**asdict(schedule), "distinct_words": res.distinct_words}
    )
    return res


def run_pipeline(settings: RunSettings) -> RunResults:
    dictionary = load_dictionary(settings.dictionary_source, timeout=settings.timeout)
    urls = load_essay_urls(settings.urls_file)
    return count_words(urls, dictionary, settings)


def render_json(top: Dict[str, int]) -> str:
    return json.dumps(top, ensure_ascii=False, indent=2)


def save_result(top: Dict[str, int], path: str | Path) -> Path:
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(render_json(top) + "\n", encoding="utf-8")
    logger.info("result saved: %s", out_path)
    return out_path
