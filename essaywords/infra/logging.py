"""Logging setup for essaywords.

Built on the standard library ``logging`` package configured through
``dictConfig``:

- Hierarchical loggers (e.g. ``essaywords.scrape.batch``)
- Console appender on stderr, so stdout stays reserved for the JSON result
- Pattern layout or JSON layout
- ``TRACE`` level (custom) and ``FATAL`` alias of CRITICAL
- MDC (Mapped Diagnostic Context) via ``contextvars``; each fetch thread puts
  its essay URL there so every line it logs is tagged with it

Environment variables (prefix ``EW_``):
- ``EW_LOG_LEVEL``: TRACE, DEBUG, INFO, WARN, ERROR, FATAL (default: INFO)
- ``EW_LOG_JSON``: 1 to enable JSON layout (default: 0)
"""

from __future__ import annotations

import contextvars
import json
import logging
import logging.config
import os
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

# ---------------- Levels: add TRACE, FATAL alias ----------------

TRACE_LEVEL = 5
if logging.getLevelName(TRACE_LEVEL) != "TRACE":
    logging.addLevelName(TRACE_LEVEL, "TRACE")


# ---------------- MDC (Mapped Diagnostic Context) ----------------

_MDC: contextvars.ContextVar[Dict[str, Any]] = contextvars.ContextVar("MDC", default={})


def mdc_get(key: str, default: Any = None) -> Any:
    return _MDC.get().get(key, default)


@contextmanager
def mdc_scope(**values: Any) -> Iterator[None]:
    """Temporarily add ``values`` to the MDC of the current thread."""
    token = _MDC.set({**_MDC.get(), **values})
    try:
        yield
    finally:
        _MDC.reset(token)


class MDCFilter(logging.Filter):
    """Inject MDC into LogRecord as dict and compact string."""

    def filter(self, record: logging.LogRecord) -> bool:
        d = _MDC.get()
        setattr(record, "mdc", d)
        if d:
            mdc_str = " ".join(f"{k}={v}" for k, v in d.items())
            setattr(record, "mdc_str", mdc_str)
            setattr(record, "mdc_suffix", f" | MDC: {mdc_str}")
        else:
            setattr(record, "mdc_str", "")
            setattr(record, "mdc_suffix", "")
        return True


# ---------------- Formatters ----------------


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "thread": record.threadName,
            "message": record.getMessage(),
        }
        mdc = getattr(record, "mdc", None)
        if isinstance(mdc, dict) and mdc:
            payload["mdc"] = mdc
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


# ---------------- Utilities ----------------

_CONFIGURED = False
_CACHE: Dict[str, logging.Logger] = {}


def _env_bool(name: str, default: bool = False) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return str(v).strip().lower() in {"1", "true", "yes", "on"}


def _level_from_env(name: str, default: str = "INFO") -> int:
    s = str(os.getenv(name, default)).strip().upper()
    aliases = {"WARN": "WARNING", "FATAL": "CRITICAL"}
    s = aliases.get(s, s)
    if s == "TRACE":
        return TRACE_LEVEL
    level = logging.getLevelName(s)
    return level if isinstance(level, int) else logging.INFO


def build_logging_config() -> Dict[str, Any]:
    """Build a dictConfig with one stderr console handler."""
    json_layout = _env_bool("EW_LOG_JSON", False)
    level = _level_from_env("EW_LOG_LEVEL", "INFO")

    fmt = "[%(asctime)s][%(levelname)s][%(name)s] %(message)s%(mdc_suffix)s"
    datefmt = "%Y-%m-%d %H:%M:%S"

    formatters: Dict[str, Any] = {
        "pattern": {
            "()": logging.Formatter,
            "format": fmt,
            "datefmt": datefmt,
        },
        "json": {
            "()": JSONFormatter,
        },
    }

    handlers: Dict[str, Any] = {
        "console": {
            "class": "logging.StreamHandler",
            "level": level,
            "formatter": "json" if json_layout else "pattern",
            "filters": ["mdc"],
            "stream": "ext://sys.stderr",
        }
    }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "mdc": {
                "()": MDCFilter,
            }
        },
        "formatters": formatters,
        "handlers": handlers,
        "loggers": {
            # urllib3 logs every connection at DEBUG; 2000 threads make that unreadable
            "urllib3": {"level": max(level, logging.WARNING)},
        },
        "root": {
            "level": level,
            "handlers": ["console"],
        },
    }


def init_logging(force: bool = False) -> None:
    """Initialize global logging using dictConfig.

    Safe to call multiple times; no-op if already configured unless ``force``.
    """
    global _CONFIGURED
    if _CONFIGURED and not force:
        return
    logging.config.dictConfig(build_logging_config())
    _CONFIGURED = True


def get_logger(program: str, task_type: str) -> logging.Logger:
    """Return a hierarchical logger like ``essaywords.<program>.<task_type>``.

    Handlers live on the root; callers decide when to ``init_logging``.
    """
    name = f"essaywords.{program}.{task_type}".strip(".")
    if name in _CACHE:
        return _CACHE[name]
    logger = logging.getLogger(name)
    _CACHE[name] = logger
    return logger


def log_task_start(program: str, task_type: str, details: Optional[Dict[str, Any]] = None) -> None:
    logger = get_logger(program, task_type)
    logger.info("[TASK START] %s", json.dumps(details or {}, ensure_ascii=False))


def log_task_end(
    program: str, task_type: str, success: bool, details: Optional[Dict[str, Any]] = None
) -> None:
    logger = get_logger(program, task_type)
    payload: Dict[str, Any] = {"success": success}
    if details:
        payload.update(details)
    logger.info("[TASK END] %s", json.dumps(payload, ensure_ascii=False))


def log_error(program: str, task_type: str, error: Exception, context: str = "") -> None:
    logger = get_logger(program, task_type)
    if context:
        logger.error("%s | %s", context, error)
    else:
        logger.error("%s", error)


def log_batch_processing(
    program: str,
    task_type: str,
    batch_number: int,
    total_batches: int,
    size: int,
    duration: float,
    status: str,
    extra: Optional[Dict[str, Any]] = None,
) -> None:
    logger = get_logger(program, task_type)
    payload: Dict[str, Any] = {
        "batch": batch_number,
        "of": total_batches,
        "size": size,
        "duration": round(duration, 3),
        "status": status,
    }
    if extra:
        payload.update(extra)
    logger.info("[BATCH] %s", json.dumps(payload, ensure_ascii=False))


__all__ = [
    "init_logging",
    "build_logging_config",
    "mdc_get",
    "mdc_scope",
    "get_logger",
    "log_task_start",
    "log_task_end",
    "log_error",
    "log_batch_processing",
]
