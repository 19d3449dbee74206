from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from essaywords.core.errors import ConfigError

DEFAULT_DICTIONARY_URL = "https://raw.githubusercontent.com/dwyl/english-words/master/words.txt"
DEFAULT_URLS_FILE = "endg-urls.txt"
DEFAULT_MAX_BATCH = 2000
DEFAULT_TOP_K = 10
DEFAULT_MIN_DELAY = 0.2
DEFAULT_MAX_DELAY = 1.0
DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; essaywords/1.0)"


def _env_int(name: str, default: int) -> int:
    v = os.getenv(name)
    return int(v) if v else default


def _env_float(name: str, default: Optional[float]) -> Optional[float]:
    v = os.getenv(name)
    return float(v) if v else default


@dataclass
class RunSettings:
    urls_file: str = field(default_factory=lambda: os.getenv("EW_URLS_FILE", DEFAULT_URLS_FILE))
    dictionary_source: str = field(
        default_factory=lambda: os.getenv("EW_DICTIONARY_SOURCE", DEFAULT_DICTIONARY_URL)
    )
    max_batch: int = field(default_factory=lambda: _env_int("EW_MAX_BATCH", DEFAULT_MAX_BATCH))
    top_k: int = field(default_factory=lambda: _env_int("EW_TOP_K", DEFAULT_TOP_K))
    min_delay: float = field(
        default_factory=lambda: _env_float("EW_MIN_DELAY", DEFAULT_MIN_DELAY)  # type: ignore[return-value]
    )
    max_delay: float = field(
        default_factory=lambda: _env_float("EW_MAX_DELAY", DEFAULT_MAX_DELAY)  # type: ignore[return-value]
    )
    # None leaves the transport default in place (no timeout)
    timeout: Optional[float] = field(default_factory=lambda: _env_float("EW_TIMEOUT", None))
    user_agent: str = field(default_factory=lambda: os.getenv("EW_USER_AGENT", DEFAULT_USER_AGENT))

    def validate(self) -> "RunSettings":
        if self.max_batch < 1:
            raise ConfigError(f"max_batch must be >= 1, got {self.max_batch}")
        if self.top_k < 0:
            raise ConfigError(f"top_k must be >= 0, got {self.top_k}")
        if self.min_delay < 0 or self.max_delay < self.min_delay:
            raise ConfigError(
                f"delay window must satisfy 0 <= min <= max, got [{self.min_delay}, {self.max_delay})"
            )
        if self.timeout is not None and self.timeout <= 0:
            raise ConfigError(f"timeout must be positive, got {self.timeout}")
        return self

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_config_file(path: Optional[str | Path]) -> Dict[str, Any]:
    """Load a YAML or JSON config file into a dict. Missing files yield ``{}``."""
    if not path:
        return {}
    p = Path(path)
    if not p.exists():
        return {}

    try:
        with p.open("r", encoding="utf-8") as f:
            if p.suffix.lower() in (".yml", ".yaml"):
                data = yaml.safe_load(f) or {}
            else:
                data = json.load(f) or {}
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigError(f"cannot parse config file {p}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"config file {p} must contain a mapping")
    return data


def merge_config(*layers: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Merge config layers left to right; later non-None values win."""
    out: Dict[str, Any] = {}
    for layer in layers:
        for k, v in (layer or {}).items():
            if v is not None:
                out[k] = v
    return out


def build_settings(conf: Dict[str, Any]) -> RunSettings:
    """Overlay a merged config dict on top of env-backed defaults."""
    known = {f.name for f in fields(RunSettings)}
    unknown = sorted(set(conf) - known)
    if unknown:
        raise ConfigError(f"unknown config keys: {', '.join(unknown)}")
    try:
        settings = RunSettings()
        for key, value in conf.items():
            current = getattr(settings, key)
            if key == "timeout" or isinstance(current, float):
                value = float(value)
            elif isinstance(current, int):
                value = int(value)
            else:
                value = str(value)
            setattr(settings, key, value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"invalid config value: {exc}") from exc
    return settings.validate()
