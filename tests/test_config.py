from __future__ import annotations

from pathlib import Path

import pytest

from essaywords.core.config import (
    DEFAULT_DICTIONARY_URL,
    RunSettings,
    build_settings,
    load_config_file,
    merge_config,
)
from essaywords.core.errors import ConfigError


def test_defaults(monkeypatch):
    for name in ("EW_MAX_BATCH", "EW_TOP_K", "EW_TIMEOUT", "EW_DICTIONARY_SOURCE", "EW_MIN_DELAY", "EW_MAX_DELAY"):
        monkeypatch.delenv(name, raising=False)
    s = RunSettings()
    assert s.max_batch == 2000
    assert s.top_k == 10
    assert (s.min_delay, s.max_delay) == (0.2, 1.0)
    assert s.timeout is None
    assert s.dictionary_source == DEFAULT_DICTIONARY_URL


def test_env_overrides_defaults(monkeypatch):
    monkeypatch.setenv("EW_MAX_BATCH", "50")
    monkeypatch.setenv("EW_TIMEOUT", "7.5")
    s = RunSettings()
    assert s.max_batch == 50
    assert s.timeout == 7.5


def test_load_yaml_and_json(tmp_path: Path):
    y = tmp_path / "cfg.yml"
    y.write_text("max_batch: 10\ntop_k: 3\n", encoding="utf-8")
    j = tmp_path / "cfg.json"
    j.write_text('{"max_batch": 4}', encoding="utf-8")
    assert load_config_file(y) == {"max_batch": 10, "top_k": 3}
    assert load_config_file(j) == {"max_batch": 4}
    assert load_config_file(tmp_path / "missing.yml") == {}
    assert load_config_file(None) == {}


def test_load_rejects_non_mapping(tmp_path: Path):
    p = tmp_path / "cfg.yml"
    p.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config_file(p)


def test_merge_later_non_none_wins():
    merged = merge_config({"top_k": 3, "max_batch": 10}, None, {"top_k": None, "max_batch": 5})
    assert merged == {"top_k": 3, "max_batch": 5}


def test_build_settings_coerces_and_validates():
    s = build_settings({"max_batch": "25", "min_delay": 0, "max_delay": "0.5", "timeout": 3})
    assert s.max_batch == 25
    assert s.min_delay == 0.0 and s.max_delay == 0.5
    assert s.timeout == 3.0


@pytest.mark.parametrize(
    "conf",
    [
        {"max_batch": 0},
        {"top_k": -1},
        {"min_delay": 2, "max_delay": 1},
        {"timeout": 0},
        {"max_batch": "many"},
        {"no_such_key": 1},
    ],
)
def test_build_settings_rejects_bad_values(conf):
    with pytest.raises(ConfigError):
        build_settings(conf)
