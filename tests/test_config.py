from pathlib import Path

import pytest

from ipstats.config import (
    DEFAULT_FORMAT,
    DEFAULT_NUMERIC_FORMAT,
    AppConfig,
    config_to_snapshot,
    load_config,
    with_overrides,
)
from ipstats.errors import ConfigurationError


def test_defaults():
    cfg = AppConfig()
    assert cfg.selector_index == 1
    assert cfg.resolve_hostnames is True
    assert cfg.min_threshold is None
    assert cfg.max_results is None
    assert cfg.entry_format() == DEFAULT_FORMAT


def test_numeric_default_format():
    cfg = with_overrides(AppConfig(), {"resolve_hostnames": False})
    assert cfg.entry_format() == DEFAULT_NUMERIC_FORMAT


@pytest.mark.parametrize(
    "overrides",
    [
        {"selector_index": 0},
        {"selector_index": -3},
        {"min_threshold": -1},
        {"max_results": 0},
        {"pattern": "("},
        {"pattern": r"\d+", "fixed_ips": True},
        {"fixed_ips": True, "selector_index": 2},
        {"resolver": {"timeout": 0}},
        {"resolver": {"workers": 0}},
        {"output": {"kind": "xml"}},
        {"output": {"format": "{cnt} {port}"}},
        {"output": {"format": "{}"}},
        {"output": {"format": "{cnt:d}x{ip:d}"}},
        {"output": {"kind": "table", "path": "out.txt"}},
        {"resolve_hostnames": False, "output": {"format": "{host}"}},
    ],
)
def test_invalid_values_are_rejected(overrides):
    with pytest.raises(ConfigurationError):
        with_overrides(AppConfig(), overrides)


def test_overrides_skip_none():
    cfg = with_overrides(AppConfig(), {"selector_index": 3})
    cfg = with_overrides(cfg, {"selector_index": None, "resolver": {"timeout": None, "workers": 2}})
    assert cfg.selector_index == 3
    assert cfg.resolver.workers == 2
    assert cfg.resolver.timeout == 2.0


def test_load_yaml(tmp_path: Path):
    p = tmp_path / "ipstats.yml"
    p.write_text(
        "selector_index: 2\n"
        "min_threshold: 3\n"
        "resolver:\n"
        "  timeout: 0.5\n"
        "output:\n"
        "  format: '{ip} {cnt}'\n",
        encoding="utf-8",
    )
    cfg = load_config(str(p))
    assert cfg.selector_index == 2
    assert cfg.min_threshold == 3
    assert cfg.resolver.timeout == 0.5
    assert cfg.entry_format() == "{ip} {cnt}"
    assert config_to_snapshot(cfg)["selector_index"] == 2


def test_load_empty_yaml(tmp_path: Path):
    p = tmp_path / "empty.yml"
    p.write_text("", encoding="utf-8")
    assert load_config(str(p)) == AppConfig()
    assert load_config(None) == AppConfig()


@pytest.mark.parametrize(
    "text",
    ["selector_idx: 2\n", "- a\n- b\n", "selector_index: [\n", "max_results: 0\n"],
)
def test_bad_yaml_is_a_configuration_error(tmp_path: Path, text):
    p = tmp_path / "bad.yml"
    p.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_config(str(p))


def test_missing_config_file(tmp_path: Path):
    with pytest.raises(ConfigurationError):
        load_config(str(tmp_path / "nope.yml"))
