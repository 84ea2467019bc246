from __future__ import annotations

import re
import string
from pathlib import Path
from typing import Any, Dict, Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from ipstats.errors import ConfigurationError

FORMAT_FIELDS = frozenset({"cnt", "ip", "host"})

DEFAULT_FORMAT = "{cnt} {host} ({ip})"
DEFAULT_NUMERIC_FORMAT = "{cnt} {ip}"

_SAMPLE_VARS = {"cnt": 1, "ip": "192.0.2.1", "host": "host.example"}

OutputKind = Literal["text", "table", "json", "csv"]


def format_fields(template: str) -> set[str]:
    """Return the placeholder names used by a ``str.format`` template."""
    names: set[str] = set()
    try:
        parsed = list(string.Formatter().parse(template))
    except ValueError as e:
        raise ValueError(f"malformed format string {template!r}: {e}") from e
    for _literal, field, _spec, _conv in parsed:
        if field is None:
            continue
        root = re.split(r"[.\[]", field, maxsplit=1)[0]
        if not root:
            raise ValueError(f"positional placeholders are not supported in {template!r}")
        names.add(root)
    return names


class ResolverCfg(BaseModel):
    model_config = ConfigDict(extra="forbid")

    timeout: float = Field(2.0, gt=0)
    workers: int = Field(8, ge=1, le=256)


class OutputCfg(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: OutputKind = "text"
    format: Optional[str] = None
    path: Optional[str] = None


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    schema_version: str = "1.0"

    selector_index: int = Field(1, ge=1)
    resolve_hostnames: bool = True
    min_threshold: Optional[int] = Field(None, ge=0)
    max_results: Optional[int] = Field(None, ge=1)

    pattern: Optional[str] = None
    fixed_ips: bool = False
    pedantic: bool = False

    resolver: ResolverCfg = ResolverCfg()
    output: OutputCfg = OutputCfg()

    @field_validator("pattern")
    @classmethod
    def _pattern_compiles(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        if not v:
            raise ValueError("pattern must not be empty")
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"invalid regular expression {v!r}: {e}") from e
        return v

    @model_validator(mode="after")
    def _check_combinations(self) -> "AppConfig":
        if self.pattern is not None and self.fixed_ips:
            raise ValueError("pattern and fixed_ips cannot be used together")
        if self.fixed_ips and self.selector_index != 1:
            raise ValueError("fixed_ips takes the whole line as the address; selector_index must be 1")

        if self.output.format is not None:
            names = format_fields(self.output.format)
            unknown = names - FORMAT_FIELDS
            if unknown:
                raise ValueError(
                    f"unknown placeholder(s) {sorted(unknown)} in format; allowed: {sorted(FORMAT_FIELDS)}"
                )
            if "host" in names and not self.resolve_hostnames:
                raise ValueError("{host} cannot be used in the format while hostname resolution is disabled")
            try:
                self.output.format.format_map(_SAMPLE_VARS)
            except (ValueError, KeyError, IndexError, AttributeError, TypeError) as e:
                raise ValueError(f"format {self.output.format!r} cannot be applied: {e}") from e

        if self.output.kind == "table" and self.output.path is not None:
            raise ValueError("table output is console only; use text, json or csv with an output path")
        return self

    def entry_format(self) -> str:
        if self.output.format is not None:
            return self.output.format
        return DEFAULT_FORMAT if self.resolve_hostnames else DEFAULT_NUMERIC_FORMAT


def _validate(data: Dict[str, Any]) -> AppConfig:
    try:
        return AppConfig.model_validate(data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'config'}: {err['msg']}" for err in e.errors()
        )
        raise ConfigurationError(f"invalid configuration: {problems}") from e


def load_config(path: Optional[str]) -> AppConfig:
    if not path:
        return AppConfig()
    p = Path(path).expanduser()
    try:
        data = yaml.safe_load(p.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigurationError(f"cannot read config file {p}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"config file {p} is not valid YAML: {e}") from e
    if data is None:
        return AppConfig()
    if not isinstance(data, dict):
        raise ConfigurationError(f"config file {p} must contain a mapping at the top level")
    return _validate(data)


def with_overrides(cfg: AppConfig, overrides: Dict[str, Any]) -> AppConfig:
    """
    Merge explicitly passed values over ``cfg`` and re-validate.
    ``None`` means "not given". Nested sections are passed as dicts.
    """
    data = cfg.model_dump()
    for key, value in overrides.items():
        if value is None:
            continue
        if isinstance(value, dict):
            section = dict(data.get(key) or {})
            section.update({k: v for k, v in value.items() if v is not None})
            data[key] = section
        else:
            data[key] = value
    return _validate(data)


def config_to_snapshot(cfg: AppConfig) -> Dict[str, Any]:
    return cfg.model_dump()
