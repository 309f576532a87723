from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, TypeVar

import yaml

from golaycodec.fec.golay import STRATEGIES
from golaycodec.stream import UNCORRECTABLE_POLICIES
from golaycodec.utils.packing import check_container_width

ENV_PREFIX = "GOLAYCODEC__"

_LEVEL_ALIASES: dict[str, int] = {
    "CRITICAL": logging.CRITICAL,
    "FATAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
    "TRACE": logging.DEBUG,
}


def parse_log_level(value: str | None, default: int = logging.INFO) -> int:
    """Parse a log level string ("warn", "DEBUG", "10") into a numeric level."""
    if not value:
        return default
    raw = str(value).strip()
    if not raw:
        return default
    if raw.isdigit():
        return int(raw)
    return _LEVEL_ALIASES.get(raw.upper().replace("-", "_"), default)


@dataclass
class CodecConfig:
    # "table" decodes via the precomputed syndrome table, "search" runs the
    # brute-force error-pattern search on every word
    strategy: str = "table"

    def __post_init__(self) -> None:
        if self.strategy not in STRATEGIES:
            raise ValueError(f"codec.strategy must be one of {STRATEGIES} (got {self.strategy!r})")


@dataclass
class StreamConfig:
    on_uncorrectable: str = "warn"
    # Container width for packed output: 8, 16, 32 or 64
    output_width: int = 8

    def __post_init__(self) -> None:
        if self.on_uncorrectable not in UNCORRECTABLE_POLICIES:
            raise ValueError(
                f"stream.on_uncorrectable must be one of {UNCORRECTABLE_POLICIES} "
                f"(got {self.on_uncorrectable!r})"
            )
        check_container_width(self.output_width)


@dataclass
class LoggingConfig:
    level: str = "INFO"

    @property
    def level_number(self) -> int:
        return parse_log_level(self.level, logging.INFO)


@dataclass
class AppConfig:
    codec: CodecConfig = field(default_factory=CodecConfig)
    stream: StreamConfig = field(default_factory=StreamConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


_SECTIONS = ("codec", "stream", "logging")
_SectionT = TypeVar("_SectionT")


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError("Config root must be a mapping")
        return data


def _overlay(dst: dict[str, Any], src: dict[str, Any]) -> dict[str, Any]:
    for k, v in src.items():
        if isinstance(v, dict) and isinstance(dst.get(k), dict):
            _overlay(dst[k], v)
        else:
            dst[k] = v
    return dst


def load_config(path_str: str | None) -> AppConfig:
    raw: dict[str, Any] = {}
    if path_str:
        path = Path(path_str)
        raw = _read_yaml(path)
        # golaycodec.local.yaml next to golaycodec.yaml overrides it
        _overlay(raw, _read_yaml(path.with_name(f"{path.stem}.local{path.suffix}")))

    # Environment overrides (prefix GOLAYCODEC__SECTION__KEY)
    # Example: GOLAYCODEC__STREAM__ON_UNCORRECTABLE=raise
    for k, v in os_environ_items():
        if not k.startswith(ENV_PREFIX):
            continue
        parts = k[len(ENV_PREFIX) :].split("__")
        if len(parts) != 2:
            continue
        section, key = parts[0].lower(), parts[1].lower()
        if section not in _SECTIONS:
            continue
        raw.setdefault(section, {})
        if isinstance(raw[section], dict):
            raw[section][key] = coerce_env_value(v)

    for section in _SECTIONS:
        if not isinstance(raw.get(section, {}), dict):
            raise ValueError(f"Config section '{section}' must be a mapping")

    return AppConfig(
        codec=_build_section(CodecConfig, "codec", raw),
        stream=_build_section(StreamConfig, "stream", raw),
        logging=_build_section(LoggingConfig, "logging", raw),
    )


def _build_section(cls: type[_SectionT], section: str, raw: dict[str, Any]) -> _SectionT:
    values = raw.get(section, {})
    known = {f.name for f in fields(cls)}
    unknown = sorted(str(k) for k in values if k not in known)
    if unknown:
        raise ValueError(f"Unknown key(s) in config section '{section}': {', '.join(unknown)}")
    return cls(**values)


def coerce_env_value(val: str) -> Any:
    # Basic bool/int coercion for convenience
    lower = val.lower()
    if lower in {"true", "false"}:
        return lower == "true"
    try:
        return int(val)
    except ValueError:
        return val


def os_environ_items() -> list[tuple[str, str]]:
    # Wrapped for testability
    from os import environ

    return [(k, v) for k, v in environ.items()]
