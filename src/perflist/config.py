"""Runner configuration.

Handles:
- The :class:`PerfConfig` dataclass with built-in defaults.
- Loading an optional ``perflist.yaml`` file from the project root.
- Merging CLI options over file values over defaults.
- Validating the final configuration before a run.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from perflist.errors import ConfigError
from perflist.logging import get_logger

log = get_logger("config")

CONFIG_FILENAME = "perflist.yaml"
DEFAULT_COUNT = 1000


# ---------------------------------------------------------------------------
# PerfConfig
# ---------------------------------------------------------------------------


@dataclass
class PerfConfig:
    """Resolved configuration for one benchmark run."""

    perf_dir: str = "perf"  # Relative to the project root
    ledger_file: str = "perf.list"
    manifest_file: str = "pyproject.toml"
    file_suffix: str = "perf.py"  # Matched against the basename after its first dot
    default_count: int = DEFAULT_COUNT


# Keys a config file may set.
_FILE_KEYS = frozenset(f.name for f in fields(PerfConfig))


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


@dataclass
class ValidationError:
    """A single configuration validation problem."""

    field: str
    message: str


def validate_config(config: PerfConfig) -> list[ValidationError]:
    """Validate a configuration.  An empty list means valid."""
    errors: list[ValidationError] = []

    if isinstance(config.default_count, bool) or not isinstance(config.default_count, int):
        errors.append(ValidationError("default_count", "must be an integer"))
    elif config.default_count < 1:
        errors.append(ValidationError("default_count", "must be at least 1"))

    for name in ("ledger_file", "manifest_file", "file_suffix"):
        value = getattr(config, name)
        if not isinstance(value, str) or not value.strip():
            errors.append(ValidationError(name, "must be a non-empty string"))

    if isinstance(config.ledger_file, str) and (
        "/" in config.ledger_file or "\\" in config.ledger_file
    ):
        errors.append(ValidationError("ledger_file", "must be a file name, not a path"))

    if not isinstance(config.perf_dir, str):
        errors.append(ValidationError("perf_dir", "must be a string"))

    return errors


# ---------------------------------------------------------------------------
# YAML config loading
# ---------------------------------------------------------------------------


def load_config_file(config_path: Path) -> dict[str, Any]:
    """Load a perflist configuration file.

    File format::

        perf_dir: benchmarks
        ledger_file: perf.list
        default_count: 500

    Returns:
        The parsed mapping (empty if the file is empty).

    Raises:
        ConfigError: If the file is not valid YAML, is not a mapping,
            or contains unknown keys.
    """
    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Config file {config_path} must be a YAML mapping, got {type(data).__name__}"
        )

    unknown = sorted(str(k) for k in data if k not in _FILE_KEYS)
    if unknown:
        raise ConfigError(f"Unknown config key(s) in {config_path}: {', '.join(unknown)}")

    log.debug("Loaded config from %s: %s", config_path, data)
    return data


def build_config(
    file_data: dict[str, Any] | None = None,
    *,
    cli_overrides: dict[str, Any] | None = None,
) -> PerfConfig:
    """Build a PerfConfig from file values and CLI overrides.

    CLI values that are ``None`` are treated as "not given" and fall
    back to the file value, then to the built-in default.
    """
    merged: dict[str, Any] = dict(file_data or {})
    for key, value in (cli_overrides or {}).items():
        if value is not None:
            merged[key] = value

    config = PerfConfig()
    for key, value in merged.items():
        if key in _FILE_KEYS:
            setattr(config, key, value)
    return config
