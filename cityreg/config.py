"""Configuration for cityreg.

Settings are read from an optional YAML file and then overridden by
``CITYREG_*`` environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path

import yaml

SUBSTRATE_KINDS = ("memory", "file", "http")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

CONFIG_ENV_VAR = "CITYREG_CONFIG"

_ENV_OVERRIDES = {
    "substrate": "CITYREG_SUBSTRATE",
    "data_path": "CITYREG_DATA_PATH",
    "base_url": "CITYREG_BASE_URL",
    "timeout": "CITYREG_TIMEOUT",
    "page_size": "CITYREG_PAGE_SIZE",
    "fetch_workers": "CITYREG_FETCH_WORKERS",
    "log_level": "CITYREG_LOG_LEVEL",
}


def _default_data_path() -> str:
    return str(Path.home() / ".cityreg" / "substrate.json")


@dataclass
class RegistryConfig:
    """Runtime settings for the registry and its substrate client."""

    substrate: str = "file"  # memory | file | http
    data_path: str = field(default_factory=_default_data_path)
    base_url: str = ""
    timeout: float = 10.0
    page_size: int = 5
    fetch_workers: int = 1
    log_level: str = "WARNING"

    def validate(self) -> None:
        if self.substrate not in SUBSTRATE_KINDS:
            raise ValueError(
                f"Unknown substrate '{self.substrate}'. Must be one of: {', '.join(SUBSTRATE_KINDS)}"
            )
        if self.substrate == "http" and not self.base_url:
            raise ValueError("base_url is required for the http substrate")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
        if self.page_size < 1:
            raise ValueError("page_size must be at least 1")
        if self.fetch_workers < 1:
            raise ValueError("fetch_workers must be at least 1")
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"Invalid log_level '{self.log_level}'")


def load_config(path: str | Path | None = None) -> RegistryConfig:
    """Load settings from YAML (if any), apply env overrides, and validate."""
    path = path or os.environ.get(CONFIG_ENV_VAR)
    values: dict[str, object] = {}

    if path:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        # Accept either a bare mapping or one nested under "cityreg"
        data = data.get("cityreg", data) or {}
        if not isinstance(data, dict):
            raise ValueError(f"The 'cityreg' section of {path} must be a mapping")
        known = {f.name for f in fields(RegistryConfig)}
        values.update({k: v for k, v in data.items() if k in known})

    for name, env_var in _ENV_OVERRIDES.items():
        raw = os.environ.get(env_var)
        if raw is not None and raw != "":
            values[name] = raw

    config = RegistryConfig(**_coerce(values))
    config.validate()
    return config


def _coerce(values: dict[str, object]) -> dict[str, object]:
    coerced: dict[str, object] = {}
    for key, value in values.items():
        try:
            if key == "timeout":
                coerced[key] = float(value)
            elif key in ("page_size", "fetch_workers"):
                coerced[key] = int(value)
            elif key == "log_level":
                coerced[key] = str(value).upper()
            elif key == "substrate":
                coerced[key] = str(value).lower()
            else:
                coerced[key] = str(value)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid value for '{key}': {value!r}") from e
    return coerced
