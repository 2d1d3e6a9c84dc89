from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Config loader.

Responsibilities:
- Load the optional YAML config (default ``config/xlsx2resx.yml``)
- Validate it against the bundled JSON schema (``config_schema.json``)
- Apply defaults for keys that are not set

Command-line flags and environment variables take precedence over the file;
that resolution happens in the CLI.
"""

SCHEMA_PATH = Path(__file__).parent / "config_schema.json"
DEFAULT_CONFIG_PATH = Path("config/xlsx2resx.yml")

DEFAULT_POLL_INTERVAL = 1.0
DEFAULT_LOG_LEVEL = "info"
DEFAULT_LOG_DIR = "./logs"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class ConverterConfig:
    input: str | None = None
    output: str | None = None
    watch: bool = False
    invert: bool = False
    poll_interval: float = DEFAULT_POLL_INTERVAL
    log_level: str = DEFAULT_LOG_LEVEL
    log_dir: str = DEFAULT_LOG_DIR


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: the schema file is missing or invalid, or the config
            data fails schema validation (unknown keys, wrong types, ...)
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path) -> ConverterConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)

    return ConverterConfig(
        input=data.get("input"),
        output=data.get("output"),
        watch=data.get("watch", False),
        invert=data.get("invert", False),
        poll_interval=float(data.get("poll_interval", DEFAULT_POLL_INTERVAL)),
        log_level=data.get("log_level", DEFAULT_LOG_LEVEL),
        log_dir=data.get("log_dir", DEFAULT_LOG_DIR),
    )
