from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..errors import ConfigError
from ..models.config_models import AppConfig, DatabaseConfig

"""Config loader.

Responsibilities:
- Load the YAML config file (default config/map_barcode.yml)
- Validate it against the bundled JSON schema
- Build the frozen AppConfig; a missing default file yields an empty config
"""

DEFAULT_CONFIG_PATH = Path("config/map_barcode.yml")
SCHEMA_PATH = Path(__file__).with_name("config_schema.json")


def _validate_config_schema(data: Any) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing or invalid, or data fails validation
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


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration.

    Args:
        path: explicit config path (must exist), or None for the default path
              (optional; absent means environment-only settings)
    """
    explicit = path is not None
    cfg_path = path if path is not None else DEFAULT_CONFIG_PATH
    if not cfg_path.exists():
        if explicit:
            raise ConfigError(f"config file not found: {cfg_path}")
        return AppConfig(database=DatabaseConfig())

    try:
        data = yaml.safe_load(cfg_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    except OSError as e:
        raise ConfigError(f"cannot read config file {cfg_path}: {e}") from e

    _validate_config_schema(data)

    db_raw = data.get("database") or {}
    db = DatabaseConfig(
        host=db_raw.get("host"),
        port=db_raw.get("port"),
        user=db_raw.get("user"),
        password=db_raw.get("password"),
        database=db_raw.get("database"),
        dsn=db_raw.get("dsn"),
    )
    return AppConfig(database=db, source_path=str(cfg_path))
