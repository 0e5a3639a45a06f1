from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Export configuration loader.

Responsibilities:
- Load the YAML config (default config/export.yml)
- Validate it against the packaged JSON schema (config_schema.json)
- Apply defaults for every optional key
"""

__all__ = [
    "ApiConfig",
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "ExportConfig",
    "load_config",
]

SCHEMA_PATH = Path(__file__).parent / "config_schema.json"
DEFAULT_CONFIG_PATH = Path("config/export.yml")

DEFAULT_OUTPUT_PATH = "out/Datos_Exportados.xlsx"
DEFAULT_SHEET_NAME = "Datos"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class ApiConfig:
    """Message history API settings (all optional until --fetch is used)."""
    base_url: str | None = None
    application_id: int | None = None
    date_from: str | None = None
    date_to: str | None = None
    timeout_seconds: float = 30.0


@dataclass(frozen=True)
class ExportConfig:
    input_path: str  # message history export (.xlsx / .xls / .csv)
    output_path: str = DEFAULT_OUTPUT_PATH
    mode: str = "flow"  # flow | message
    sheet_name: str = DEFAULT_SHEET_NAME
    presence_marker: str = "X"
    text_encoding: str = "utf-8"
    api: ApiConfig = field(default_factory=ApiConfig)


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: The schema file is missing or invalid, or the config
            data fails validation (missing required keys, wrong types,
            unknown keys)
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


def load_config(path: Path) -> ExportConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")

    # Unquoted YAML dates load as datetime.date
    api_section = data.get("api")
    if isinstance(api_section, dict):
        for key in ("date_from", "date_to"):
            if isinstance(api_section.get(key), date):
                api_section[key] = api_section[key].isoformat()

    _validate_config_schema(data)

    encoding = data.get("text_encoding", "utf-8")
    try:
        # Rejects unknown names and bytes-to-bytes codecs (base64, rot13)
        "".encode(encoding).decode(encoding)
    except LookupError as e:
        raise ConfigError(f"unknown text_encoding: {encoding}") from e

    api_raw = data.get("api", {})
    api = ApiConfig(
        base_url=api_raw.get("base_url"),
        application_id=api_raw.get("application_id"),
        date_from=api_raw.get("date_from"),
        date_to=api_raw.get("date_to"),
        timeout_seconds=api_raw.get("timeout_seconds", 30.0),
    )
    return ExportConfig(
        input_path=data["input_path"],
        output_path=data.get("output_path", DEFAULT_OUTPUT_PATH),
        mode=data.get("mode", "flow"),
        sheet_name=data.get("sheet_name", DEFAULT_SHEET_NAME),
        presence_marker=data.get("presence_marker", "X"),
        text_encoding=encoding,
        api=api,
    )
