from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import DEFAULT_SENTINEL_ALIASES, FieldOverride, IngestConfig
from ..services.header_resolver import normalize_column_name

"""Config loader.

Responsibilities:
- Load the YAML config (config/roster.yml by default)
- Validate it against the bundled JSON schema
- Apply defaults (profile=team, sentinel=unassigned, output under the source dir)
- Normalize field patterns the same way column headers are normalized
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/roster.yml")


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: If the schema file is missing or unreadable, or the
            config violates it (missing keys, wrong types, unknown keys).
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


def _patterns(values: list[str] | None) -> tuple[str, ...] | None:
    if values is None:
        return None
    # "Team No." のように書かれてもヘッダと同じ正規化で比較できるように
    return tuple(p for p in (normalize_column_name(v) for v in values) if p)


def _field_overrides(raw: dict[str, Any]) -> dict[str, FieldOverride]:
    overrides: dict[str, FieldOverride] = {}
    for name, spec in raw.items():
        overrides[name] = FieldOverride(
            name=name,
            patterns=_patterns(spec.get("patterns")),
            excludes=_patterns(spec.get("excludes")),
            required=spec.get("required"),
            advisory=spec.get("advisory"),
        )
    return overrides


def load_config(path: Path) -> IngestConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)

    source = data["source_directory"]
    output = data.get("output_directory") or str(Path(source) / "normalized")
    return IngestConfig(
        source_directory=source,
        output_directory=output,
        profile=data.get("profile", "team"),
        sentinel=data.get("sentinel", "unassigned"),
        sentinel_aliases=tuple(data.get("sentinel_aliases", DEFAULT_SENTINEL_ALIASES)),
        keep_na_strings=tuple(data.get("keep_na_strings", ())),
        fields=_field_overrides(data.get("fields", {})),
    )
