from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.indicator import Indicator
from ..models.validation import DEFAULT_STATES, MAX_YEAR, MIN_YEAR, ValidationRules

"""Config loader for the upload validator.

Responsibilities:
- Load YAML config (default config/upload.yml)
- Validate against the bundled schema.json
- Apply defaults (built-in state catalog, 1947-2030, 10 displayed errors, utf-8-sig)
"""

__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "UploadConfig",
    "load_config",
]

SCHEMA_PATH = Path(__file__).with_name("schema.json")
DEFAULT_CONFIG_PATH = Path("config/upload.yml")
DEFAULT_MAX_DISPLAYED_ERRORS = 10
DEFAULT_ENCODING = "utf-8-sig"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class UploadConfig:
    source_directory: str
    indicators: list[Indicator]
    states: tuple[str, ...] = DEFAULT_STATES
    min_year: int = MIN_YEAR
    max_year: int = MAX_YEAR
    max_displayed_errors: int = DEFAULT_MAX_DISPLAYED_ERRORS
    encoding: str = DEFAULT_ENCODING

    def rules(self) -> ValidationRules:
        return ValidationRules(states=self.states, min_year=self.min_year, max_year=self.max_year)

    def find_indicator(self, indicator_id: str) -> Indicator | None:
        for ind in self.indicators:
            if ind.id == indicator_id:
                return ind
        return None


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigError: schema file missing or unreadable, or data violating it
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


def _build_indicator(raw: dict[str, Any]) -> Indicator:
    return Indicator(
        id=raw["id"],
        name=raw["name"],
        unit=raw.get("unit", ""),
        source=raw.get("source", ""),
        category=raw.get("category", ""),
        enabled=raw.get("enabled", True),
        deleted=raw.get("deleted", False),
    )


def load_config(path: Path) -> UploadConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)

    year_range = data.get("year_range") or {}
    min_year = year_range.get("min", MIN_YEAR)
    max_year = year_range.get("max", MAX_YEAR)
    if min_year > max_year:
        raise ConfigError(f"year_range.min ({min_year}) must not exceed year_range.max ({max_year})")

    ids = [raw["id"] for raw in data["indicators"]]
    dupes = sorted({i for i in ids if ids.count(i) > 1})
    if dupes:
        raise ConfigError(f"duplicate indicator ids: {dupes}")

    return UploadConfig(
        source_directory=data["source_directory"],
        indicators=[_build_indicator(raw) for raw in data["indicators"]],
        states=tuple(data.get("states", DEFAULT_STATES)),
        min_year=min_year,
        max_year=max_year,
        max_displayed_errors=data.get("max_displayed_errors", DEFAULT_MAX_DISPLAYED_ERRORS),
        encoding=data.get("encoding", DEFAULT_ENCODING),
    )
