"""Configuration file loading (ganttplan_config.yaml).

The config file holds defaults shared by many schedule documents: a
calendar used when a document declares none, and scheduler settings.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from .calendar import Calendar
from .exceptions import ValidationError
from .scheduler import SchedulingConfig
from .schemas import CalendarSchema

CONFIG_FILENAME = "ganttplan_config.yaml"


class UnifiedConfig(BaseModel):
    """Unified configuration: default calendar and scheduler settings."""

    calendar: Calendar | None = None
    scheduler: SchedulingConfig = Field(default_factory=SchedulingConfig)


def load_unified_config(config_path: Path | str) -> UnifiedConfig:
    """Load unified configuration from a YAML file.

    The calendar section uses the same directives as a document calendar
    (timezone, excludes, includes, weekend).

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ValidationError: If the config is invalid
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with config_path.open(encoding="utf-8") as f:
        data: dict[str, Any] | None = yaml.safe_load(f)

    if not data:
        return UnifiedConfig()

    try:
        calendar = None
        if "calendar" in data:
            schema = CalendarSchema.model_validate(data["calendar"])
            calendar = Calendar.from_directives(
                timezone=schema.timezone,
                excludes=schema.excludes,
                includes=schema.includes,
                weekend=schema.weekend,
            )
        scheduler = SchedulingConfig.model_validate(data.get("scheduler") or {})
    except (PydanticValidationError, ValueError) as e:
        raise ValidationError(f"Invalid config file {config_path}: {e}") from e

    return UnifiedConfig(calendar=calendar, scheduler=scheduler)


def discover_config(document_path: Path, config_path: Path | None = None) -> UnifiedConfig:
    """Find and load the config for a document.

    Search order:
    1. Explicit config_path argument
    2. Document directory / ganttplan_config.yaml
    3. Current directory / ganttplan_config.yaml

    Returns the default configuration if none is found.
    """
    if config_path is not None:
        return load_unified_config(config_path)

    for candidate in (Path(document_path).parent / CONFIG_FILENAME, Path(CONFIG_FILENAME)):
        if candidate.exists():
            return load_unified_config(candidate)

    return UnifiedConfig()
