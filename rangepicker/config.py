"""Configuration management for rangepicker."""

import json
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from .clock import ConfigurationError, resolve_timezone
from .constraints import Constraints
from .presets import PresetRegistry, get_registry

DEFAULT_TIMEZONES = ["America/New_York", "Europe/London", "Asia/Tokyo"]
DEFAULT_PRESETS = ["last_24_hours", "last_7_days"]


@dataclass
class PickerConfig:
    """Main configuration for a range picker."""

    picker: Dict[str, Any]
    constraints: Dict[str, Any]
    presets: List[str]

    @property
    def timezone(self) -> str:
        """Get the initial display timezone."""
        tz_name = self.picker["timezone"]
        assert isinstance(tz_name, str)
        return tz_name

    @property
    def timezones(self) -> List[str]:
        """Get the timezones offered for selection."""
        timezones = self.picker["timezones"]
        assert isinstance(timezones, list)
        return timezones

    def to_constraints(self) -> Constraints:
        """Build the Constraints value described by this configuration."""
        section = self.constraints
        return Constraints(
            min=parse_instant(section.get("min"), "constraints.min"),
            max=parse_instant(section.get("max"), "constraints.max"),
            blackouts=frozenset(
                _parse_date(value) for value in section.get("blackouts", [])
            ),
            min_duration=_parse_minutes(
                section.get("min_duration_minutes"), "min_duration_minutes"
            ),
            max_duration=_parse_minutes(
                section.get("max_duration_minutes"), "max_duration_minutes"
            ),
        )

    def preset_registry(self, registry: Optional[PresetRegistry] = None) -> PresetRegistry:
        """Registry holding only the configured presets, in configured order."""
        return (registry or get_registry()).subset(self.presets)


def load_config(config_path: Path) -> PickerConfig:
    """Load and validate configuration from JSON file."""
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r") as f:
        data = json.load(f)

    return validate_config(data)


def validate_config(data: Dict[str, Any]) -> PickerConfig:
    """Validate configuration data and return PickerConfig instance."""
    if "picker" not in data:
        raise ValueError("Missing required configuration section: picker")

    data.setdefault("constraints", {})
    data.setdefault("presets", list(DEFAULT_PRESETS))

    _validate_picker_section(data["picker"])
    _validate_constraints_section(data["constraints"])
    _validate_presets_section(data["presets"])

    return PickerConfig(
        picker=data["picker"],
        constraints=data["constraints"],
        presets=data["presets"],
    )


def _validate_picker_section(picker: Dict[str, Any]) -> None:
    """Validate picker configuration section and set defaults."""
    if "timezone" not in picker:
        raise ValueError("Missing required picker field: timezone")

    if "timezones" not in picker:
        picker["timezones"] = list(DEFAULT_TIMEZONES)
    if not isinstance(picker["timezones"], list):
        raise ValueError("picker.timezones must be a list")

    resolve_timezone(picker["timezone"])
    for tz_name in picker["timezones"]:
        resolve_timezone(tz_name)

    if picker["timezone"] not in picker["timezones"]:
        picker["timezones"].insert(0, picker["timezone"])


def _validate_constraints_section(constraints: Dict[str, Any]) -> None:
    """Validate constraints configuration section and set defaults."""
    if not isinstance(constraints, dict):
        raise ValueError("constraints must be an object")

    if "blackouts" not in constraints:
        constraints["blackouts"] = []
    if not isinstance(constraints["blackouts"], list):
        raise ValueError("constraints.blackouts must be a list")

    # parse eagerly so bad values fail at load time rather than first use
    minimum = parse_instant(constraints.get("min"), "constraints.min")
    maximum = parse_instant(constraints.get("max"), "constraints.max")
    if minimum and maximum and maximum < minimum:
        raise ValueError("constraints.max must not be before constraints.min")
    for value in constraints["blackouts"]:
        _parse_date(value)

    shortest = _parse_minutes(
        constraints.get("min_duration_minutes"), "min_duration_minutes"
    )
    longest = _parse_minutes(
        constraints.get("max_duration_minutes"), "max_duration_minutes"
    )
    if shortest is not None and longest is not None and longest < shortest:
        raise ValueError("max_duration_minutes must not be below min_duration_minutes")


def _validate_presets_section(presets: List[str]) -> None:
    """Validate presets configuration section."""
    if not isinstance(presets, list):
        raise ValueError("presets must be a list of preset names")

    available = get_registry().list_presets()
    for name in presets:
        if name not in available:
            raise ValueError(
                f"Invalid preset: {name}. Must be one of: {available}"
            )


def parse_instant(value: Any, field_name: str) -> Optional[datetime]:
    """Parse an ISO 8601 instant; naive values are taken as UTC."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be an ISO 8601 string")
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise ConfigurationError(f"Invalid {field_name} '{value}': {e}") from e
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _parse_date(value: Any) -> date:
    """Parse a YYYY-MM-DD blackout date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid blackout date '{value}': {e}") from e


def _parse_minutes(value: Any, field_name: str) -> Optional[timedelta]:
    """Parse a non-negative duration given in minutes."""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        raise ConfigurationError(f"{field_name} must be a non-negative number")
    return timedelta(minutes=value)


def create_default_config() -> Dict[str, Any]:
    """Create a default configuration template."""
    return {
        "picker": {
            "timezone": "America/New_York",
            "timezones": list(DEFAULT_TIMEZONES),
        },
        "constraints": {
            "min": None,
            "max": None,
            "blackouts": [],
            "min_duration_minutes": None,
            "max_duration_minutes": None,
        },
        "presets": list(DEFAULT_PRESETS),
    }
