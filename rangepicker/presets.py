"""Named range presets and their registry."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Tuple

from .clock import resolve_timezone, shift_days, start_of_day
from .timespan import to_instant

logger = logging.getLogger(__name__)

Resolver = Callable[[datetime, str], Tuple[datetime, datetime]]


@dataclass(frozen=True)
class Preset:
    """A labelled shortcut that computes a range from (now, timezone)."""

    label: str
    resolve: Resolver


def resolve_preset(
    preset: Preset, now: datetime, tz_name: str
) -> Tuple[datetime, datetime]:
    """Resolve a preset into an ordered (start, end) pair of UTC instants."""
    resolve_timezone(tz_name)
    start, end = preset.resolve(to_instant(now), tz_name)
    start, end = to_instant(start), to_instant(end)
    if end < start:
        start, end = end, start
    return start, end


class PresetNotFoundError(LookupError):
    """Raised when a requested preset is not registered."""

    pass


class PresetRegistry:
    """Registry of presets with decorator-based registration."""

    def __init__(self) -> None:
        self._presets: Dict[str, Preset] = {}

    def register(self, name: str, label: str) -> Callable[[Resolver], Resolver]:
        """
        Decorator to register a resolver function as a preset.

        Usage:
            @registry.register("last_week", "Last week")
            def last_week(now, tz_name):
                return now - timedelta(days=7), now
        """

        def decorator(func: Resolver) -> Resolver:
            if not callable(func):
                raise TypeError(f"Preset '{name}' resolver must be callable")
            self._presets[name] = Preset(label=label, resolve=func)
            logger.debug(f"Registered preset: {name} -> {label}")
            return func

        return decorator

    def add(self, name: str, preset: Preset) -> None:
        """Register an already constructed preset."""
        self._presets[name] = preset

    def get_preset(self, name: str) -> Preset:
        """
        Get a preset by name.

        Raises:
            PresetNotFoundError: If no preset is registered under name
        """
        if name not in self._presets:
            available = list(self._presets.keys())
            raise PresetNotFoundError(
                f"Preset '{name}' not found. Available presets: {available}"
            )
        return self._presets[name]

    def list_presets(self) -> List[str]:
        """List registered preset names in registration order."""
        return list(self._presets.keys())

    def subset(self, names: List[str]) -> "PresetRegistry":
        """New registry holding only the named presets, in the given order."""
        registry = PresetRegistry()
        for name in names:
            registry.add(name, self.get_preset(name))
        return registry


_registry = PresetRegistry()


@_registry.register("last_24_hours", "Last 24 hours")
def last_24_hours(now: datetime, tz_name: str) -> Tuple[datetime, datetime]:
    return now - timedelta(hours=24), now


@_registry.register("last_7_days", "Last 7 days")
def last_7_days(now: datetime, tz_name: str) -> Tuple[datetime, datetime]:
    return shift_days(now, -7, tz_name), now


@_registry.register("last_30_days", "Last 30 days")
def last_30_days(now: datetime, tz_name: str) -> Tuple[datetime, datetime]:
    return shift_days(now, -30, tz_name), now


@_registry.register("today", "Today")
def today(now: datetime, tz_name: str) -> Tuple[datetime, datetime]:
    return start_of_day(now, tz_name), now


@_registry.register("yesterday", "Yesterday")
def yesterday(now: datetime, tz_name: str) -> Tuple[datetime, datetime]:
    midnight = start_of_day(now, tz_name)
    previous = start_of_day(shift_days(midnight, -1, tz_name), tz_name)
    return previous, midnight - timedelta(minutes=1)


def get_registry() -> PresetRegistry:
    """The default registry holding the built-in presets."""
    return _registry


def register(name: str, label: str) -> Callable[[Resolver], Resolver]:
    """Register a preset in the default registry."""
    return _registry.register(name, label)


def get_preset(name: str) -> Preset:
    """Get a preset by name from the default registry."""
    return _registry.get_preset(name)


def list_presets() -> List[str]:
    """List preset names in the default registry."""
    return _registry.list_presets()
