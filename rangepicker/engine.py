"""Range selection state transitions.

Every operation takes the current value and returns a new one; nothing is
mutated in place. The consumer owns the current value and re-supplies it on
each call.
"""

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable, Optional, Union

from .calendar_grid import month_of, shift_month
from .clock import from_zoned, resolve_timezone, shift_days, to_zoned
from .constraints import (
    NO_CONSTRAINTS,
    Constraints,
    Violation,
    can_apply,
    is_date_disabled,
    validate_range,
)
from .presets import Preset, PresetRegistry, get_registry, resolve_preset
from .timespan import DateTimeRange, SelectionState, to_instant

logger = logging.getLogger(__name__)


class Direction(Enum):
    """Keyboard focus movement within the month grid."""

    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"


_FOCUS_STEPS = {
    Direction.LEFT: -1,
    Direction.RIGHT: 1,
    Direction.UP: -7,
    Direction.DOWN: 7,
}


def select_date(
    current: DateTimeRange,
    clicked_date: datetime,
    constraints: Constraints = NO_CONSTRAINTS,
) -> DateTimeRange:
    """
    Apply a calendar day click to a range.

    An empty or complete range starts over with the clicked day as start. A
    range with only a start gets the clicked day as end, swapped into order
    if it precedes the start. Disabled days leave the range unchanged.

    Args:
        current: Range before the click
        clicked_date: Instant of the clicked day
        constraints: Limits that decide which days are disabled

    Returns:
        The next range value
    """
    if is_date_disabled(clicked_date, constraints, current.timezone):
        logger.debug(f"Ignoring click on disabled date {clicked_date.isoformat()}")
        return current

    if current.state is not SelectionState.PARTIAL_START:
        return current.with_bounds(clicked_date, None)

    result = current.with_bounds(current.start, clicked_date)
    violation = validate_range(result, constraints)
    if violation is not None:
        logger.debug(f"Selected range {result.to_iso_interval()}: {violation.name}")
    return result


def edit_time_of_day(
    current: DateTimeRange, which: str, hour: int, minute: int, tz_name: str
) -> DateTimeRange:
    """
    Set the wall-clock time of day of the range start or end.

    The instant is viewed in tz_name, its hour and minute replaced, and the
    result converted back using the DST policies of from_zoned. Seconds and
    microseconds of the instant are kept. Editing an end that is not set is
    a no-op.
    """
    if which not in ("start", "end"):
        raise ValueError(f"which must be 'start' or 'end', got {which!r}")

    instant = current.start if which == "start" else current.end
    if instant is None:
        logger.debug(f"Ignoring time edit on unset {which}")
        return current

    wall_clock = to_zoned(instant, tz_name).with_time(hour, minute)
    remainder = timedelta(seconds=instant.second, microseconds=instant.microsecond)
    edited = from_zoned(wall_clock, tz_name) + remainder
    if which == "start":
        return current.with_bounds(edited, current.end)
    return current.with_bounds(current.start, edited)


def move_focus(
    focused_date: datetime,
    direction: Union[Direction, str],
    tz_name: str = "UTC",
) -> datetime:
    """Move keyboard focus by a day (left/right) or a week (up/down)."""
    step = _FOCUS_STEPS[Direction(direction)]
    return shift_days(focused_date, step, tz_name)


def apply_preset(
    current: DateTimeRange, preset: Preset, now: datetime, tz_name: str
) -> DateTimeRange:
    """Replace the range bounds with a preset's, keeping the range timezone."""
    start, end = resolve_preset(preset, now, tz_name)
    return current.with_bounds(start, end)


def change_timezone(current: DateTimeRange, tz_name: str) -> DateTimeRange:
    """Switch the display timezone; the selected instants are unchanged."""
    resolve_timezone(tz_name)
    return replace(current, timezone=tz_name)


@dataclass(frozen=True)
class DateClicked:
    date: datetime


@dataclass(frozen=True)
class TimeFieldChanged:
    which: str
    field: str
    value: int


@dataclass(frozen=True)
class PresetClicked:
    name: str


@dataclass(frozen=True)
class TimezoneChanged:
    timezone: str


@dataclass(frozen=True)
class ArrowKeyPressed:
    direction: Union[Direction, str]


@dataclass(frozen=True)
class EnterPressed:
    pass


@dataclass(frozen=True)
class MonthChanged:
    delta: int


Event = Union[
    DateClicked,
    TimeFieldChanged,
    PresetClicked,
    TimezoneChanged,
    ArrowKeyPressed,
    EnterPressed,
    MonthChanged,
]


@dataclass(frozen=True)
class PickerState:
    """Everything the picker needs between events, owned by the consumer."""

    range: DateTimeRange
    year: int
    month: int
    focused: Optional[datetime] = None

    def __post_init__(self) -> None:
        if self.focused is not None:
            object.__setattr__(self, "focused", to_instant(self.focused))


@dataclass(frozen=True)
class TransitionResult:
    """New state after an event, with validation feedback for display."""

    state: PickerState
    violation: Optional[Violation]
    can_apply: bool

    @property
    def range(self) -> DateTimeRange:
        """The range carried by the new state."""
        return self.state.range

    @property
    def error(self) -> Optional[str]:
        """Message for the current violation, if any."""
        return self.violation.message if self.violation else None


class RangeSelectionEngine:
    """Turns picker events into new picker states."""

    def __init__(
        self,
        constraints: Optional[Constraints] = None,
        presets: Optional[PresetRegistry] = None,
        now: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize the engine.

        Args:
            constraints: Limits for selection and validation (none by default)
            presets: Registry used to resolve PresetClicked events
            now: Clock used when resolving presets (defaults to current UTC time)
        """
        self.constraints = constraints or NO_CONSTRAINTS
        self.presets = presets or get_registry()
        self.now = now or (lambda: datetime.now(timezone.utc))

    def initial_state(self, value: DateTimeRange) -> PickerState:
        """State showing the month of the range start, or of now if unset."""
        anchor = value.start or self.now()
        year, month = month_of(anchor, value.timezone)
        return PickerState(range=value, year=year, month=month)

    def transition(self, state: PickerState, event: Event) -> TransitionResult:
        """Apply one event and recompute validation and the apply gate."""
        new_state = self._apply(state, event)
        return TransitionResult(
            state=new_state,
            violation=validate_range(new_state.range, self.constraints),
            can_apply=can_apply(new_state.range, self.constraints),
        )

    def _apply(self, state: PickerState, event: Event) -> PickerState:
        current = state.range
        tz_name = current.timezone

        if isinstance(event, DateClicked):
            selected = select_date(current, event.date, self.constraints)
            return replace(state, range=selected, focused=event.date)

        if isinstance(event, TimeFieldChanged):
            return replace(state, range=self._edit_time_field(current, event))

        if isinstance(event, PresetClicked):
            preset = self.presets.get_preset(event.name)
            return replace(
                state, range=apply_preset(current, preset, self.now(), tz_name)
            )

        if isinstance(event, TimezoneChanged):
            return replace(state, range=change_timezone(current, event.timezone))

        if isinstance(event, ArrowKeyPressed):
            if state.focused is None:
                return state
            focused = move_focus(state.focused, event.direction, tz_name)
            year, month = month_of(focused, tz_name)
            return replace(state, focused=focused, year=year, month=month)

        if isinstance(event, EnterPressed):
            if state.focused is None:
                return state
            selected = select_date(current, state.focused, self.constraints)
            return replace(state, range=selected)

        if isinstance(event, MonthChanged):
            year, month = shift_month(state.year, state.month, event.delta)
            return replace(state, year=year, month=month)

        raise TypeError(f"Unsupported picker event: {type(event).__name__}")

    def _edit_time_field(
        self, current: DateTimeRange, event: TimeFieldChanged
    ) -> DateTimeRange:
        if event.field not in ("hour", "minute"):
            raise ValueError(f"field must be 'hour' or 'minute', got {event.field!r}")

        instant = current.start if event.which == "start" else current.end
        if instant is None:
            return edit_time_of_day(current, event.which, 0, 0, current.timezone)

        zoned = to_zoned(instant, current.timezone)
        hour = event.value if event.field == "hour" else zoned.hour
        minute = event.value if event.field == "minute" else zoned.minute
        return edit_time_of_day(current, event.which, hour, minute, current.timezone)
