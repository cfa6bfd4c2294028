"""Range constraints and their validation rules."""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import FrozenSet, Optional

from .clock import zoned_date
from .timespan import DateTimeRange, to_instant

logger = logging.getLogger(__name__)


class Violation(Enum):
    """A broken range rule. Returned from validation, never raised."""

    BELOW_MINIMUM = "below_minimum"
    ABOVE_MAXIMUM = "above_maximum"
    CONTAINS_BLACKOUT = "contains_blackout"
    TOO_SHORT = "too_short"
    TOO_LONG = "too_long"

    @property
    def message(self) -> str:
        """User-facing description of the violation."""
        return _MESSAGES[self]


_MESSAGES = {
    Violation.BELOW_MINIMUM: "Start is before the earliest allowed date",
    Violation.ABOVE_MAXIMUM: "End is after the latest allowed date",
    Violation.CONTAINS_BLACKOUT: "Range includes an unavailable date",
    Violation.TOO_SHORT: "Range is shorter than the minimum duration",
    Violation.TOO_LONG: "Range is longer than the maximum duration",
}


@dataclass(frozen=True)
class Constraints:
    """Limits a selected range must satisfy."""

    min: Optional[datetime] = None
    max: Optional[datetime] = None
    blackouts: FrozenSet[date] = field(default_factory=frozenset)
    min_duration: Optional[timedelta] = None
    max_duration: Optional[timedelta] = None

    def __post_init__(self) -> None:
        if self.min is not None:
            object.__setattr__(self, "min", to_instant(self.min))
        if self.max is not None:
            object.__setattr__(self, "max", to_instant(self.max))
        object.__setattr__(self, "blackouts", frozenset(self.blackouts))


NO_CONSTRAINTS = Constraints()


def validate(
    start: Optional[datetime],
    end: Optional[datetime],
    constraints: Constraints,
    tz_name: str = "UTC",
) -> Optional[Violation]:
    """
    Check a candidate range against constraints.

    Rules are checked in a fixed order and the first failure is returned:
    minimum, maximum, blackout dates, minimum duration, maximum duration.
    Partial ranges always pass.

    Args:
        start: Range start, or None
        end: Range end, or None
        constraints: Limits to check against
        tz_name: Timezone used to compare blackout calendar dates

    Returns:
        The first Violation found, or None if the range is valid
    """
    if start is None or end is None:
        return None
    start = to_instant(start)
    end = to_instant(end)

    if constraints.min is not None and start < constraints.min:
        return Violation.BELOW_MINIMUM
    if constraints.max is not None and end > constraints.max:
        return Violation.ABOVE_MAXIMUM

    if constraints.blackouts:
        first = zoned_date(start, tz_name)
        last = zoned_date(end, tz_name)
        if any(first <= blackout <= last for blackout in constraints.blackouts):
            return Violation.CONTAINS_BLACKOUT

    duration = end - start
    if constraints.min_duration is not None and duration < constraints.min_duration:
        return Violation.TOO_SHORT
    if constraints.max_duration is not None and duration > constraints.max_duration:
        return Violation.TOO_LONG

    return None


def validate_range(value: DateTimeRange, constraints: Constraints) -> Optional[Violation]:
    """Validate a DateTimeRange, comparing blackouts in its own timezone."""
    return validate(value.start, value.end, constraints, value.timezone)


def is_date_disabled(day: datetime, constraints: Constraints, tz_name: str) -> bool:
    """True if a calendar day cannot be picked under the constraints."""
    day = to_instant(day)
    if constraints.min is not None and day < constraints.min:
        return True
    if constraints.max is not None and day > constraints.max:
        return True
    return zoned_date(day, tz_name) in constraints.blackouts


def can_apply(value: DateTimeRange, constraints: Constraints) -> bool:
    """True if the range is complete and passes validation."""
    if not value.is_complete:
        return False
    violation = validate_range(value, constraints)
    if violation is not None:
        logger.debug(f"Apply disabled for {value.to_iso_interval()}: {violation.name}")
        return False
    return True
