"""Date/time range value model for rangepicker."""

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class SelectionState(Enum):
    """Selection progress derived from which ends of a range are set."""

    EMPTY = "empty"
    PARTIAL_START = "partial_start"
    COMPLETE = "complete"


def to_instant(dt: datetime) -> datetime:
    """Normalize a datetime to an aware UTC instant (naive values are UTC)."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


@dataclass(frozen=True)
class DateTimeRange:
    """A selected range of instants, displayed in a named timezone."""

    start: Optional[datetime] = None
    end: Optional[datetime] = None
    timezone: str = "UTC"

    def __post_init__(self) -> None:
        if self.start is not None:
            object.__setattr__(self, "start", to_instant(self.start))
        if self.end is not None:
            object.__setattr__(self, "end", to_instant(self.end))

    @property
    def state(self) -> SelectionState:
        """Selection state, derived from presence of start and end."""
        if self.start is None:
            return SelectionState.EMPTY
        if self.end is None:
            return SelectionState.PARTIAL_START
        return SelectionState.COMPLETE

    @property
    def is_complete(self) -> bool:
        """True if both start and end are set."""
        return self.start is not None and self.end is not None

    def with_bounds(
        self, start: Optional[datetime], end: Optional[datetime]
    ) -> "DateTimeRange":
        """Return a copy with new bounds, swapped if given out of order."""
        if start is not None and end is not None and to_instant(end) < to_instant(
            start
        ):
            start, end = end, start
        return replace(self, start=start, end=end)

    def to_iso_interval(self) -> str:
        """ISO 8601 interval text, with '..' marking an open end."""
        start = self.start.isoformat() if self.start else ".."
        end = self.end.isoformat() if self.end else ".."
        return f"{start}/{end}"
