"""Timezone-aware conversion between instants and zoned wall clocks."""

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .timespan import to_instant

logger = logging.getLogger(__name__)

RANGE_LABEL_PATTERN = "MMM d, p"
MONTH_TITLE_PATTERN = "MMMM yyyy"
DAY_CELL_PATTERN = "d"

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)
WEEKDAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

_TOKEN_RE = re.compile(
    r"'[^']*'|yyyy|yy|MMMM|MMM|MM|M|dd|d|EEEE|EEE|HH|H|hh|h|mm|ss|xxx|zzz|a|p"
)


class ConfigurationError(ValueError):
    """Raised when a timezone or other configuration value cannot be resolved."""

    pass


@dataclass(frozen=True)
class ZonedWallClock:
    """Calendar date and time of day as seen in some timezone."""

    year: int
    month: int
    day: int
    hour: int = 0
    minute: int = 0

    def __post_init__(self) -> None:
        # datetime() rejects out-of-range fields, e.g. February 30th or hour 24
        self.to_naive()

    def to_naive(self) -> datetime:
        """Naive datetime carrying the same wall-clock fields."""
        return datetime(self.year, self.month, self.day, self.hour, self.minute)

    def date(self) -> date:
        """Calendar date part of the wall clock."""
        return date(self.year, self.month, self.day)

    def with_time(self, hour: int, minute: int) -> "ZonedWallClock":
        """Return a copy with the time of day overwritten."""
        return ZonedWallClock(self.year, self.month, self.day, hour, minute)

    @classmethod
    def from_datetime(cls, dt: datetime) -> "ZonedWallClock":
        """Build from the wall-clock fields of a datetime, ignoring its tzinfo."""
        return cls(dt.year, dt.month, dt.day, dt.hour, dt.minute)


def resolve_timezone(tz_name: str) -> ZoneInfo:
    """
    Resolve an IANA timezone identifier.

    Args:
        tz_name: IANA name such as "America/New_York"

    Returns:
        ZoneInfo for the identifier

    Raises:
        ConfigurationError: If the identifier is empty, malformed or unknown
    """
    if not isinstance(tz_name, str) or not tz_name:
        raise ConfigurationError(f"Invalid timezone identifier: {tz_name!r}")
    return _load_zone(tz_name)


@lru_cache(maxsize=None)
def _load_zone(tz_name: str) -> ZoneInfo:
    # directory names and overlong ids surface as OSError from the tz database
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as e:
        raise ConfigurationError(f"Unknown timezone '{tz_name}': {e}") from e


def to_zoned(instant: datetime, tz_name: str) -> ZonedWallClock:
    """
    Wall clock for an instant, using the zone's offset at that instant.

    Wall clocks have minute resolution; seconds and microseconds are dropped.
    """
    local = to_instant(instant).astimezone(resolve_timezone(tz_name))
    return ZonedWallClock.from_datetime(local)


def from_zoned(wall_clock: ZonedWallClock, tz_name: str) -> datetime:
    """
    Instant for a wall-clock time in a timezone.

    A repeated local time (clocks set back) resolves to its first occurrence,
    the earlier UTC instant. A skipped local time (clocks set forward) is
    shifted forward by the length of the gap.

    Args:
        wall_clock: Local date and time of day
        tz_name: IANA timezone name

    Returns:
        Aware UTC datetime
    """
    tz = resolve_timezone(tz_name)
    naive = wall_clock.to_naive()

    first = naive.replace(tzinfo=tz, fold=0).astimezone(timezone.utc)
    second = naive.replace(tzinfo=tz, fold=1).astimezone(timezone.utc)
    if first == second:
        return first

    if first.astimezone(tz).replace(tzinfo=None) == naive:
        logger.debug(f"{naive} is repeated in {tz_name}, using first occurrence")
        return min(first, second)

    resolved = max(first, second)
    logger.debug(
        f"{naive} does not exist in {tz_name}, shifted to "
        f"{resolved.astimezone(tz).replace(tzinfo=None)}"
    )
    return resolved


def zoned_date(instant: datetime, tz_name: str) -> date:
    """Calendar date of an instant in a timezone."""
    return to_zoned(instant, tz_name).date()


def start_of_day(instant: datetime, tz_name: str) -> datetime:
    """Instant of local midnight on the instant's zoned date."""
    return from_zoned(to_zoned(instant, tz_name).with_time(0, 0), tz_name)


def shift_days(instant: datetime, days: int, tz_name: str) -> datetime:
    """Move an instant by whole calendar days, keeping its wall-clock time."""
    zoned = to_zoned(instant, tz_name)
    target = zoned.date() + timedelta(days=days)
    shifted = ZonedWallClock(
        target.year, target.month, target.day, zoned.hour, zoned.minute
    )
    utc = to_instant(instant)
    # keep seconds, which the wall clock drops
    remainder = timedelta(seconds=utc.second, microseconds=utc.microsecond)
    return from_zoned(shifted, tz_name) + remainder


def format_instant(instant: datetime, tz_name: str, pattern: str) -> str:
    """
    Render an instant in a timezone using date-fns style tokens.

    Supported tokens: yyyy yy MMMM MMM MM M dd d EEEE EEE HH H hh h mm ss
    a p xxx zzz. Text inside single quotes is copied literally.
    """
    local = to_instant(instant).astimezone(resolve_timezone(tz_name))

    def render(match: re.Match) -> str:
        token = match.group(0)
        if token.startswith("'"):
            return token[1:-1] if len(token) > 2 else "'"
        return _render_token(token, local)

    return _TOKEN_RE.sub(render, pattern)


def _render_token(token: str, local: datetime) -> str:
    """Render a single format token for a zone-local datetime."""
    hour12 = local.hour % 12 or 12
    if token == "yyyy":
        return f"{local.year:04d}"
    if token == "yy":
        return f"{local.year % 100:02d}"
    if token == "MMMM":
        return MONTH_NAMES[local.month - 1]
    if token == "MMM":
        return MONTH_NAMES[local.month - 1][:3]
    if token == "MM":
        return f"{local.month:02d}"
    if token == "M":
        return str(local.month)
    if token == "dd":
        return f"{local.day:02d}"
    if token == "d":
        return str(local.day)
    if token == "EEEE":
        return WEEKDAY_NAMES[local.weekday()]
    if token == "EEE":
        return WEEKDAY_NAMES[local.weekday()][:3]
    if token == "HH":
        return f"{local.hour:02d}"
    if token == "H":
        return str(local.hour)
    if token == "hh":
        return f"{hour12:02d}"
    if token == "h":
        return str(hour12)
    if token == "mm":
        return f"{local.minute:02d}"
    if token == "ss":
        return f"{local.second:02d}"
    if token == "a":
        return "AM" if local.hour < 12 else "PM"
    if token == "p":
        return f"{hour12}:{local.minute:02d} {'AM' if local.hour < 12 else 'PM'}"
    if token == "xxx":
        return _format_offset(local.utcoffset() or timedelta(0))
    if token == "zzz":
        return local.tzname() or ""
    raise ValueError(f"Unsupported format token: {token}")


def _format_offset(offset: timedelta) -> str:
    """Format a UTC offset as +HH:MM."""
    minutes = int(offset.total_seconds() // 60)
    sign = "+" if minutes >= 0 else "-"
    minutes = abs(minutes)
    return f"{sign}{minutes // 60:02d}:{minutes % 60:02d}"
