"""Tests for timezone-aware instant and wall-clock conversion."""

from datetime import date, datetime, timezone

import pytest

from rangepicker.clock import (
    MONTH_TITLE_PATTERN,
    RANGE_LABEL_PATTERN,
    ConfigurationError,
    ZonedWallClock,
    format_instant,
    from_zoned,
    resolve_timezone,
    shift_days,
    start_of_day,
    to_zoned,
    zoned_date,
)

NEW_YORK = "America/New_York"


def test_to_zoned_uses_offset_at_instant():
    """Test the same UTC hour maps to different local hours in summer and winter."""
    summer = to_zoned(datetime(2023, 7, 1, 16, 0, tzinfo=timezone.utc), NEW_YORK)
    winter = to_zoned(datetime(2023, 1, 15, 16, 0, tzinfo=timezone.utc), NEW_YORK)

    assert summer == ZonedWallClock(2023, 7, 1, 12, 0)
    assert winter == ZonedWallClock(2023, 1, 15, 11, 0)


def test_to_zoned_crosses_date_line():
    """Test large offsets move the wall clock onto another calendar day."""
    instant = datetime(2023, 5, 31, 12, 0, tzinfo=timezone.utc)

    assert to_zoned(instant, "Pacific/Kiritimati").date() == date(2023, 6, 1)
    assert to_zoned(instant, "Pacific/Pago_Pago").date() == date(2023, 5, 31)


def test_to_zoned_naive_input_is_utc():
    """Test naive datetimes are interpreted as UTC."""
    zoned = to_zoned(datetime(2023, 7, 1, 16, 0), NEW_YORK)
    assert zoned.hour == 12


@pytest.mark.parametrize(
    "tz_name", ["America/New_York", "Asia/Tokyo", "Asia/Kolkata", "Europe/London"]
)
def test_round_trip_without_transition(tz_name):
    """Test from_zoned(to_zoned(i)) returns the original instant."""
    instant = datetime(2023, 6, 15, 13, 45, tzinfo=timezone.utc)
    assert from_zoned(to_zoned(instant, tz_name), tz_name) == instant


def test_from_zoned_spring_forward_shifts_past_gap():
    """Test a skipped local time moves forward by the one hour gap."""
    instant = from_zoned(ZonedWallClock(2023, 3, 12, 2, 30), NEW_YORK)

    assert instant == datetime(2023, 3, 12, 7, 30, tzinfo=timezone.utc)
    assert to_zoned(instant, NEW_YORK) == ZonedWallClock(2023, 3, 12, 3, 30)


def test_from_zoned_fall_back_picks_first_occurrence():
    """Test a repeated local time resolves to the earlier instant every time."""
    wall_clock = ZonedWallClock(2023, 11, 5, 1, 30)

    first = from_zoned(wall_clock, NEW_YORK)
    second = from_zoned(wall_clock, NEW_YORK)

    assert first == datetime(2023, 11, 5, 5, 30, tzinfo=timezone.utc)
    assert first == second


def test_from_zoned_returns_utc():
    """Test resolved instants carry the UTC timezone."""
    instant = from_zoned(ZonedWallClock(2023, 6, 1, 9, 0), "Asia/Tokyo")
    assert instant.tzinfo == timezone.utc
    assert instant == datetime(2023, 6, 1, 0, 0, tzinfo=timezone.utc)


def test_unknown_timezone_is_configuration_error():
    """Test unresolvable identifiers raise instead of falling back to UTC."""
    with pytest.raises(ConfigurationError, match="Unknown timezone"):
        to_zoned(datetime(2023, 1, 1, tzinfo=timezone.utc), "Mars/Olympus_Mons")

    with pytest.raises(ConfigurationError):
        from_zoned(ZonedWallClock(2023, 1, 1), "Not/AZone")

    with pytest.raises(ConfigurationError, match="Invalid timezone identifier"):
        resolve_timezone("")

    with pytest.raises(ConfigurationError, match="Unknown timezone"):
        resolve_timezone("America")

    with pytest.raises(ConfigurationError, match="Unknown timezone"):
        resolve_timezone("a" * 300)


def test_non_string_timezone_is_configuration_error():
    """Test unhashable identifiers are rejected before the zone cache."""
    with pytest.raises(ConfigurationError, match="Invalid timezone identifier"):
        resolve_timezone(["America/New_York"])

    with pytest.raises(ConfigurationError, match="Invalid timezone identifier"):
        to_zoned(datetime(2023, 1, 1, tzinfo=timezone.utc), {"a": 1})


def test_configuration_error_is_value_error():
    """Test ConfigurationError can be handled as a ValueError."""
    assert issubclass(ConfigurationError, ValueError)


def test_wall_clock_rejects_out_of_range_fields():
    """Test impossible wall-clock values are rejected on construction."""
    with pytest.raises(ValueError):
        ZonedWallClock(2023, 2, 30)
    with pytest.raises(ValueError):
        ZonedWallClock(2023, 13, 1)
    with pytest.raises(ValueError):
        ZonedWallClock(2023, 1, 1, 24, 0)


def test_format_instant_uses_zone_offset():
    """Test formatting renders in the zone's offset at that instant."""
    instant = datetime(2023, 3, 12, 7, 30, tzinfo=timezone.utc)

    text = format_instant(instant, NEW_YORK, "yyyy-MM-dd HH:mm zzz xxx")

    assert text == "2023-03-12 03:30 EDT -04:00"


def test_format_instant_named_patterns():
    """Test the display patterns used for range labels and month titles."""
    instant = datetime(2023, 6, 10, 18, 5, tzinfo=timezone.utc)

    assert format_instant(instant, NEW_YORK, RANGE_LABEL_PATTERN) == "Jun 10, 2:05 PM"
    assert format_instant(instant, NEW_YORK, MONTH_TITLE_PATTERN) == "June 2023"
    assert format_instant(instant, NEW_YORK, "EEEE EEE d") == "Saturday Sat 10"


def test_format_instant_quoted_literals_and_half_hour_offset():
    """Test quoted text is copied and fractional offsets are rendered."""
    instant = datetime(2023, 6, 10, 0, 0, tzinfo=timezone.utc)

    assert format_instant(instant, "Asia/Kolkata", "'Week of' MMM d") == "Week of Jun 10"
    assert format_instant(instant, "Asia/Kolkata", "xxx") == "+05:30"
    assert format_instant(instant, "Asia/Kolkata", "hh:mm a") == "05:30 AM"


def test_zoned_date():
    """Test the zoned calendar date differs from the UTC date late in the day."""
    instant = datetime(2023, 11, 10, 0, 0, tzinfo=timezone.utc)

    assert zoned_date(instant, NEW_YORK) == date(2023, 11, 9)
    assert zoned_date(instant, "UTC") == date(2023, 11, 10)


def test_start_of_day():
    """Test local midnight is computed on the zoned date."""
    instant = datetime(2023, 6, 10, 3, 0, tzinfo=timezone.utc)

    midnight = start_of_day(instant, NEW_YORK)

    assert midnight == datetime(2023, 6, 9, 4, 0, tzinfo=timezone.utc)


def test_shift_days_keeps_wall_clock_across_dst():
    """Test day arithmetic keeps noon at noon across spring forward."""
    noon_est = datetime(2023, 3, 11, 17, 0, tzinfo=timezone.utc)

    shifted = shift_days(noon_est, 1, NEW_YORK)

    assert shifted == datetime(2023, 3, 12, 16, 0, tzinfo=timezone.utc)
    assert to_zoned(shifted, NEW_YORK).hour == 12


def test_shift_days_keeps_seconds():
    """Test sub-minute precision survives day arithmetic."""
    instant = datetime(2023, 6, 10, 12, 0, 45, tzinfo=timezone.utc)
    assert shift_days(instant, -1, "UTC") == datetime(
        2023, 6, 9, 12, 0, 45, tzinfo=timezone.utc
    )
