"""Command-line interface for rangepicker."""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import click

from .calendar_grid import WEEKDAY_LABELS, month_grid
from .clock import (
    MONTH_TITLE_PATTERN,
    RANGE_LABEL_PATTERN,
    ZonedWallClock,
    format_instant,
    from_zoned,
    to_zoned,
)
from .config import load_config, parse_instant
from .constraints import NO_CONSTRAINTS, validate
from .presets import get_preset, get_registry, resolve_preset


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def main(verbose: bool) -> None:
    """rangepicker: Timezone-aware date/time range selection engine."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


@main.command()
@click.argument("year", type=int)
@click.argument("month", type=click.IntRange(1, 12))
@click.option("--tz", "tz_name", default="UTC", help="IANA timezone")
def calendar(year: int, month: int, tz_name: str) -> None:
    """Print a Monday-first month grid laid out in a timezone."""
    try:
        rows = month_grid(year, month, tz_name)
        first_day = next(cell for cell in rows[0] if cell is not None)
        click.echo(format_instant(first_day, tz_name, MONTH_TITLE_PATTERN))
        click.echo(" ".join(f"{label:>2}" for label in WEEKDAY_LABELS))
        for row in rows:
            click.echo(
                " ".join(
                    f"{format_instant(cell, tz_name, 'd'):>2}" if cell else "  "
                    for cell in row
                )
            )
    except Exception as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)


@main.command()
@click.argument("instant")
@click.option("--tz", "tz_name", default="UTC", help="IANA timezone")
@click.option(
    "--pattern", default="yyyy-MM-dd HH:mm zzz (xxx)", help="Display pattern"
)
def convert(instant: str, tz_name: str, pattern: str) -> None:
    """Show an ISO 8601 instant as wall-clock time in a timezone."""
    try:
        dt = parse_instant(instant, "instant")
        zoned = to_zoned(dt, tz_name)
        click.echo(
            f"{zoned.year:04d}-{zoned.month:02d}-{zoned.day:02d} "
            f"{zoned.hour:02d}:{zoned.minute:02d}"
        )
        click.echo(format_instant(dt, tz_name, pattern))
    except Exception as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)


@main.command()
@click.argument("day", type=click.DateTime(formats=["%Y-%m-%d"]))
@click.argument("time_of_day", type=click.DateTime(formats=["%H:%M"]))
@click.option("--tz", "tz_name", required=True, help="IANA timezone")
def resolve(day: datetime, time_of_day: datetime, tz_name: str) -> None:
    """
    Resolve a wall-clock time in a timezone to a UTC instant.

    Repeated times resolve to their first occurrence; skipped times are
    moved forward past the gap.
    """
    try:
        wall_clock = ZonedWallClock(
            day.year, day.month, day.day, time_of_day.hour, time_of_day.minute
        )
        instant = from_zoned(wall_clock, tz_name)
        click.echo(instant.isoformat())
        click.echo(format_instant(instant, tz_name, "yyyy-MM-dd HH:mm zzz (xxx)"))
    except Exception as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)


@main.command("validate")
@click.argument("start")
@click.argument("end")
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, path_type=Path),
    help="Configuration file with constraints",
)
@click.option("--tz", "tz_name", help="IANA timezone (default: from config or UTC)")
def validate_command(
    start: str, end: str, config_file: Optional[Path], tz_name: Optional[str]
) -> None:
    """Validate a START..END range against configured constraints."""
    try:
        constraints = NO_CONSTRAINTS
        if config_file:
            config = load_config(config_file)
            constraints = config.to_constraints()
            tz_name = tz_name or config.timezone
        tz_name = tz_name or "UTC"

        start_dt = parse_instant(start, "start")
        end_dt = parse_instant(end, "end")
    except Exception as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)

    violation = validate(start_dt, end_dt, constraints, tz_name)
    if violation is not None:
        click.echo(f"❌ {violation.name}: {violation.message}")
        sys.exit(1)
    click.echo("✅ OK")


@main.command()
@click.argument("name")
@click.option("--now", "now_text", help="Reference instant (default: current time)")
@click.option("--tz", "tz_name", default="UTC", help="IANA timezone")
def preset(name: str, now_text: Optional[str], tz_name: str) -> None:
    """Resolve a named preset into a concrete range."""
    try:
        now = parse_instant(now_text, "now") or datetime.now(timezone.utc)
        selected = get_preset(name)
        start, end = resolve_preset(selected, now, tz_name)
        click.echo(selected.label)
        click.echo(f"  start: {start.isoformat()}")
        click.echo(f"  end:   {end.isoformat()}")
        click.echo(
            f"  {format_instant(start, tz_name, RANGE_LABEL_PATTERN)} → "
            f"{format_instant(end, tz_name, RANGE_LABEL_PATTERN)}"
        )
    except Exception as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)


@main.command()
def presets() -> None:
    """List registered presets."""
    registry = get_registry()
    for name in registry.list_presets():
        click.echo(f"  {name}: {registry.get_preset(name).label}")


@main.command()
@click.option("--create", is_flag=True, help="Create default configuration template")
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    default="rangepicker.json",
    help="Output path",
)
def config(create: bool, output: Path) -> None:
    """
    Configuration management commands.

    Use --create to generate a default configuration template.
    """
    if create:
        from .config import create_default_config

        default_config = create_default_config()

        with open(output, "w") as f:
            json.dump(default_config, f, indent=2)

        click.echo(f"✅ Created default configuration: {output}")
    else:
        click.echo("Use --create to generate default configuration")


if __name__ == "__main__":
    main()
