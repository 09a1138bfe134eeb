"""
Report Commands
---------------

Monthly views over a user's records.

Commands:
    - stats: Mood histogram and per-kind counts for a month
    - calendar: Month grid marking days that have records

Usage:
    mindnote stats --month 2024-05
    mindnote stats --json
    mindnote calendar --month 2024-05 --day 14
"""
import json
from datetime import MAXYEAR, MINYEAR, date
from typing import Optional, Tuple

import click

from mindnote.core.exceptions import DatabaseError
from mindnote.core.logging_manager import handle_cli_error
from mindnote.journal.analytics import monthly_stats
from mindnote.journal.calendar_view import (
    WEEKDAY_LABELS,
    days_with_records,
    iso_day,
    month_grid,
    shift_month,
)
from mindnote.journal.models import MOOD_EMOJI, RecordKind, ViewMode
from mindnote.journal.query import FilterSpec, filter_records
from . import get_config, get_identity, get_store
from .records import format_record_line


def parse_month(value: Optional[str]) -> Tuple[int, int]:
    """
    Parse YYYY-MM, defaulting to the current month.

    Raises:
        click.BadParameter: If the value is not a valid month
    """
    if not value:
        today = date.today()
        return today.year, today.month
    try:
        year_text, month_text = value.split("-")
        year, month = int(year_text), int(month_text)
    except ValueError:
        raise click.BadParameter(f"expected YYYY-MM, got {value!r}", param_hint="--month")
    if not MINYEAR <= year <= MAXYEAR:
        raise click.BadParameter(
            f"year must be {MINYEAR:04d}-{MAXYEAR}, got {value!r}", param_hint="--month"
        )
    if not 1 <= month <= 12:
        raise click.BadParameter(f"month must be 01-12, got {value!r}", param_hint="--month")
    return year, month


@click.command()
@click.option("--month", default=None, help="Month (YYYY-MM), default current")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def stats(ctx, month, as_json):
    """Show mood and kind statistics for a month."""
    year, month_number = parse_month(month)

    try:
        config = get_config(ctx)
        identity = get_identity(ctx)
        records = get_store(ctx).snapshot(identity.user_id)
        report = monthly_stats(records, year, month_number)

        if as_json:
            click.echo(json.dumps(report.to_dict(), ensure_ascii=False, indent=2))
            return

        click.echo(f"\n📊 {report.period_label}: {report.record_count} records")

        click.echo(f"\nMood ({report.mood_total} emotion logs)")
        for mood, count in enumerate(report.mood_counts, start=1):
            bar = "█" * count
            click.echo(f"  {MOOD_EMOJI[mood - 1]} {mood}: {count:3d} {bar}")
        click.echo(f"  Most frequent: {report.dominant_emoji}")

        click.echo("\nBy kind")
        for kind in RecordKind:
            click.echo(f"  {kind.label(config.locale)}: {report.kind_counts[kind]}")

    except DatabaseError as e:
        handle_cli_error(ctx, e, "stats", additional_context={"month": month})


@click.command("calendar")
@click.option("--month", default=None, help="Month (YYYY-MM), default current")
@click.option("--day", type=click.IntRange(1, 31), default=None, help="List records of this day")
@click.pass_context
def calendar_cmd(ctx, month, day):
    """Show a month grid; days with records are marked with *."""
    year, month_number = parse_month(month)

    try:
        config = get_config(ctx)
        identity = get_identity(ctx)
        records = get_store(ctx).snapshot(identity.user_id)
        marked = days_with_records(records, year, month_number)

        prev_year, prev_month = shift_month(year, month_number, -1)
        next_year, next_month = shift_month(year, month_number, 1)
        click.echo(
            f"\n◀ {prev_year:04d}-{prev_month:02d}   "
            f"{year:04d}-{month_number:02d}   "
            f"{next_year:04d}-{next_month:02d} ▶\n"
        )
        click.echo(" ".join(f"{label:>3}" for label in WEEKDAY_LABELS[config.locale]))

        for week in month_grid(year, month_number):
            cells = []
            for cell in week:
                if cell is None:
                    cells.append("   ")
                else:
                    marker = "*" if cell in marked else " "
                    cells.append(f"{cell:>2}{marker}")
            click.echo(" ".join(cells))

        if day is not None:
            spec = FilterSpec.for_view(
                ViewMode.CALENDAR, selected_date=iso_day(year, month_number, day)
            )
            selected = filter_records(records, spec)
            click.echo(f"\n📅 {spec.active_date}")
            if not selected:
                click.echo("  No records")
            for record in selected:
                click.echo(format_record_line(record, config.locale))

    except DatabaseError as e:
        handle_cli_error(ctx, e, "calendar", additional_context={"month": month})
