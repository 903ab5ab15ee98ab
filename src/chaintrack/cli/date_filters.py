"""Resolve the date range of a CLI invocation."""

from datetime import date

import click

from chaintrack.cli.error_handling import fail
from chaintrack.utils.date_parser import get_date_range, parse_date

PERIOD_OPTIONS = ("this-month", "this-year", "last-month", "last-year")

_PERIOD_FLAGS = ", ".join(f"--{period}" for period in PERIOD_OPTIONS)


def _parse_bound(ctx: click.Context, value: str | None, label: str) -> date | None:
    if not value:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        fail(ctx, f"Invalid {label} date: {e}")


def resolve_cli_date_range(
    ctx: click.Context,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
) -> tuple[date | None, date | None]:
    """Turn ``--start-date``/``--end-date`` or one period flag into dates.

    Both bounds are inclusive; either may be None. Conflicting options,
    unparseable dates and a start after the end exit with status 1.
    """
    selected = [period for period, is_set in period_flags.items() if is_set]

    if len(selected) > 1:
        fail(ctx, f"Only one period option ({_PERIOD_FLAGS}) can be specified at a time.")
    if selected and (start_date or end_date):
        fail(ctx, "Period options cannot be combined with --start-date or --end-date.")

    if selected:
        return get_date_range(selected[0])

    start = _parse_bound(ctx, start_date, "start")
    end = _parse_bound(ctx, end_date, "end")
    if start is not None and end is not None and start > end:
        fail(ctx, "Start date must be on or before end date.")
    return start, end
