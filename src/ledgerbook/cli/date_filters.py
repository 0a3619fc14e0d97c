"""CLI helpers for date range resolution."""

from datetime import date

import click

from ledgerbook.utils.date_parser import get_date_range, parse_date

PERIODS = ["this-week", "this-month", "this-year", "last-week", "last-month", "last-year"]


def resolve_cli_date_range(
    ctx: click.Context,
    *,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
) -> tuple[date | None, date | None]:
    """Resolve a date range from --period or explicit --start-date/--end-date."""
    if period is not None:
        if start_date or end_date:
            click.echo("Error: --period cannot be combined with --start-date or --end-date.", err=True)
            ctx.exit(1)
        return get_date_range(period)

    start = end = None
    try:
        if start_date:
            start = parse_date(start_date)
        if end_date:
            end = parse_date(end_date)
    except ValueError as e:
        click.echo(f"Error: Invalid date: {e}", err=True)
        ctx.exit(1)

    if start and end and start > end:
        click.echo("Error: --start-date is after --end-date.", err=True)
        ctx.exit(1)
    return start, end
