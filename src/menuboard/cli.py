"""menuboard CLI - specials, events and announcements listing."""

import json
import logging
import sys
from datetime import datetime

import click

from .adapters.admin_api import AdminAPIAdapter, AdminAPIError
from .adapters.json_snapshot import JsonSnapshotStore
from .config import Config, load_config
from .core.clock import company_zone, parse_instant
from .core.items import Event
from .core.listing import FilterOption, SortOption, build_listing
from .core.recurrence import ResolverSettings, describe_pattern, upcoming_occurrences
from .format import format_item_line, item_to_dict
from .ports import ItemRepository


def _settings(config: Config) -> ResolverSettings:
    return ResolverSettings(
        scan_limit=config.recurrence_scan_limit,
        weekday_scan_days=config.weekday_scan_days,
        far_future_years=config.far_future_years,
        undated_announcements=config.undated_announcements,
    )


def _repository(config: Config, source: str | None, snapshot: str | None) -> ItemRepository:
    """Pick the item source: explicit URL, explicit file, then config."""
    if source:
        return AdminAPIAdapter(base_url=source, config=config)
    if snapshot:
        return JsonSnapshotStore(snapshot, company_zone(config.timezone))
    if config.admin_base_url:
        return AdminAPIAdapter(config=config)
    return JsonSnapshotStore(config.resolved_snapshot_path, company_zone(config.timezone))


def _resolve_now(value: str | None, tz) -> datetime:
    if not value:
        return datetime.now(tz)
    now = parse_instant(value, tz)
    if now is None:
        raise click.BadParameter(f"Not an ISO date/time: {value}", param_hint="--now")
    return now


def _source_options(f):
    f = click.option("--now", "now_str", default=None, help="Evaluate as of this ISO date/time")(f)
    f = click.option("--snapshot", default=None, type=click.Path(dir_okay=False), help="Read a JSON snapshot")(f)
    f = click.option("--source", default=None, help="Admin site base URL")(f)
    return f


@click.group()
@click.version_option(package_name="menuboard")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """menuboard - specials, events and announcements."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


@main.command("list")
@_source_options
@click.option(
    "--sort",
    "sort_by",
    default=None,
    type=click.Choice([o.value for o in SortOption]),
    help="Sort order (default from config, normally 'next')",
)
@click.option(
    "--filter",
    "filter_by",
    default=FilterOption.ALL.value,
    type=click.Choice([o.value for o in FilterOption]),
    help="Only show matching items",
)
@click.option("--search", "query", default=None, help="Case-insensitive text search")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_items(
    source: str | None,
    snapshot: str | None,
    now_str: str | None,
    sort_by: str | None,
    filter_by: str,
    query: str | None,
    as_json: bool,
):
    """List items in the admin "Specials & Events" order."""
    config = load_config()
    tz = company_zone(config.timezone)
    now = _resolve_now(now_str, tz)
    settings = _settings(config)

    try:
        sort_option = SortOption(sort_by or config.default_sort)
    except ValueError:
        click.echo(f"Error: Unknown DEFAULT_SORT {config.default_sort!r}", err=True)
        sys.exit(1)

    try:
        items = _repository(config, source, snapshot).fetch_all()
    except (AdminAPIError, OSError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    listing = build_listing(items, now, tz, sort_option, filter_by, query, settings)

    if as_json:
        click.echo(json.dumps([item_to_dict(i, now, tz, settings) for i in listing], indent=2))
        return

    if not listing:
        click.echo("No items.")
        return

    for item in listing:
        click.echo(format_item_line(item, now, tz, settings))


@main.command()
@_source_options
@click.option("--days", default=7, show_default=True, type=click.IntRange(min=1), help="Days ahead to include")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def upcoming(source: str | None, snapshot: str | None, now_str: str | None, days: int, as_json: bool):
    """Show event occurrences for the coming days."""
    config = load_config()
    tz = company_zone(config.timezone)
    now = _resolve_now(now_str, tz)

    try:
        events = _repository(config, source, snapshot).fetch_events()
    except (AdminAPIError, OSError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    occurrences = upcoming_occurrences([e for e in events if e.is_active], now, tz, days)
    patterns = {e.id: describe_pattern(e.recurrence_rule) for e in events if e.is_recurring}

    if as_json:
        click.echo(
            json.dumps(
                [
                    {
                        "id": e.id,
                        "title": e.title,
                        "start": e.start.isoformat(),
                        "end": e.end.isoformat() if e.end else None,
                        "all_day": e.all_day,
                        "pattern": patterns.get(e.id),
                    }
                    for e in occurrences
                ],
                indent=2,
            )
        )
        return

    if not occurrences:
        click.echo(f"No events in the next {days} days.")
        return

    _show_occurrences(occurrences, tz, patterns)


def _show_occurrences(occurrences: list[Event], tz, patterns: dict[str, str | None]) -> None:
    current_date = None
    for event in occurrences:
        local = event.start.astimezone(tz)
        if local.date() != current_date:
            if current_date is not None:
                click.echo()
            click.echo(f"### {local.strftime('%A, %B %d')}")
            current_date = local.date()

        time_str = "All day" if event.all_day else local.strftime("%H:%M")
        venue = f" @ {event.venue_area}" if event.venue_area else ""
        pattern = patterns.get(event.id)
        repeat = f" ({pattern})" if pattern else ""
        click.echo(f"  {time_str:8} {event.title}{venue}{repeat}")


@main.command()
@click.argument("output", type=click.Path(dir_okay=False))
@click.option("--source", default=None, help="Admin site base URL (default from config)")
def snapshot(output: str, source: str | None):
    """Save the admin site's items to a JSON snapshot."""
    config = load_config()
    try:
        adapter = AdminAPIAdapter(base_url=source, config=config)
        raw = adapter.fetch_raw()
        JsonSnapshotStore(output).save(raw)
    except (AdminAPIError, OSError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    counts = ", ".join(f"{len(rows)} {name}" for name, rows in raw.items())
    click.echo(f"Saved {counts} to {output}")
