from __future__ import annotations

import json
import sys
from datetime import date
from pathlib import Path
from typing import Any, List, NoReturn, Optional, Type

import typer
from pydantic import BaseModel, ValidationError

from fieldledger.bucketing import DatePreset, advance, preset_interval
from fieldledger.config import get_settings
from fieldledger.dashboard import build_calendar_view, build_finance_view
from fieldledger.domain.errors import LedgerError
from fieldledger.domain.models import DatedRecord, FilterCriteria, FinancialRecord, Granularity
from fieldledger.filtering import SortOption
from fieldledger.reporter import (
    calendar_payload,
    finance_payload,
    print_calendar_view,
    print_finance_view,
)
from fieldledger.utils.logging import configure_logging, get_logger

app = typer.Typer(help="Field-service ledger: calendar periods and financial roll-ups.")
log = get_logger(__name__)


def _fail(message: str) -> NoReturn:
    typer.secho(message, fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


@app.callback()
def _setup() -> None:
    try:
        settings = get_settings()
    except ValidationError as exc:
        _fail(f"Invalid configuration: {exc}")
    configure_logging(level=settings.log_level, json_logs=settings.log_json)


def _load_records(path: Path, model: Type[BaseModel]) -> List[Any]:
    """Read a JSON array of records (or {"records": [...]}) and validate each entry."""
    with path.open("r", encoding="utf-8") as f:
        payload = json.load(f)
    if isinstance(payload, dict):
        payload = payload.get("records", [])
    if not isinstance(payload, list):
        raise ValueError(f"{path} must contain a JSON array of records")
    records = [model.model_validate(item) for item in payload]
    log.info("Records loaded", extra={"path": str(path), "records": len(records)})
    return records


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"env={settings.app_env} | tz={settings.timezone or 'none (no conversion)'} | "
        f"expense_ratio={settings.expense_ratio} parts_ratio={settings.parts_ratio} | "
        f"hours_per_record={settings.effective_hours_per_record():g} "
        f"({settings.hours_per_week:g}h/week x {settings.weeks_per_month:g} weeks/month)"
    )


@app.command()
def summary(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON file of financial records."),
    group_by: Optional[str] = typer.Option(
        None, "--group-by", "-g", help="Field to group by (e.g., group_key, technician)."
    ),
    search: Optional[str] = typer.Option(None, "--search", "-q", help="Case-insensitive text search."),
    search_fields: Optional[List[str]] = typer.Option(
        None, "--search-field", help="Field searched by --search (repeatable)."
    ),
    groups: Optional[List[str]] = typer.Option(None, "--group", help="Keep only this group (repeatable)."),
    statuses: Optional[List[str]] = typer.Option(None, "--status", help="Keep only this status (repeatable)."),
    min_amount: Optional[float] = typer.Option(None, "--min-amount", help="Minimum amount (inclusive)."),
    max_amount: Optional[float] = typer.Option(None, "--max-amount", help="Maximum amount (inclusive)."),
    on: Optional[str] = typer.Option(None, "--date", "-d", help="Reference date for --view (ISO-8601)."),
    view: Granularity = typer.Option(Granularity.MONTH, "--view", help="Period around --date."),
    preset: Optional[DatePreset] = typer.Option(None, "--preset", help="Quick date range relative to today."),
    sort: Optional[SortOption] = typer.Option(None, "--sort", help="Order of the filtered records."),
    expense_ratio: Optional[float] = typer.Option(
        None, "--expense-ratio", help="Share of revenue treated as expenses (default from settings)."
    ),
    parts_ratio: Optional[float] = typer.Option(
        None, "--parts-ratio", help="Share of revenue reported as parts value (default from settings)."
    ),
    hours_per_record: Optional[float] = typer.Option(
        None, "--hours-per-record", help="Hours credited to each hourly record (default from settings)."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table."),
) -> None:
    """
    Filter financial records and print revenue, earnings, expenses, profit and margin.
    """
    settings = get_settings()
    tz = settings.tzinfo()

    if on is not None and preset is not None:
        _fail("Use either --date/--view or --preset, not both.")

    try:
        records = _load_records(path, FinancialRecord)
        criteria_fields: dict = {
            "search_text": search,
            "include_groups": frozenset(groups or ()),
            "include_statuses": frozenset(statuses or ()),
        }
        if search_fields:
            criteria_fields["search_fields"] = tuple(search_fields)
        if min_amount is not None or max_amount is not None:
            criteria_fields["amount_range"] = (min_amount, max_amount)
        if preset is not None:
            criteria_fields["date_interval"] = preset_interval(preset, date.today(), tz)
        criteria = FilterCriteria(**criteria_fields)

        result_view = build_finance_view(
            records,
            criteria,
            reference=on,
            granularity=view if on is not None else None,
            group_by=group_by,
            sort=sort,
            tz=tz,
            expense_ratio=settings.expense_ratio if expense_ratio is None else expense_ratio,
            parts_ratio=settings.parts_ratio if parts_ratio is None else parts_ratio,
            hours_per_record=(
                settings.effective_hours_per_record() if hours_per_record is None else hours_per_record
            ),
        )
    except (LedgerError, ValidationError, ValueError, OSError) as exc:
        log.debug("Summary failed", exc_info=True)
        _fail(f"Error: {exc}")

    if as_json:
        typer.echo(json.dumps(finance_payload(result_view), indent=2))
    else:
        print_finance_view(result_view)


@app.command("calendar")
def calendar_cmd(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON file of dated records."),
    on: Optional[str] = typer.Option(None, "--date", "-d", help="Reference date (ISO-8601); defaults to today."),
    view: Granularity = typer.Option(Granularity.WEEK, "--view", help="Calendar granularity."),
    offset: int = typer.Option(0, "--offset", "-n", help="Periods to move forward (+) or back (-)."),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table."),
) -> None:
    """
    Show the jobs and tasks scheduled in a day, week or month.
    """
    zone = get_settings().tzinfo()
    try:
        records = _load_records(path, DatedRecord)
        reference: Any = on if on is not None else date.today()
        step = 1 if offset > 0 else -1
        for _ in range(abs(offset)):
            reference = advance(reference, view, step, tz=zone)
        calendar_view = build_calendar_view(records, reference, view, tz=zone)
    except (LedgerError, ValidationError, ValueError, OSError) as exc:
        log.debug("Calendar failed", exc_info=True)
        _fail(f"Error: {exc}")

    if as_json:
        typer.echo(json.dumps(calendar_payload(calendar_view), indent=2))
    else:
        print_calendar_view(calendar_view)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
