from __future__ import annotations

from typing import Any, Dict, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from fieldledger.dashboard import CalendarView, FinanceView
from fieldledger.domain.models import GroupTotals
from fieldledger.utils.fields import get_field


def _money(value: float) -> str:
    return f"${value:,.2f}"


def _percent(value: float) -> str:
    return f"{value:.2f}%"


def finance_payload(view: FinanceView) -> Dict[str, Any]:
    """JSON-ready representation of a finance view."""
    return {
        "interval": view.interval.model_dump(mode="json") if view.interval else None,
        "record_ids": [get_field(record, "id") for record in view.records],
        "result": view.result.model_dump(mode="json"),
    }


def calendar_payload(view: CalendarView) -> Dict[str, Any]:
    """JSON-ready representation of a calendar view."""
    return {
        "granularity": view.granularity.value,
        "reference": view.reference.isoformat(),
        "interval": view.interval.model_dump(mode="json"),
        "previous": view.previous.isoformat() if view.previous else None,
        "next": view.next.isoformat() if view.next else None,
        "record_ids": [get_field(record, "id") for record in view.records],
        "counts": {day.isoformat(): count for day, count in view.counts.items()},
    }


def _group_row(table: Table, label: str, totals: GroupTotals, style: Optional[str] = None) -> None:
    table.add_row(
        label,
        f"{totals.record_count:,}",
        _money(totals.total_amount),
        _money(totals.total_earnings),
        _money(totals.total_expenses),
        _money(totals.total_profit),
        _percent(totals.margin_percent),
        style=style,
    )


def print_finance_view(view: FinanceView, console: Optional[Console] = None) -> None:
    """
    Render a finance roll-up as a rich table, one row per group plus a total row.
    """
    console = console or Console()
    result = view.result

    if result.record_count == 0:
        console.print("[yellow]No records match the current filters.[/yellow]")
        return

    title = "Financial Summary"
    if view.interval is not None:
        title = (
            f"{title}\n[dim]{view.interval.start:%Y-%m-%d} → {view.interval.end:%Y-%m-%d}[/dim]"
        )

    table = Table(title=title, box=box.ROUNDED, caption="Groups in first-seen order")
    table.add_column("Group", style="cyan", no_wrap=True)
    table.add_column("Records", justify="right", style="magenta")
    table.add_column("Revenue", justify="right", style="green")
    table.add_column("Earnings", justify="right", style="yellow")
    table.add_column("Expenses", justify="right", style="red")
    table.add_column("Profit", justify="right", style="bold green")
    table.add_column("Margin", justify="right", style="blue")

    for group in result.groups:
        _group_row(table, str(group.key) if group.key is not None else "(none)", group)

    if result.groups:
        table.add_section()
    overall = GroupTotals(
        key=None,
        record_count=result.record_count,
        total_amount=result.total_amount,
        total_earnings=result.total_earnings,
        total_expenses=result.total_expenses,
        total_profit=result.total_profit,
        margin_percent=result.margin_percent,
        parts_value=result.parts_value,
    )
    _group_row(table, "Total", overall, style="bold")

    console.print(table)
    if result.parts_value:
        console.print(f"[dim]Parts & materials value: {_money(result.parts_value)}[/dim]")
    if result.fixed_expenses:
        console.print(f"[dim]Includes fixed expenses: {_money(result.fixed_expenses)}[/dim]")


def print_calendar_view(view: CalendarView, console: Optional[Console] = None) -> None:
    """
    Render the records of a calendar period, followed by navigation hints.
    """
    console = console or Console()

    title = (
        f"{view.granularity.value.title()} view\n"
        f"[dim]{view.interval.start:%Y-%m-%d} → {view.interval.end:%Y-%m-%d}[/dim]"
    )
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("Date", style="cyan", no_wrap=True)
    table.add_column("ID", style="magenta")
    table.add_column("Title")
    table.add_column("Status", style="yellow")

    for record in view.records:
        table.add_row(
            str(get_field(record, "occurs_at", "")),
            str(get_field(record, "id", "")),
            str(get_field(record, "title", "") or ""),
            str(get_field(record, "status", "") or ""),
        )

    if view.records:
        console.print(table)
    else:
        console.print(f"[yellow]Nothing scheduled.[/yellow] {title}")

    busy = sum(1 for count in view.counts.values() if count)
    console.print(
        f"[dim]{len(view.records)} record(s) on {busy} day(s) │ "
        f"previous: {view.previous:%Y-%m-%d} │ next: {view.next:%Y-%m-%d}[/dim]"
    )


__all__ = ["finance_payload", "calendar_payload", "print_finance_view", "print_calendar_view"]
