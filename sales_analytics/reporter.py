from __future__ import annotations

from typing import Dict, List, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from sales_analytics.domain.models import (
    CombinedView,
    PriceRangeCount,
    SaleRecord,
    SaleStatistics,
)


def _console(console: Optional[Console]) -> Console:
    return console or Console()


def transactions_table(records: List[SaleRecord]) -> Table:
    table = Table(title="Transactions", box=box.ROUNDED)
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Title", style="cyan", max_width=40)
    table.add_column("Category", style="magenta")
    table.add_column("Price", justify="right", style="green")
    table.add_column("Sold", justify="center")
    table.add_column("Date of Sale", style="yellow")

    for record in records:
        table.add_row(
            "" if record.id is None else str(record.id),
            record.title,
            record.category,
            f"{record.price:,.2f}",
            "[green]yes[/green]" if record.sold else "[red]no[/red]",
            record.date_of_sale.strftime("%Y-%m-%d"),
        )
    return table


def statistics_table(stats: SaleStatistics) -> Table:
    table = Table(title="Statistics", box=box.ROUNDED, show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right", style="bold green")
    table.add_row("Total sale amount", f"{stats.total_sale_amount:,.2f}")
    table.add_row("Sold items", str(stats.sold_items))
    table.add_row("Not sold items", str(stats.not_sold_items))
    return table


def histogram_table(buckets: List[PriceRangeCount]) -> Table:
    """Bucket counts with a proportional bar, in bucket order."""
    table = Table(title="Price Ranges", box=box.ROUNDED)
    table.add_column("Range", style="cyan", no_wrap=True)
    table.add_column("Count", justify="right", style="magenta")
    table.add_column("", style="green")

    peak = max((bucket.count for bucket in buckets), default=0)
    for bucket in buckets:
        width = round(30 * bucket.count / peak) if peak else 0
        table.add_row(bucket.range, str(bucket.count), "█" * width)
    return table


def categories_table(breakdown: Dict[str, int]) -> Table:
    table = Table(title="Categories", box=box.ROUNDED, caption="Sorted by count (descending)")
    table.add_column("Category", style="cyan")
    table.add_column("Count", justify="right", style="magenta")
    for label, count in sorted(breakdown.items(), key=lambda item: (-item[1], item[0])):
        table.add_row(label, str(count))
    return table


def print_transactions(records: List[SaleRecord], console: Optional[Console] = None) -> None:
    out = _console(console)
    if not records:
        out.print("[yellow]No transactions match this query.[/yellow]")
        return
    out.print(transactions_table(records))


def print_statistics(stats: SaleStatistics, console: Optional[Console] = None) -> None:
    _console(console).print(statistics_table(stats))


def print_histogram(buckets: List[PriceRangeCount], console: Optional[Console] = None) -> None:
    _console(console).print(histogram_table(buckets))


def print_categories(breakdown: Dict[str, int], console: Optional[Console] = None) -> None:
    out = _console(console)
    if not breakdown:
        out.print("[yellow]No categories for this month.[/yellow]")
        return
    out.print(categories_table(breakdown))


def print_combined(view: CombinedView, console: Optional[Console] = None) -> None:
    out = _console(console)
    print_transactions(view.transactions, out)
    print_statistics(view.statistics, out)
    print_histogram(view.bar_chart, out)
    print_categories(view.pie_chart, out)
