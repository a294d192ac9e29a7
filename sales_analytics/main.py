from __future__ import annotations

import asyncio
import json
import sys
from typing import Any, Optional

import typer
import uvicorn
from fastapi.encoders import jsonable_encoder

from sales_analytics import reporter
from sales_analytics.api import CombinedResponse
from sales_analytics.config import get_settings
from sales_analytics.domain.models import SaleQuery, category_counts
from sales_analytics.engines import CombinedFacade, resolve_engine
from sales_analytics.errors import SalesAnalyticsError
from sales_analytics.infrastructure.db_factory import ensure_schema
from sales_analytics.infrastructure.loader import reload_store
from sales_analytics.infrastructure.store import open_store
from sales_analytics.utils.logging import configure_logging

app = typer.Typer(help="Sales Analytics CLI.")

_PRINTERS = {
    "transactions": reporter.print_transactions,
    "statistics": reporter.print_statistics,
    "barChart": reporter.print_histogram,
    "pieChart": reporter.print_categories,
    "combined": reporter.print_combined,
}

MonthOption = typer.Option(None, "--month", "-m", help="Calendar month, 1-12.")
JsonOption = typer.Option(False, "--json", help="Emit JSON instead of tables.")


async def _compute(facet: str, query: SaleQuery) -> Any:
    store = await open_store()
    try:
        if facet == CombinedFacade.name:
            return await CombinedFacade(store).run(query)
        return await resolve_engine(facet, store).run(query)
    finally:
        await store.close()


def _wire(facet: str, result: Any) -> Any:
    """Shape a facet result the way the HTTP API returns it."""
    if facet == "pieChart":
        return category_counts(result)
    if facet == CombinedFacade.name:
        return CombinedResponse.from_view(result)
    return result


def _run_facet(facet: str, query: SaleQuery, as_json: bool) -> None:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    try:
        result = asyncio.run(_compute(facet, query))
    except SalesAnalyticsError as exc:
        body = exc.error_body()
        typer.echo(f"{body['message']}: {body['error']}", err=True)
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(json.dumps(jsonable_encoder(_wire(facet, result), by_alias=True), indent=2))
    else:
        _PRINTERS[facet](result)


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"env={settings.app_env} store={settings.store_backend} "
        f"DB={settings.db_user}@{settings.db_host}:{settings.db_port}/{settings.db_name} | "
        f"api={settings.api_host}:{settings.api_port} page_size={settings.default_page_size}"
    )


@app.command("init-db")
def init_db() -> None:
    """
    Create the sales table if it does not exist.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    ensure_schema()
    typer.echo("Schema ready.")


@app.command()
def reload(
    source: Optional[str] = typer.Option(
        None,
        "--source",
        "-s",
        help="URL or file path of the JSON document (default from settings).",
    ),
) -> None:
    """
    Replace the store contents with the records from the source document.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)

    async def _reload() -> int:
        store = await open_store(settings)
        try:
            return await reload_store(store, source, settings=settings)
        finally:
            await store.close()

    try:
        inserted = asyncio.run(_reload())
    except SalesAnalyticsError as exc:
        typer.echo(f"{exc.message}: {exc.detail()}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Database initialized successfully ({inserted:,} records).")


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (default from settings)."),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port (default from settings)."),
) -> None:
    """
    Serve the HTTP API.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    uvicorn.run(
        "sales_analytics.api:create_app",
        factory=True,
        host=host or settings.api_host,
        port=port or settings.api_port,
        log_level=settings.log_level.lower(),
        log_config=None,
    )


@app.command()
def transactions(
    month: Optional[str] = MonthOption,
    search: str = typer.Option("", "--search", "-q", help="Text or exact price to match."),
    page: int = typer.Option(1, "--page", min=1),
    limit: Optional[int] = typer.Option(None, "--limit", "-l", min=1, help="Page size."),
    as_json: bool = JsonOption,
) -> None:
    """
    List one page of transactions for a month.
    """
    page_size = limit or get_settings().default_page_size
    query = SaleQuery(month=month, search=search, page=page, limit=page_size)
    _run_facet("transactions", query, as_json)


@app.command()
def statistics(month: Optional[str] = MonthOption, as_json: bool = JsonOption) -> None:
    """
    Show sold/unsold counts and total sale amount for a month.
    """
    _run_facet("statistics", SaleQuery(month=month), as_json)


@app.command()
def barchart(month: Optional[str] = MonthOption, as_json: bool = JsonOption) -> None:
    """
    Show the price-range histogram for a month.
    """
    _run_facet("barChart", SaleQuery(month=month), as_json)


@app.command()
def piechart(month: Optional[str] = MonthOption, as_json: bool = JsonOption) -> None:
    """
    Show the per-category breakdown for a month.
    """
    _run_facet("pieChart", SaleQuery(month=month), as_json)


@app.command()
def combined(
    month: Optional[str] = MonthOption,
    search: str = typer.Option("", "--search", "-q"),
    page: int = typer.Option(1, "--page", min=1),
    limit: Optional[int] = typer.Option(None, "--limit", "-l", min=1),
    as_json: bool = JsonOption,
) -> None:
    """
    Show every facet for one query.
    """
    page_size = limit or get_settings().default_page_size
    query = SaleQuery(month=month, search=search, page=page, limit=page_size)
    _run_facet("combined", query, as_json)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
