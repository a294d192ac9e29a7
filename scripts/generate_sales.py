"""
Synthetic sale-document generator for Sales Analytics.

Writes a deterministic pseudo-random JSON array in the same shape as the
public product_transaction.json document, so the bulk reload can run
offline: `sales-analytics reload --source sales.json`.
"""

from __future__ import annotations

import asyncio
import json
import random
import sys
import time
from datetime import UTC, datetime, timedelta
from pathlib import Path

import typer

from sales_analytics.infrastructure.loader import reload_store
from sales_analytics.infrastructure.store import open_store

app = typer.Typer(help="Generate a synthetic sale document (JSON) and optionally load it.")

CATEGORIES = ["men's clothing", "women's clothing", "jewelery", "electronics"]
PRODUCTS = ["Backpack", "Jacket", "T-Shirt", "Bracelet", "Ring", "Hard Drive", "Monitor", "Lamp"]
ADJECTIVES = ["Classic", "Slim Fit", "Premium", "Casual", "Rechargeable", "Portable"]


def _generate_sales(rows: int, seed: int) -> list[dict]:
    rng = random.Random(seed)
    start = datetime(2021, 1, 1, tzinfo=UTC)
    sales: list[dict] = []
    for i in range(1, rows + 1):
        product = rng.choice(PRODUCTS)
        title = f"{rng.choice(ADJECTIVES)} {product}"
        sale_date = start + timedelta(days=rng.randint(0, 3 * 365), seconds=rng.randint(0, 86_399))
        sales.append(
            {
                "id": i,
                "title": title,
                "price": round(rng.uniform(5, 1_200), 2),
                "description": f"{title} for everyday use.",
                "category": rng.choice(CATEGORIES),
                "image": f"https://example.com/img/{i}.jpg",
                "sold": rng.choice([True, False]),
                "dateOfSale": sale_date.isoformat(),
            }
        )
    return sales


def _write_document(path: Path, rows: int, seed: int) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(_generate_sales(rows, seed), f, indent=2)


async def _load(path: Path) -> int:
    store = await open_store()
    try:
        return await reload_store(store, str(path))
    finally:
        await store.close()


@app.command()
def main(
    rows: int = typer.Option(
        60,
        "--rows",
        "-r",
        help="Number of sale records to generate.",
    ),
    seed: int = typer.Option(
        42,
        "--seed",
        help="Deterministic RNG seed.",
    ),
    output: Path = typer.Option(
        Path("sales.json"),
        "--output",
        "-o",
        help="JSON output path.",
    ),
    load: bool = typer.Option(
        False,
        "--load",
        help="Reload the configured store from the generated document.",
    ),
) -> None:
    """
    Generate a synthetic sale document and optionally load it into the store.
    """
    start = time.perf_counter()
    typer.echo(f"Generating {rows:,} sale records -> {output} (seed={seed})")
    _write_document(output, rows=rows, seed=seed)
    typer.echo(f"Generation completed in {time.perf_counter() - start:.2f}s")

    if not load:
        return

    inserted = asyncio.run(_load(output))
    typer.echo(f"Loaded {inserted:,} records into the store.")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
