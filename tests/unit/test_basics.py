import json
from pathlib import Path

import pytest
from rich.console import Console
from typer.testing import CliRunner

from sales_analytics import config, reporter
from sales_analytics.domain.models import PriceRangeCount, SaleRecord, SaleStatistics
from sales_analytics.main import app
from scripts import generate_sales

runner = CliRunner()


def test_get_settings_defaults(monkeypatch: pytest.MonkeyPatch, fresh_settings: None):
    for name in ("DB_NAME", "STORE_BACKEND", "DEFAULT_PAGE_SIZE", "SEED_SOURCE_URL"):
        monkeypatch.delenv(name, raising=False)
    settings = config.get_settings()
    assert settings.db_host
    assert settings.db_port > 0
    assert settings.store_backend in ("postgres", "memory")
    assert settings.default_page_size == 10
    assert settings.seed_source_url == config.DEFAULT_SEED_SOURCE
    assert settings.seed_timeout_seconds > 0


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch, fresh_settings: None):
    monkeypatch.setenv("STORE_BACKEND", "memory")
    monkeypatch.setenv("DEFAULT_PAGE_SIZE", "25")
    settings = config.get_settings()
    assert settings.store_backend == "memory"
    assert settings.default_page_size == 25
    assert config.get_settings() is settings


def test_cli_info(monkeypatch: pytest.MonkeyPatch, fresh_settings: None):
    monkeypatch.setenv("STORE_BACKEND", "memory")
    monkeypatch.setenv("APP_ENV", "staging")
    result = runner.invoke(app, ["info"])
    assert result.exit_code == 0
    assert "store=memory" in result.stdout
    assert "env=staging" in result.stdout


def test_cli_statistics_json(monkeypatch: pytest.MonkeyPatch, fresh_settings: None):
    monkeypatch.setenv("STORE_BACKEND", "memory")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    result = runner.invoke(app, ["statistics", "--month", "3", "--json"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == {"totalSaleAmount": 0.0, "soldItems": 0, "notSoldItems": 0}


def test_cli_reload_then_query_uses_fresh_store(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, fresh_settings: None
):
    monkeypatch.setenv("STORE_BACKEND", "memory")
    source = tmp_path / "sales.json"
    generate_sales._write_document(source, rows=5, seed=7)

    result = runner.invoke(app, ["reload", "--source", str(source)])

    assert result.exit_code == 0, result.output
    assert "5 records" in result.stdout


def test_cli_missing_month_exits_with_error(monkeypatch: pytest.MonkeyPatch, fresh_settings: None):
    monkeypatch.setenv("STORE_BACKEND", "memory")
    result = runner.invoke(app, ["piechart"])
    assert result.exit_code == 1
    assert "Error fetching pie chart data" in result.output


def test_generate_sales_is_deterministic_and_valid(tmp_path: Path):
    path = tmp_path / "sales.json"
    generate_sales._write_document(path, rows=20, seed=123)
    document = json.loads(path.read_text(encoding="utf-8"))

    assert len(document) == 20
    assert document == generate_sales._generate_sales(20, 123)
    assert document != generate_sales._generate_sales(20, 124)
    records = [SaleRecord.model_validate(item) for item in document]
    assert {record.category for record in records} <= set(generate_sales.CATEGORIES)
    assert all(record.date_of_sale.tzinfo is not None for record in records)


def test_reporter_renders_tables(sample_records):
    console = Console(record=True, width=120)

    reporter.print_transactions(sample_records[:2], console)
    reporter.print_statistics(
        SaleStatistics(total_sale_amount=159.95, sold_items=2, not_sold_items=2), console
    )
    reporter.print_histogram(
        [PriceRangeCount(range="0-100", count=1), PriceRangeCount(range="101-200", count=2)], console
    )
    text = console.export_text()
    assert "Classic Backpack" in text
    assert "159.95" in text
    assert "101-200" in text

    categories = Console(record=True, width=120)
    reporter.print_categories({"electronics": 1, "jewelery": 2}, categories)
    text = categories.export_text()
    assert text.index("jewelery") < text.index("electronics")


def test_reporter_empty_results():
    console = Console(record=True, width=120)
    reporter.print_transactions([], console)
    reporter.print_categories({}, console)
    text = console.export_text()
    assert "No transactions" in text
    assert "No categories" in text
