"""
Pytest configuration for Sales Analytics.

Provides fixtures for:
- Sale record samples (the worked March example and a wider mixed set)
- In-memory stores seeded with those samples
- Settings and database access for Postgres integration tests
"""

from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone
from typing import Any, Iterator, List

import psycopg
import pytest

from sales_analytics.config import Settings, get_settings
from sales_analytics.domain.models import SaleRecord
from sales_analytics.infrastructure.store import InMemorySaleStore

UTC = timezone.utc


def make_record(**overrides: Any) -> SaleRecord:
    fields: dict[str, Any] = {
        "title": "Item",
        "description": "",
        "price": 10.0,
        "category": "misc",
        "sold": True,
        "date_of_sale": datetime(2021, 1, 1, tzinfo=UTC),
    }
    fields.update(overrides)
    return SaleRecord(**fields)


@pytest.fixture
def march_example() -> List[SaleRecord]:
    """Three records: two in March (different years allowed), one in April."""
    return [
        make_record(price=50, sold=True, category="A", date_of_sale=datetime(2022, 3, 1, tzinfo=UTC)),
        make_record(price=150, sold=False, category="B", date_of_sale=datetime(2022, 3, 5, tzinfo=UTC)),
        make_record(price=999, sold=True, category="A", date_of_sale=datetime(2022, 4, 1, tzinfo=UTC)),
    ]


@pytest.fixture
def sample_records() -> List[SaleRecord]:
    """
    Mixed records across months, years and timezones.

    March (UTC): ids 1, 2, 3, 6. April: ids 4, 5 (id 5 is 31 March local time
    but 1 April in UTC). December: id 7.
    """
    return [
        make_record(
            id=1,
            title="Classic Backpack",
            description="Fits 15 inch laptops",
            price=109.95,
            category="men's clothing",
            sold=True,
            date_of_sale=datetime(2021, 3, 27, 20, 29, 54, tzinfo=timezone(timedelta(hours=5, minutes=30))),
        ),
        make_record(
            id=2,
            title="Desk Lamp",
            description="LED lamp with dimmer",
            price=150,
            category="electronics",
            sold=False,
            date_of_sale=datetime(2022, 3, 5, 10, 0, tzinfo=UTC),
        ),
        make_record(
            id=3,
            title="Gold Ring",
            description="Solid gold band",
            price=50,
            category="jewelery",
            sold=True,
            date_of_sale=datetime(2021, 3, 1, 8, 0, tzinfo=UTC),
        ),
        make_record(
            id=4,
            title="Monitor",
            description="27 inch display",
            price=999,
            category="electronics",
            sold=True,
            date_of_sale=datetime(2022, 4, 1, 12, 0, tzinfo=UTC),
        ),
        make_record(
            id=5,
            title="Rain Jacket",
            description="Waterproof and lightweight",
            price=100.5,
            category="women's clothing",
            sold=True,
            date_of_sale=datetime(2021, 3, 31, 23, 30, tzinfo=timezone(timedelta(hours=-2))),
        ),
        make_record(
            id=6,
            title="Bracelet",
            description="Silver LAMP-shaped charm",
            price=901,
            category="jewelery",
            sold=False,
            date_of_sale=datetime(2020, 3, 15, 18, 0, tzinfo=UTC),
        ),
        make_record(
            id=7,
            title="T-Shirt",
            description="Free promo shirt",
            price=0,
            category="men's clothing",
            sold=True,
            date_of_sale=datetime(2021, 12, 24, 9, 0, tzinfo=UTC),
        ),
    ]


@pytest.fixture
def memory_store(sample_records: List[SaleRecord]) -> InMemorySaleStore:
    return InMemorySaleStore(sample_records)


@pytest.fixture
def example_store(march_example: List[SaleRecord]) -> InMemorySaleStore:
    return InMemorySaleStore(march_example)


@pytest.fixture
def fresh_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """
    Clear the cached settings before and after a test that changes env vars.
    """
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "postgres"),
        db_name=os.getenv("DB_NAME", "sales_analytics"),
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    """
    Database connection string for tests.
    """
    return (
        f"postgresql://{test_settings.db_user}:{test_settings.db_password}"
        f"@{test_settings.db_host}:{test_settings.db_port}/{test_settings.db_name}"
    )


@pytest.fixture(scope="session")
def db_connection_available(test_dsn: str) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    try:
        with psycopg.connect(test_dsn, connect_timeout=5) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
        return True
    except psycopg.Error:
        return False
