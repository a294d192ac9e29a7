"""
Database connection factory utilities for Sales Analytics.

Provides the DSN, the `sales` table DDL, a retried synchronous psycopg
connection used for schema setup, and a retried asyncpg pool used by the
query engines. Retries (tenacity) only cover establishing connections at
startup; queries themselves are never retried.
"""

from __future__ import annotations

from typing import Optional

import asyncpg
import psycopg
from psycopg import Connection
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from sales_analytics.config import Settings, get_settings
from sales_analytics.utils.logging import get_logger

log = get_logger(__name__)

SALES_TABLE = "sales"

SCHEMA_SQL = f"""
CREATE TABLE IF NOT EXISTS public.{SALES_TABLE} (
    row_id        BIGSERIAL PRIMARY KEY,
    id            BIGINT,
    title         TEXT NOT NULL,
    description   TEXT NOT NULL DEFAULT '',
    price         DOUBLE PRECISION NOT NULL CHECK (price >= 0),
    category      TEXT NOT NULL,
    image         TEXT,
    sold          BOOLEAN NOT NULL,
    date_of_sale  TIMESTAMPTZ NOT NULL
);
"""


def build_dsn(settings: Optional[Settings] = None) -> str:
    """Compose a DSN string from settings."""
    settings = settings or get_settings()
    return (
        f"postgresql://{settings.db_user}:{settings.db_password}"
        f"@{settings.db_host}:{settings.db_port}/{settings.db_name}"
    )


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type((psycopg.OperationalError, psycopg.InterfaceError)),
    reraise=True,
)
def get_sync_connection(dsn: Optional[str] = None) -> Connection:
    """
    Acquire a dedicated synchronous connection with automatic retry.

    Retries up to 3 times with exponential backoff for transient connection errors.

    Raises
    ------
    psycopg.OperationalError
        If connection fails after all retry attempts.
    """
    return psycopg.connect(dsn or build_dsn())


def ensure_schema(dsn: Optional[str] = None) -> None:
    """Create the `sales` table when it does not exist yet."""
    with get_sync_connection(dsn) as conn:
        with conn.cursor() as cur:
            cur.execute(SCHEMA_SQL)
        conn.commit()
    log.info("Schema ready", extra={"table": SALES_TABLE})


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type(
        (OSError, ConnectionError, asyncpg.exceptions.CannotConnectNowError)
    ),
    reraise=True,
)
async def create_async_pool(
    dsn: Optional[str] = None,
    min_size: Optional[int] = None,
    max_size: Optional[int] = None,
) -> asyncpg.Pool:
    """
    Create the asyncpg pool backing the query engines, with automatic retry.

    Parameters
    ----------
    dsn : str | None
        Connection string; defaults to the one built from settings.
    min_size : int | None
        Minimum number of idle connections to keep.
    max_size : int | None
        Maximum total connections in the pool.
    """
    settings = get_settings()
    return await asyncpg.create_pool(
        dsn or build_dsn(),
        min_size=min_size or settings.db_pool_min_size,
        max_size=max_size or settings.db_pool_max_size,
    )


__all__ = [
    "SALES_TABLE",
    "SCHEMA_SQL",
    "build_dsn",
    "create_async_pool",
    "ensure_schema",
    "get_sync_connection",
]
