"""
Infrastructure package for Sales Analytics.

Centralizes store connectivity (asyncpg pool, psycopg schema setup), the
store adapters, and the bulk reload. Keep this layer focused on I/O and
resource management, decoupled from engine logic.
"""

from sales_analytics.infrastructure.db_factory import (
    build_dsn,
    create_async_pool,
    ensure_schema,
    get_sync_connection,
)
from sales_analytics.infrastructure.loader import fetch_sale_document, reload_store
from sales_analytics.infrastructure.store import (
    InMemorySaleStore,
    PostgresSaleStore,
    SaleStore,
    open_store,
)

__all__ = [
    "InMemorySaleStore",
    "PostgresSaleStore",
    "SaleStore",
    "build_dsn",
    "create_async_pool",
    "ensure_schema",
    "fetch_sale_document",
    "get_sync_connection",
    "open_store",
    "reload_store",
]
