"""
Sales Analytics - query and aggregation engine over product-sale records.

Facets computed for a calendar month (any year) and an optional search:

- Transactions: one page of matching records
- Statistics: sold / unsold counts and total sale amount
- Bar chart: counts over ten fixed price ranges
- Pie chart: counts per category
- Combined: all four, computed concurrently

Records live in a `SaleStore` (Postgres via asyncpg, or in memory) and are
replaced wholesale by the bulk reload.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from sales_analytics.config import Settings, get_settings
from sales_analytics.domain import (
    SaleQuery,
    SaleRecord,
    SaleStatistics,
    month_filter,
    search_predicate,
)
from sales_analytics.engines import (
    CategoryEngine,
    CombinedFacade,
    HistogramEngine,
    ListingEngine,
    StatisticsEngine,
)
from sales_analytics.errors import BulkLoadError, InvalidMonth, QueryError
from sales_analytics.infrastructure import InMemorySaleStore, PostgresSaleStore, reload_store
from sales_analytics.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "SaleQuery",
    "SaleRecord",
    "SaleStatistics",
    "month_filter",
    "search_predicate",
    # Engines
    "CategoryEngine",
    "CombinedFacade",
    "HistogramEngine",
    "ListingEngine",
    "StatisticsEngine",
    # Errors
    "BulkLoadError",
    "InvalidMonth",
    "QueryError",
    # Stores
    "InMemorySaleStore",
    "PostgresSaleStore",
    "reload_store",
    # Logging
    "configure_logging",
    "get_logger",
]
