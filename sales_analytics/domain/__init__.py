"""
Domain package for Sales Analytics.

Exports the sale record models, the predicate types and the filter builders
used across the engines and the store adapters. Keep this package focused on
data definitions and query semantics; no I/O.
"""

from sales_analytics.domain.filters import month_filter, parse_month, search_predicate
from sales_analytics.domain.models import (
    CategoryCount,
    CombinedView,
    PriceRangeCount,
    SaleQuery,
    SaleRecord,
    SaleStatistics,
)
from sales_analytics.domain.predicates import Predicate, compile_where

__all__ = [
    "CategoryCount",
    "CombinedView",
    "Predicate",
    "PriceRangeCount",
    "SaleQuery",
    "SaleRecord",
    "SaleStatistics",
    "compile_where",
    "month_filter",
    "parse_month",
    "search_predicate",
]
