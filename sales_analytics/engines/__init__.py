"""
Engines package for Sales Analytics.

Re-exports the facet engine abstractions, the four concrete engines and the
combined facade so downstream code can import from `sales_analytics.engines`.
"""

from sales_analytics.engines.abstract import AbstractFacetEngine, FacetEngine
from sales_analytics.engines.category import CategoryEngine
from sales_analytics.engines.combined import CombinedFacade, available_facets, resolve_engine
from sales_analytics.engines.histogram import PRICE_BUCKETS, HistogramEngine
from sales_analytics.engines.listing import ListingEngine
from sales_analytics.engines.statistics import StatisticsEngine

__all__ = [
    # Abstracts
    "AbstractFacetEngine",
    "FacetEngine",
    # Concrete engines
    "CategoryEngine",
    "HistogramEngine",
    "ListingEngine",
    "StatisticsEngine",
    "PRICE_BUCKETS",
    # Composition
    "CombinedFacade",
    "available_facets",
    "resolve_engine",
]
