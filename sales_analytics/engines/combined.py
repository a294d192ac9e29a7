"""
Combined facade: all four facets for one query, computed concurrently.

The four engines share the same `SaleQuery` and have no ordering dependency,
so they are started together inside an `asyncio.TaskGroup` and joined. The
first failure cancels the remaining engines and is re-raised as-is; no
partial view is ever returned.
"""

from __future__ import annotations

import asyncio
from typing import Callable, Dict, List, Optional

from sales_analytics.domain.models import CombinedView, SaleQuery
from sales_analytics.engines.abstract import AbstractFacetEngine
from sales_analytics.engines.category import CategoryEngine
from sales_analytics.engines.histogram import HistogramEngine
from sales_analytics.engines.listing import ListingEngine
from sales_analytics.engines.statistics import StatisticsEngine
from sales_analytics.errors import SalesAnalyticsError
from sales_analytics.infrastructure.store import SaleStore
from sales_analytics.utils.logging import get_logger

log = get_logger(__name__)


def _engine_factories() -> Dict[str, Callable[[SaleStore], AbstractFacetEngine]]:
    """Registry of available facet engines, keyed by facet name."""
    return {
        ListingEngine.name: ListingEngine,
        StatisticsEngine.name: StatisticsEngine,
        HistogramEngine.name: HistogramEngine,
        CategoryEngine.name: CategoryEngine,
    }


def available_facets() -> List[str]:
    """List available facet names."""
    return sorted(_engine_factories().keys())


def resolve_engine(name: str, store: SaleStore) -> AbstractFacetEngine:
    factories = _engine_factories()
    if name not in factories:
        raise ValueError(f"Unknown facet '{name}'. Available: {', '.join(factories)}")
    return factories[name](store)


class CombinedFacade:
    name: str = "combined"
    label: str = "combined data"

    def __init__(self, store: SaleStore) -> None:
        self.store = store
        self.listing = ListingEngine(store)
        self.statistics = StatisticsEngine(store)
        self.histogram = HistogramEngine(store)
        self.category = CategoryEngine(store)

    async def run(self, query: SaleQuery) -> CombinedView:
        """
        Run listing, statistics, histogram and category for `query`.

        Raises
        ------
        QueryError
            The first engine failure, same type (`InvalidMonth` included),
            tagged with the combined label.
        """
        failure: Optional[Exception] = None
        try:
            async with asyncio.TaskGroup() as group:
                transactions = group.create_task(self.listing.run(query))
                statistics = group.create_task(self.statistics.run(query))
                bar_chart = group.create_task(self.histogram.run(query))
                pie_chart = group.create_task(self.category.run(query))
        except ExceptionGroup as errors:
            failure = errors.exceptions[0]

        if failure is not None:
            if isinstance(failure, SalesAnalyticsError):
                failure.facet = self.label
            log.error(
                f"[COMBINED FAILED] {failure}",
                extra={"facet": self.name, "error_type": type(failure).__name__},
            )
            raise failure

        return CombinedView(
            transactions=transactions.result(),
            statistics=statistics.result(),
            bar_chart=bar_chart.result(),
            pie_chart=pie_chart.result(),
        )


__all__ = ["CombinedFacade", "available_facets", "resolve_engine"]
