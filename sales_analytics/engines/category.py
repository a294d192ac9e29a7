"""
Category engine: per-category record counts for a month.
"""

from __future__ import annotations

from typing import Dict

from sales_analytics.domain.filters import month_filter
from sales_analytics.domain.models import SaleQuery
from sales_analytics.engines.abstract import AbstractFacetEngine


class CategoryEngine(AbstractFacetEngine[Dict[str, int]]):
    """Mapping of category label to count; ordering carries no meaning."""

    name: str = "pieChart"
    label: str = "pie chart data"

    async def _compute(self, query: SaleQuery) -> Dict[str, int]:
        return await self.store.count_by_category(month_filter(query.month))


__all__ = ["CategoryEngine"]
