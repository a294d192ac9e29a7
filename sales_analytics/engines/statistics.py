"""
Statistics engine: sold / unsold counts and revenue for a month.
"""

from __future__ import annotations

from sales_analytics.domain.filters import month_filter
from sales_analytics.domain.models import SaleQuery, SaleStatistics
from sales_analytics.domain.predicates import Equals
from sales_analytics.engines.abstract import AbstractFacetEngine


class StatisticsEngine(AbstractFacetEngine[SaleStatistics]):
    name: str = "statistics"
    label: str = "statistics"

    async def _compute(self, query: SaleQuery) -> SaleStatistics:
        in_month = month_filter(query.month)
        sold = in_month & Equals("sold", True)
        not_sold = in_month & Equals("sold", False)

        sold_items = await self.store.count(sold)
        not_sold_items = await self.store.count(not_sold)
        # sum_price returns 0.0 rather than None when nothing was sold
        total_sale_amount = await self.store.sum_price(sold)

        return SaleStatistics(
            total_sale_amount=total_sale_amount,
            sold_items=sold_items,
            not_sold_items=not_sold_items,
        )


__all__ = ["StatisticsEngine"]
