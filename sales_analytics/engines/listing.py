"""
Listing engine: one page of sale records for a month and a search string.
"""

from __future__ import annotations

from typing import List

from sales_analytics.domain.filters import month_filter, search_predicate
from sales_analytics.domain.models import SaleQuery, SaleRecord
from sales_analytics.engines.abstract import AbstractFacetEngine


class ListingEngine(AbstractFacetEngine[List[SaleRecord]]):
    """
    Records matching (month AND search), skipping `(page - 1) * limit`.

    Order is the store's native order; no sort key is applied.
    """

    name: str = "transactions"
    label: str = "transactions"

    async def _compute(self, query: SaleQuery) -> List[SaleRecord]:
        predicate = month_filter(query.month) & search_predicate(query.search)
        return await self.store.find(predicate, skip=query.skip, limit=query.limit)


__all__ = ["ListingEngine"]
