"""
Histogram engine: record counts over ten fixed price buckets for a month.

Buckets are labelled `0-100`, `101-200`, ..., `801-900`, `901-above`. On real
prices each bucket after the first starts just above the previous upper bound
(e.g. `101-200` is `100 < price <= 200`), so every non-negative price lands in
exactly one bucket.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from sales_analytics.domain.filters import month_filter
from sales_analytics.domain.models import PriceRangeCount, SaleQuery
from sales_analytics.domain.predicates import PriceRange
from sales_analytics.engines.abstract import AbstractFacetEngine

BUCKET_WIDTH = 100
BUCKET_COUNT = 10


@dataclass(frozen=True)
class PriceBucket:
    low: int
    high: Optional[int]

    @property
    def label(self) -> str:
        return f"{self.low}-{'above' if self.high is None else self.high}"

    def predicate(self) -> PriceRange:
        if self.low == 0:
            return PriceRange(0, self.high)
        return PriceRange(self.low - 1, self.high, include_low=False)


def _make_buckets() -> Tuple[PriceBucket, ...]:
    buckets: List[PriceBucket] = []
    for index in range(BUCKET_COUNT):
        low = 0 if index == 0 else index * BUCKET_WIDTH + 1
        high = (index + 1) * BUCKET_WIDTH if index < BUCKET_COUNT - 1 else None
        buckets.append(PriceBucket(low=low, high=high))
    return tuple(buckets)


PRICE_BUCKETS: Tuple[PriceBucket, ...] = _make_buckets()


class HistogramEngine(AbstractFacetEngine[List[PriceRangeCount]]):
    name: str = "barChart"
    label: str = "bar chart data"

    async def _compute(self, query: SaleQuery) -> List[PriceRangeCount]:
        in_month = month_filter(query.month)
        counts: List[PriceRangeCount] = []
        for bucket in PRICE_BUCKETS:
            count = await self.store.count(in_month & bucket.predicate())
            counts.append(PriceRangeCount(range=bucket.label, count=count))
        return counts


__all__ = ["BUCKET_COUNT", "HistogramEngine", "PRICE_BUCKETS", "PriceBucket"]
