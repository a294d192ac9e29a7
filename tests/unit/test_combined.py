from __future__ import annotations

import asyncio
from typing import Dict, List

import pytest

from sales_analytics.domain.models import SaleQuery, SaleRecord
from sales_analytics.domain.predicates import Predicate
from sales_analytics.engines import (
    CategoryEngine,
    CombinedFacade,
    HistogramEngine,
    ListingEngine,
    StatisticsEngine,
)
from sales_analytics.errors import InvalidMonth, QueryError
from sales_analytics.infrastructure.store import InMemorySaleStore

GUARD_SECONDS = 2.0
STORE_DELAY_SECONDS = 0.05


class _SlowStore(InMemorySaleStore):
    """Records how many store calls are in flight at once."""

    name = "slow"

    def __init__(self, records) -> None:
        super().__init__(records)
        self.in_flight = 0
        self.max_in_flight = 0

    async def _pause(self) -> None:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(STORE_DELAY_SECONDS)
        finally:
            self.in_flight -= 1

    async def find(self, predicate: Predicate, skip: int, limit: int) -> List[SaleRecord]:
        await self._pause()
        return await super().find(predicate, skip, limit)

    async def count(self, predicate: Predicate) -> int:
        await self._pause()
        return await super().count(predicate)

    async def sum_price(self, predicate: Predicate) -> float:
        await self._pause()
        return await super().sum_price(predicate)

    async def count_by_category(self, predicate: Predicate) -> Dict[str, int]:
        await self._pause()
        return await super().count_by_category(predicate)


class _BrokenCategoryStore(InMemorySaleStore):
    """Category counts fail fast; every other call hangs until cancelled."""

    name = "broken"

    def __init__(self) -> None:
        super().__init__()
        self.cancelled = 0

    async def _hang(self) -> None:
        try:
            await asyncio.sleep(3600)
        except asyncio.CancelledError:
            self.cancelled += 1
            raise

    async def find(self, predicate: Predicate, skip: int, limit: int) -> List[SaleRecord]:
        await self._hang()
        return []

    async def count(self, predicate: Predicate) -> int:
        await self._hang()
        return 0

    async def sum_price(self, predicate: Predicate) -> float:
        await self._hang()
        return 0.0

    async def count_by_category(self, predicate: Predicate) -> Dict[str, int]:
        await asyncio.sleep(0)
        raise ConnectionError("server closed the connection")


@pytest.mark.asyncio
async def test_combined_equals_independent_engines(memory_store: InMemorySaleStore) -> None:
    query = SaleQuery(month="3", search="lamp", page=1, limit=3)

    view = await CombinedFacade(memory_store).run(query)

    assert view.transactions == await ListingEngine(memory_store).run(query)
    assert view.statistics == await StatisticsEngine(memory_store).run(query)
    assert view.bar_chart == await HistogramEngine(memory_store).run(query)
    assert view.pie_chart == await CategoryEngine(memory_store).run(query)


@pytest.mark.asyncio
async def test_combined_wire_keys(memory_store: InMemorySaleStore) -> None:
    view = await CombinedFacade(memory_store).run(SaleQuery(month=3))

    payload = view.model_dump(mode="json", by_alias=True)

    assert set(payload) == {"transactions", "statistics", "barChart", "pieChart"}
    assert set(payload["statistics"]) == {"totalSaleAmount", "soldItems", "notSoldItems"}
    assert payload["pieChart"] == {"men's clothing": 1, "electronics": 1, "jewelery": 2}
    assert "dateOfSale" in payload["transactions"][0]


@pytest.mark.asyncio
async def test_combined_runs_engines_concurrently(sample_records) -> None:
    store = _SlowStore(sample_records)

    await asyncio.wait_for(CombinedFacade(store).run(SaleQuery(month=3)), GUARD_SECONDS)

    # listing, the first statistics count, the first bucket and categories overlap
    assert store.max_in_flight >= 4
    assert store.in_flight == 0


@pytest.mark.asyncio
async def test_combined_fails_fast_and_cancels_siblings() -> None:
    store = _BrokenCategoryStore()

    with pytest.raises(QueryError) as excinfo:
        await asyncio.wait_for(CombinedFacade(store).run(SaleQuery(month=3)), GUARD_SECONDS)

    assert excinfo.value.message == "Error fetching pie chart data"
    assert isinstance(excinfo.value.cause, ConnectionError)
    assert store.cancelled == 3
    assert excinfo.value.error_body() == {
        "message": "Error fetching combined data",
        "error": "Error fetching pie chart data: server closed the connection",
    }


@pytest.mark.asyncio
@pytest.mark.parametrize("month", [None, "13", "abc"])
async def test_combined_reraises_invalid_month_unchanged(
    memory_store: InMemorySaleStore, month
) -> None:
    with pytest.raises(InvalidMonth) as excinfo:
        await CombinedFacade(memory_store).run(SaleQuery(month=month))

    assert not isinstance(excinfo.value, ExceptionGroup)
    assert excinfo.value.detail() == "Invalid month provided. Month must be between 1 and 12."
    assert excinfo.value.facet == "combined data"
