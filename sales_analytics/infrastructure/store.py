"""
Sale store adapters.

The engines only talk to the `SaleStore` protocol: predicate-based find,
count, price sum and per-category counts, plus the destructive `replace_all`
used by the bulk reload. Two backends are provided:

- `PostgresSaleStore`: asyncpg pool, predicates compiled to parameterised SQL.
- `InMemorySaleStore`: predicates evaluated in Python over a record list.

Reads carry no locks; a reload running concurrently with reads may be
observed mid-way (memory) or not at all until commit (Postgres).
"""

from __future__ import annotations

import asyncio
from collections import Counter
from datetime import timezone
from typing import Dict, Iterable, List, Optional, Protocol, Sequence, runtime_checkable

import asyncpg

from sales_analytics.config import Settings, get_settings
from sales_analytics.domain.models import SaleRecord
from sales_analytics.domain.predicates import Predicate, compile_where
from sales_analytics.infrastructure.db_factory import (
    SALES_TABLE,
    build_dsn,
    create_async_pool,
    ensure_schema,
)
from sales_analytics.utils.logging import get_logger

log = get_logger(__name__)

_COLUMNS: Sequence[str] = (
    "id",
    "title",
    "description",
    "price",
    "category",
    "image",
    "sold",
    "date_of_sale",
)


@runtime_checkable
class SaleStore(Protocol):
    """
    Read/replace interface the engines depend on.

    Attributes
    ----------
    name : str
        Short backend identifier used in logs.
    """

    name: str

    async def find(self, predicate: Predicate, skip: int, limit: int) -> List[SaleRecord]:
        """Return up to `limit` matching records after skipping `skip`, in store order."""
        ...

    async def count(self, predicate: Predicate) -> int:
        ...

    async def sum_price(self, predicate: Predicate) -> float:
        """Sum of `price` over matching records; 0.0 when nothing matches."""
        ...

    async def count_by_category(self, predicate: Predicate) -> Dict[str, int]:
        ...

    async def replace_all(self, records: Sequence[SaleRecord]) -> int:
        """Delete every record, insert `records`, return the inserted count."""
        ...

    async def close(self) -> None:
        ...


class InMemorySaleStore:
    """Keeps records in insertion order and filters them with `Predicate.matches`."""

    name: str = "memory"

    def __init__(self, records: Iterable[SaleRecord] = ()) -> None:
        self._records: List[SaleRecord] = list(records)

    def _matching(self, predicate: Predicate) -> List[SaleRecord]:
        return [record for record in self._records if predicate.matches(record)]

    async def find(self, predicate: Predicate, skip: int, limit: int) -> List[SaleRecord]:
        return self._matching(predicate)[skip : skip + limit]

    async def count(self, predicate: Predicate) -> int:
        return len(self._matching(predicate))

    async def sum_price(self, predicate: Predicate) -> float:
        return float(sum(record.price for record in self._matching(predicate)))

    async def count_by_category(self, predicate: Predicate) -> Dict[str, int]:
        return dict(Counter(record.category for record in self._matching(predicate)))

    async def replace_all(self, records: Sequence[SaleRecord]) -> int:
        self._records = list(records)
        return len(self._records)

    async def close(self) -> None:
        return None


def _as_row(record: SaleRecord) -> tuple:
    moment = record.date_of_sale
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return (
        record.id,
        record.title,
        record.description,
        record.price,
        record.category,
        record.image,
        record.sold,
        moment,
    )


class PostgresSaleStore:
    """
    asyncpg-backed store over the `sales` table.

    No ORDER BY is applied to listings; page order is whatever Postgres
    returns for the scan.
    """

    name: str = "postgres"

    def __init__(self, pool: asyncpg.Pool) -> None:
        self._pool = pool

    @classmethod
    async def connect(
        cls,
        dsn: Optional[str] = None,
        min_size: Optional[int] = None,
        max_size: Optional[int] = None,
    ) -> PostgresSaleStore:
        pool = await create_async_pool(dsn, min_size=min_size, max_size=max_size)
        return cls(pool)

    async def find(self, predicate: Predicate, skip: int, limit: int) -> List[SaleRecord]:
        where, params = compile_where(predicate)
        offset_at, limit_at = len(params) + 1, len(params) + 2
        sql = (
            f"SELECT {', '.join(_COLUMNS)} FROM public.{SALES_TABLE} "
            f"WHERE {where} OFFSET ${offset_at} LIMIT ${limit_at}"
        )
        rows = await self._pool.fetch(sql, *params, skip, limit)
        return [SaleRecord.model_validate(dict(row)) for row in rows]

    async def count(self, predicate: Predicate) -> int:
        where, params = compile_where(predicate)
        sql = f"SELECT COUNT(*) FROM public.{SALES_TABLE} WHERE {where}"
        return int(await self._pool.fetchval(sql, *params))

    async def sum_price(self, predicate: Predicate) -> float:
        where, params = compile_where(predicate)
        sql = f"SELECT COALESCE(SUM(price), 0) FROM public.{SALES_TABLE} WHERE {where}"
        return float(await self._pool.fetchval(sql, *params))

    async def count_by_category(self, predicate: Predicate) -> Dict[str, int]:
        where, params = compile_where(predicate)
        sql = (
            f"SELECT category, COUNT(*) AS count FROM public.{SALES_TABLE} "
            f"WHERE {where} GROUP BY category"
        )
        rows = await self._pool.fetch(sql, *params)
        return {row["category"]: int(row["count"]) for row in rows}

    async def replace_all(self, records: Sequence[SaleRecord]) -> int:
        async with self._pool.acquire() as conn:
            async with conn.transaction():
                await conn.execute(f"TRUNCATE TABLE public.{SALES_TABLE} RESTART IDENTITY")
                await conn.copy_records_to_table(
                    SALES_TABLE,
                    records=[_as_row(record) for record in records],
                    columns=list(_COLUMNS),
                    schema_name="public",
                )
        return len(records)

    async def close(self) -> None:
        await self._pool.close()


async def open_store(settings: Optional[Settings] = None) -> SaleStore:
    """
    Open the store selected by `STORE_BACKEND`.

    For Postgres, the schema is created (sync psycopg, off the event loop)
    before the asyncpg pool is opened.
    """
    settings = settings or get_settings()
    if settings.store_backend == "memory":
        log.info("Using in-memory sale store", extra={"store": "memory"})
        return InMemorySaleStore()

    dsn = build_dsn(settings)
    await asyncio.to_thread(ensure_schema, dsn)
    store = await PostgresSaleStore.connect(
        dsn, min_size=settings.db_pool_min_size, max_size=settings.db_pool_max_size
    )
    log.info(
        "Connected to Postgres sale store",
        extra={"store": "postgres", "host": settings.db_host, "db": settings.db_name},
    )
    return store


__all__ = ["InMemorySaleStore", "PostgresSaleStore", "SaleStore", "open_store"]
