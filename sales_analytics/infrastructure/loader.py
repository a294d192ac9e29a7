"""
Bulk reload of the sale store from an external JSON document.

The source is either an http(s) URL (fetched with httpx) or a local file
path. The document must be a JSON array of sale records using the wire field
names (`dateOfSale`, ...). Reloading is destructive: the store's contents are
replaced as a whole.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, List, Optional

import asyncpg
import httpx
from pydantic import TypeAdapter

from sales_analytics.config import Settings, get_settings
from sales_analytics.domain.models import SaleRecord
from sales_analytics.errors import BulkLoadError
from sales_analytics.infrastructure.store import SaleStore
from sales_analytics.utils.logging import get_logger

log = get_logger(__name__)

_RECORDS = TypeAdapter(List[SaleRecord])

# Failures that turn a reload into a BulkLoadError.
_LOAD_ERRORS = (
    httpx.HTTPError,
    OSError,
    ValueError,
    asyncpg.PostgresError,
    asyncpg.InterfaceError,
)


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


async def _read_payload(
    source: str, timeout: float, transport: Optional[httpx.AsyncBaseTransport]
) -> Any:
    if not _is_url(source):
        text = await asyncio.to_thread(Path(source).read_text, encoding="utf-8")
        return json.loads(text)

    async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
        response = await client.get(source, follow_redirects=True)
        response.raise_for_status()
        return response.json()


async def fetch_sale_document(
    source: str,
    timeout: float = 30.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> List[SaleRecord]:
    """
    Download or read the source document and validate it into sale records.

    Parameters
    ----------
    source : str
        http(s) URL or local file path.
    timeout : float
        HTTP timeout in seconds.
    transport : httpx.AsyncBaseTransport | None
        Optional transport override (e.g. `httpx.MockTransport` in tests).
    """
    payload = await _read_payload(source, timeout, transport)
    return _RECORDS.validate_python(payload)


async def reload_store(
    store: SaleStore,
    source: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    settings: Optional[Settings] = None,
) -> int:
    """
    Replace the store's contents with the records found at `source`.

    `source` defaults to `settings.seed_source_url`; `settings` defaults to
    `get_settings()`.

    Returns the number of records inserted.

    Raises
    ------
    BulkLoadError
        If fetching, validating, or replacing fails.
    """
    settings = settings or get_settings()
    source = source or settings.seed_source_url
    log.info("[RELOAD START]", extra={"source": source, "store": store.name})
    try:
        records = await fetch_sale_document(
            source, timeout=settings.seed_timeout_seconds, transport=transport
        )
        inserted = await store.replace_all(records)
    except _LOAD_ERRORS as exc:
        log.exception("[RELOAD FAILED]", extra={"source": source, "store": store.name})
        raise BulkLoadError("Error initializing database", cause=exc) from exc

    log.info("[RELOAD SUCCESS]", extra={"source": source, "rows": inserted})
    return inserted


__all__ = ["fetch_sale_document", "reload_store"]
