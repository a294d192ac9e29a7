"""
Abstract facet-engine interfaces for Sales Analytics.

Every facet (listing, statistics, histogram, category) implements the
`FacetEngine` protocol: an async `run(query)` against a `SaleStore`.
`AbstractFacetEngine` supplies the shared error boundary: query errors
(including `InvalidMonth`) propagate unchanged apart from being tagged with
the facet label, anything the store raises is wrapped in `QueryError` with the
original exception attached.
"""

from __future__ import annotations

import abc
from typing import Generic, Protocol, TypeVar, runtime_checkable

from sales_analytics.domain.models import SaleQuery
from sales_analytics.errors import QueryError
from sales_analytics.infrastructure.store import SaleStore
from sales_analytics.utils.logging import get_logger

log = get_logger(__name__)

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


@runtime_checkable
class FacetEngine(Protocol[T_co]):
    """
    Common interface all facet engines implement.

    Attributes
    ----------
    name : str
        Machine-friendly identifier, also the field name in the combined view.
    label : str
        Human-friendly name used in error messages.
    """

    name: str
    label: str

    async def run(self, query: SaleQuery) -> T_co:
        """Compute the facet for `query`."""
        ...


class AbstractFacetEngine(abc.ABC, Generic[T]):
    """
    ABC helper for class-based engines.

    Subclasses set `name` and `label` and implement `_compute`.
    """

    name: str
    label: str

    def __init__(self, store: SaleStore) -> None:
        self.store = store

    async def run(self, query: SaleQuery) -> T:
        log.debug(
            f"[FACET START] {self.name}",
            extra={"facet": self.name, "store": self.store.name},
        )
        try:
            return await self._compute(query)
        except QueryError as exc:
            if exc.facet is None:
                exc.facet = self.label
            log.warning(
                f"[FACET REJECTED] {self.name}: {exc.message}",
                extra={"facet": self.name, "error_type": type(exc).__name__},
            )
            raise
        except Exception as exc:  # noqa: BLE001 - store backends raise driver-specific errors
            log.exception(f"[FACET FAILED] {self.name}", extra={"facet": self.name})
            error = QueryError(f"Error fetching {self.label}", cause=exc)
            error.facet = self.label
            raise error from exc

    @abc.abstractmethod
    async def _compute(self, query: SaleQuery) -> T:  # pragma: no cover - interface only
        raise NotImplementedError


__all__ = ["AbstractFacetEngine", "FacetEngine"]
