"""
HTTP surface for Sales Analytics.

Maps GET routes under `/api` onto the engines:

    /api/transactions  /api/statistics  /api/barchart
    /api/piechart      /api/combined    /api/initialize

Engine failures render as 500 `{"message", "error"}`; a missing `month` on
`/api/barchart` is rejected with 400 before any engine runs. The store is
opened once in the application lifespan; if it cannot be opened the process
exits.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

import asyncpg
import psycopg
from fastapi import APIRouter, Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from sales_analytics.config import Settings, get_settings
from sales_analytics.domain.models import (
    CategoryCount,
    CombinedView,
    PriceRangeCount,
    SaleQuery,
    SaleRecord,
    SaleStatistics,
    category_counts,
)
from sales_analytics.engines import (
    CategoryEngine,
    CombinedFacade,
    HistogramEngine,
    ListingEngine,
    StatisticsEngine,
)
from sales_analytics.errors import SalesAnalyticsError
from sales_analytics.infrastructure.loader import reload_store
from sales_analytics.infrastructure.store import SaleStore, open_store
from sales_analytics.utils.logging import configure_logging, get_logger

log = get_logger(__name__)

router = APIRouter()


class CombinedResponse(BaseModel):
    transactions: List[SaleRecord]
    statistics: SaleStatistics
    bar_chart: List[PriceRangeCount] = Field(..., alias="barChart")
    pie_chart: List[CategoryCount] = Field(..., alias="pieChart")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_view(cls, view: CombinedView) -> CombinedResponse:
        return cls(
            transactions=view.transactions,
            statistics=view.statistics,
            bar_chart=view.bar_chart,
            pie_chart=category_counts(view.pie_chart),
        )


class ReloadResponse(BaseModel):
    message: str
    inserted: int


def get_store(request: Request) -> SaleStore:
    return request.app.state.store


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def _query(
    month: Optional[str] = Query(None, description="Calendar month, 1-12."),
    search: str = Query("", description="Matches title/description, or exact price if numeric."),
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, description="Page size."),
    settings: Settings = Depends(get_app_settings),
) -> SaleQuery:
    page_size = limit or settings.default_page_size
    return SaleQuery(month=month, search=search, page=page, limit=page_size)


@router.get("/transactions", response_model=List[SaleRecord])
async def list_transactions(
    query: SaleQuery = Depends(_query), store: SaleStore = Depends(get_store)
) -> List[SaleRecord]:
    return await ListingEngine(store).run(query)


@router.get("/statistics", response_model=SaleStatistics)
async def get_statistics(
    query: SaleQuery = Depends(_query), store: SaleStore = Depends(get_store)
) -> SaleStatistics:
    return await StatisticsEngine(store).run(query)


@router.get("/barchart", response_model=List[PriceRangeCount])
async def get_bar_chart(query: SaleQuery = Depends(_query), store: SaleStore = Depends(get_store)):
    if query.month is None or not str(query.month).strip():
        return JSONResponse(status_code=400, content={"message": "Month parameter is required"})
    log.info(f"Fetching bar chart data for month: {query.month}")
    return await HistogramEngine(store).run(query)


@router.get("/piechart", response_model=List[CategoryCount])
async def get_pie_chart(
    query: SaleQuery = Depends(_query), store: SaleStore = Depends(get_store)
) -> List[CategoryCount]:
    return category_counts(await CategoryEngine(store).run(query))


@router.get("/combined", response_model=CombinedResponse)
async def get_combined(
    query: SaleQuery = Depends(_query), store: SaleStore = Depends(get_store)
) -> CombinedResponse:
    return CombinedResponse.from_view(await CombinedFacade(store).run(query))


@router.get("/initialize", response_model=ReloadResponse)
async def initialize(
    store: SaleStore = Depends(get_store), settings: Settings = Depends(get_app_settings)
) -> ReloadResponse:
    inserted = await reload_store(store, settings=settings)
    return ReloadResponse(message="Database initialized successfully", inserted=inserted)


async def _handle_engine_error(request: Request, exc: SalesAnalyticsError) -> JSONResponse:
    return JSONResponse(status_code=500, content=exc.error_body())


def create_app(store: Optional[SaleStore] = None, settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Parameters
    ----------
    store : SaleStore | None
        Pre-opened store (tests, embedding). When None the lifespan opens the
        store selected by settings and closes it on shutdown.
    settings : Settings | None
        Overrides `get_settings()`.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        owned = app.state.store is None
        if owned:
            configure_logging(level=settings.log_level, json_logs=settings.log_json)
            try:
                app.state.store = await open_store(settings)
            except (OSError, psycopg.Error, asyncpg.PostgresError, asyncpg.InterfaceError):
                log.critical("Could not connect to the sale store", exc_info=True)
                raise SystemExit(1)
        try:
            yield
        finally:
            if owned:
                await app.state.store.close()
                app.state.store = None

    app = FastAPI(title="Sales Analytics", version="0.1.0", lifespan=lifespan)
    app.state.store = store
    app.state.settings = settings
    app.include_router(router, prefix="/api")
    app.add_exception_handler(SalesAnalyticsError, _handle_engine_error)
    return app


__all__ = ["CombinedResponse", "create_app", "router"]
