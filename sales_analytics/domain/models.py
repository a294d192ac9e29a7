"""
Domain models for Sales Analytics.

Defines the sale record schema aligned with the `sales` table and the shapes
returned by each facet. Field names are snake_case in Python and camelCase on
the wire (`dateOfSale`, `totalSaleAmount`, ...).
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

_WIRE_CONFIG = ConfigDict(frozen=True, populate_by_name=True, arbitrary_types_allowed=False)


class SaleRecord(BaseModel):
    """
    Representation of a single product transaction in the `sales` table.
    """

    id: Optional[int] = Field(None, description="Identifier from the source document.")
    title: str = Field(..., description="Product title.")
    description: str = Field("", description="Free-text product description.")
    price: float = Field(..., ge=0, description="Sale price, non-negative.")
    category: str = Field(..., description="Categorical label for the product.")
    image: Optional[str] = Field(None, description="Product image URL.")
    sold: bool = Field(..., description="Whether the item was sold.")
    date_of_sale: datetime = Field(..., alias="dateOfSale", description="Sale timestamp.")

    model_config = _WIRE_CONFIG

    @property
    def sale_month(self) -> int:
        """Calendar month of the sale; aware timestamps are read in UTC."""
        moment = self.date_of_sale
        if moment.tzinfo is not None:
            moment = moment.astimezone(timezone.utc)
        return moment.month


class SaleQuery(BaseModel):
    """
    Shared query parameters for every facet.

    `month` is kept raw (text or int) and interpreted by the month filter
    builder so every engine applies the same parsing and error.
    """

    month: Optional[Union[int, str]] = None
    search: str = ""
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1)

    model_config = ConfigDict(frozen=True)

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


class SaleStatistics(BaseModel):
    total_sale_amount: float = Field(0.0, alias="totalSaleAmount")
    sold_items: int = Field(0, alias="soldItems")
    not_sold_items: int = Field(0, alias="notSoldItems")

    model_config = _WIRE_CONFIG


class PriceRangeCount(BaseModel):
    range: str
    count: int

    model_config = _WIRE_CONFIG


class CategoryCount(BaseModel):
    category: str
    count: int

    model_config = _WIRE_CONFIG


def category_counts(breakdown: Dict[str, int]) -> List[CategoryCount]:
    """Turn a category -> count mapping into the wire sequence."""
    return [CategoryCount(category=label, count=count) for label, count in breakdown.items()]


class CombinedView(BaseModel):
    """All four facets computed for one query."""

    transactions: List[SaleRecord]
    statistics: SaleStatistics
    bar_chart: List[PriceRangeCount] = Field(..., alias="barChart")
    pie_chart: Dict[str, int] = Field(..., alias="pieChart")

    model_config = _WIRE_CONFIG


__all__ = [
    "CategoryCount",
    "CombinedView",
    "PriceRangeCount",
    "SaleQuery",
    "SaleRecord",
    "SaleStatistics",
    "category_counts",
]
