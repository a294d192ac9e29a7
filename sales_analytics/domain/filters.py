"""
Filter builders shared by every facet: the month filter and the search filter.
"""

from __future__ import annotations

import math
import re
from typing import Any

from sales_analytics.domain.predicates import (
    AnyOf,
    Contains,
    Equals,
    FieldPresent,
    MonthIs,
    Predicate,
    any_of,
)
from sales_analytics.errors import InvalidMonth

_INTEGER = re.compile(r"[+-]?[0-9]+")
# leading decimal number, rest of the text ignored ("150 watt" -> 150)
_LEADING_NUMBER = re.compile(
    r"\s*([+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)"
)


def parse_month(value: Any) -> int:
    """
    Parse a month given as int or text into 1..12.

    Raises
    ------
    InvalidMonth
        If the value is absent, empty, not an integer, or out of range.
    """
    if value is None or isinstance(value, bool):
        raise InvalidMonth(value)
    if isinstance(value, int):
        month = value
    else:
        text = str(value).strip()
        if not _INTEGER.fullmatch(text):
            raise InvalidMonth(value)
        month = int(text)
    if not 1 <= month <= 12:
        raise InvalidMonth(value)
    return month


def month_filter(value: Any) -> Predicate:
    """Predicate selecting records sold in the given calendar month of any year."""
    return MonthIs(parse_month(value))


def _parse_price(search: str) -> float | None:
    match = _LEADING_NUMBER.match(search)
    if match is None:
        return None
    number = float(match.group(1))
    return number if math.isfinite(number) else None


def price_clause(search: str) -> Predicate:
    """
    Exact price match when `search` starts with a finite decimal number,
    otherwise a clause that matches every record.
    """
    number = _parse_price(search)
    if number is None:
        return FieldPresent("price")
    return Equals("price", number)


def search_predicate(search: str = "") -> AnyOf:
    """OR of title contains, description contains, and the price clause."""
    return any_of(
        Contains("title", search),
        Contains("description", search),
        price_clause(search),
    )


__all__ = ["month_filter", "parse_month", "price_clause", "search_predicate"]
