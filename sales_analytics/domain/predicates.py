"""
Composable predicates over sale records.

A predicate is evaluated two ways: directly against a `SaleRecord` (used by
the in-memory store) and compiled to a parameterised SQL boolean expression
with asyncpg-style `$n` placeholders (used by the Postgres store). Compose
with `&` / `|` or `all_of(...)` / `any_of(...)`.

Example:
    params: list = []
    where = (MonthIs(3) & Equals("sold", True)).to_sql(params)
    # where == "(EXTRACT(MONTH FROM date_of_sale AT TIME ZONE 'UTC')::int = $1 AND sold = $2)"
    # params == [3, True]
"""

from __future__ import annotations

import abc
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from sales_analytics.domain.models import SaleRecord

# Record attribute -> column in the `sales` table.
COLUMNS = {
    "id": "id",
    "title": "title",
    "description": "description",
    "price": "price",
    "category": "category",
    "image": "image",
    "sold": "sold",
    "date_of_sale": "date_of_sale",
}


def _column(field: str) -> str:
    try:
        return COLUMNS[field]
    except KeyError:
        raise ValueError(f"Unknown sale record field '{field}'") from None


def _bind(params: List[Any], value: Any) -> str:
    params.append(value)
    return f"${len(params)}"


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class Predicate(abc.ABC):
    """Boolean test over a sale record."""

    @abc.abstractmethod
    def matches(self, record: SaleRecord) -> bool:  # pragma: no cover - interface only
        raise NotImplementedError

    @abc.abstractmethod
    def to_sql(self, params: List[Any]) -> str:  # pragma: no cover - interface only
        """Render as SQL, appending bound values to `params`."""
        raise NotImplementedError

    def __and__(self, other: Predicate) -> Predicate:
        return all_of(self, other)

    def __or__(self, other: Predicate) -> Predicate:
        return any_of(self, other)


@dataclass(frozen=True)
class MonthIs(Predicate):
    """Calendar month of `date_of_sale`, any year."""

    month: int

    def matches(self, record: SaleRecord) -> bool:
        return record.sale_month == self.month

    def to_sql(self, params: List[Any]) -> str:
        placeholder = _bind(params, self.month)
        return f"EXTRACT(MONTH FROM date_of_sale AT TIME ZONE 'UTC')::int = {placeholder}"


@dataclass(frozen=True)
class Contains(Predicate):
    """Case-insensitive literal substring match on a text field."""

    field: str
    text: str

    def __post_init__(self) -> None:
        _column(self.field)

    def matches(self, record: SaleRecord) -> bool:
        value = getattr(record, self.field) or ""
        return self.text.lower() in str(value).lower()

    def to_sql(self, params: List[Any]) -> str:
        pattern = f"%{_escape_like(self.text)}%"
        return f"{_column(self.field)} ILIKE {_bind(params, pattern)}"


@dataclass(frozen=True)
class Equals(Predicate):
    field: str
    value: Any

    def __post_init__(self) -> None:
        _column(self.field)

    def matches(self, record: SaleRecord) -> bool:
        return getattr(record, self.field) == self.value

    def to_sql(self, params: List[Any]) -> str:
        return f"{_column(self.field)} = {_bind(params, self.value)}"


@dataclass(frozen=True)
class FieldPresent(Predicate):
    """True whenever the field holds a value; does not restrict rows."""

    field: str

    def __post_init__(self) -> None:
        _column(self.field)

    def matches(self, record: SaleRecord) -> bool:
        return getattr(record, self.field) is not None

    def to_sql(self, params: List[Any]) -> str:
        return f"{_column(self.field)} IS NOT NULL"


@dataclass(frozen=True)
class PriceRange(Predicate):
    """`low <= price <= high`; `include_low=False` makes the low bound strict, `high=None` opens the top."""

    low: float
    high: Optional[float] = None
    include_low: bool = True

    def matches(self, record: SaleRecord) -> bool:
        above = record.price >= self.low if self.include_low else record.price > self.low
        return above and (self.high is None or record.price <= self.high)

    def to_sql(self, params: List[Any]) -> str:
        op = ">=" if self.include_low else ">"
        clause = f"price {op} {_bind(params, float(self.low))}"
        if self.high is not None:
            clause = f"{clause} AND price <= {_bind(params, float(self.high))}"
        return clause


@dataclass(frozen=True)
class AllOf(Predicate):
    clauses: Tuple[Predicate, ...]

    def matches(self, record: SaleRecord) -> bool:
        return all(clause.matches(record) for clause in self.clauses)

    def to_sql(self, params: List[Any]) -> str:
        if not self.clauses:
            return "TRUE"
        return "(" + " AND ".join(clause.to_sql(params) for clause in self.clauses) + ")"


@dataclass(frozen=True)
class AnyOf(Predicate):
    clauses: Tuple[Predicate, ...]

    def matches(self, record: SaleRecord) -> bool:
        return any(clause.matches(record) for clause in self.clauses)

    def to_sql(self, params: List[Any]) -> str:
        if not self.clauses:
            return "FALSE"
        return "(" + " OR ".join(clause.to_sql(params) for clause in self.clauses) + ")"


def all_of(*predicates: Predicate) -> AllOf:
    """AND the predicates together, flattening nested conjunctions."""
    flat: List[Predicate] = []
    for predicate in predicates:
        flat.extend(predicate.clauses if isinstance(predicate, AllOf) else (predicate,))
    return AllOf(tuple(flat))


def any_of(*predicates: Predicate) -> AnyOf:
    """OR the predicates together, flattening nested disjunctions."""
    flat: List[Predicate] = []
    for predicate in predicates:
        flat.extend(predicate.clauses if isinstance(predicate, AnyOf) else (predicate,))
    return AnyOf(tuple(flat))


def compile_where(predicate: Predicate) -> Tuple[str, List[Any]]:
    """Compile a predicate into a WHERE expression and its bound parameters."""
    params: List[Any] = []
    return predicate.to_sql(params), params


__all__ = [
    "AllOf",
    "AnyOf",
    "COLUMNS",
    "Contains",
    "Equals",
    "FieldPresent",
    "MonthIs",
    "Predicate",
    "PriceRange",
    "all_of",
    "any_of",
    "compile_where",
]
