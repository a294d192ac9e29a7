"""
Error types raised by the query engines and the bulk reload operation.

`InvalidMonth` derives from `QueryError` so a bad month surfaces as a query
failure at every engine boundary while still propagating unchanged.
"""

from __future__ import annotations

from typing import Dict, Optional


class SalesAnalyticsError(Exception):
    """Base class for failures surfaced to callers as `{message, error}`."""

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause
        # label of the facet whose request failed; set at the engine boundary
        self.facet: Optional[str] = None

    def detail(self) -> str:
        """Human-readable description of the underlying cause."""
        if self.cause is None:
            return self.message
        return str(self.cause) or type(self.cause).__name__

    def error_body(self) -> Dict[str, str]:
        """
        The `{message, error}` pair reported to callers.

        Once a facet label is attached, `message` names that facet. A failure
        re-reported under another facet (the combined view) keeps its own
        message as a prefix of `error`.
        """
        error = self.detail()
        if self.facet is None:
            return {"message": self.message, "error": error}
        message = f"Error fetching {self.facet}"
        if self.message not in (message, error):
            error = f"{self.message}: {error}"
        return {"message": message, "error": error}


class QueryError(SalesAnalyticsError):
    """Store-level failure while finding, counting or aggregating sale records."""


class InvalidMonth(QueryError):
    """Month absent, not an integer, or outside 1..12."""

    def __init__(self, value: object = None) -> None:
        super().__init__("Invalid month provided. Month must be between 1 and 12.")
        self.value = value

    def detail(self) -> str:
        return self.message


class BulkLoadError(SalesAnalyticsError):
    """Fetching the source document or replacing the store contents failed."""


__all__ = ["BulkLoadError", "InvalidMonth", "QueryError", "SalesAnalyticsError"]
