"""Explicit success/failure results for data-store reads.

Selectors that talk to the database return a `QueryResult` instead of
falling back to an empty value on error, so callers decide whether a
failure is surfaced or ignored.
"""

from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from django.db import DatabaseError

T = TypeVar("T")


@dataclass(frozen=True)
class QueryResult(Generic[T]):
    ok: bool
    value: Optional[T] = None
    error: Optional[str] = None
    missing: bool = False

    @classmethod
    def success(cls, value: T) -> "QueryResult[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: str, *, missing: bool = False) -> "QueryResult[T]":
        return cls(ok=False, error=error, missing=missing)

    def unwrap(self) -> T:
        """Return the value or raise `LookupError` carrying the error text."""

        if not self.ok:
            raise LookupError(self.error or "Query failed")
        return self.value  # type: ignore[return-value]


def run_query(fn: Callable[[], Any], *, not_found: str = "Not found.", logger=None) -> QueryResult:
    """Evaluate a query callable and wrap its outcome.

    - ObjectDoesNotExist (any model's DoesNotExist) becomes a `missing` failure with `not_found`.
    - DatabaseError becomes a failure with a generic message; it is logged when a logger is given.
    """

    from django.core.exceptions import ObjectDoesNotExist

    try:
        return QueryResult.success(fn())
    except ObjectDoesNotExist:
        return QueryResult.failure(not_found, missing=True)
    except DatabaseError as exc:
        if logger is not None:
            logger.warning("store.query_failed", extra={"event": "store.query_failed", "error": str(exc)})
        return QueryResult.failure("Data store unavailable.")
