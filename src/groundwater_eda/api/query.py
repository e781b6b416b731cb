"""
Fluent table query for PostgREST endpoints.

Mirrors the subset of the PostgREST query grammar the pipeline needs:
column projection, equality and not-null filters, ordering and
offset/limit pagination.
"""

import copy
from typing import Any, Dict, List, Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from .client import APIClient


def _clean_columns(columns: str) -> str:
    """Drop whitespace outside double-quoted identifiers."""
    cleaned = []
    quoted = False
    for char in columns:
        if char == '"':
            quoted = not quoted
        if char.isspace() and not quoted:
            continue
        cleaned.append(char)
    return "".join(cleaned)


class TableQuery:
    """Immutable query against one table; every builder call returns a copy."""

    def __init__(self, client: "APIClient", table: str, columns: str = "*"):
        self.client = client
        self.table = table
        self.columns = columns
        self._filters: List[Tuple[str, str]] = []
        self._order: List[str] = []
        self._offset: Optional[int] = None
        self._limit: Optional[int] = None

    def _copy(self) -> "TableQuery":
        query = copy.copy(self)
        query._filters = list(self._filters)
        query._order = list(self._order)
        return query

    def select(self, columns: str) -> "TableQuery":
        query = self._copy()
        query.columns = columns
        return query

    def eq(self, column: str, value: Any) -> "TableQuery":
        query = self._copy()
        query._filters.append((column, f"eq.{value}"))
        return query

    def not_null(self, column: str) -> "TableQuery":
        query = self._copy()
        query._filters.append((column, "not.is.null"))
        return query

    def order(self, column: str, ascending: bool = True) -> "TableQuery":
        query = self._copy()
        query._order.append(f"{column}.{'asc' if ascending else 'desc'}")
        return query

    def range(self, start: int, end: int) -> "TableQuery":
        """
        Restrict the query to rows start..end, both inclusive.

        Raises:
            ValueError: If the range is empty or negative
        """
        if start < 0 or end < start:
            raise ValueError(f"Invalid row range {start}-{end}")
        query = self._copy()
        query._offset = start
        query._limit = end - start + 1
        return query

    def to_params(self) -> List[Tuple[str, str]]:
        """Render the query as PostgREST query-string pairs."""
        params: List[Tuple[str, str]] = [("select", _clean_columns(self.columns))]
        params.extend(self._filters)
        if self._order:
            params.append(("order", ",".join(self._order)))
        if self._offset is not None:
            params.append(("offset", str(self._offset)))
        if self._limit is not None:
            params.append(("limit", str(self._limit)))
        return params

    def execute(self) -> List[Dict[str, Any]]:
        """
        Run the query.

        Raises:
            requests.exceptions.RequestException: On transport or HTTP failure
        """
        return self.client.get_rows(self.table, params=self.to_params())

    def __repr__(self) -> str:
        return f"TableQuery(table={self.table}, params={self.to_params()})"
