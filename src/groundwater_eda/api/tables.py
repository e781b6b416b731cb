"""
Table operations for the PostgREST endpoint.

Builds table queries and reads the schema overview view.
"""

import logging
from typing import Any, Dict, List

from ..core import constants
from .query import TableQuery


class TablesAPI:
    """Mixin for table-related API operations."""

    # Type hints for attributes provided by APIClient base class
    logger: logging.Logger

    def table(self, name: str, columns: str = "*") -> TableQuery:
        """
        Start a query against a table or view.

        Args:
            name: Table or view name
            columns: Column projection

        Returns:
            TableQuery bound to this client
        """
        return TableQuery(self, name, columns)  # type: ignore[arg-type]

    def get_table_columns(self) -> List[Dict[str, Any]]:
        """
        List the columns of every exposed table.

        Reads the ``table_columns`` view (table_name, column_name, data_type),
        ordered by table then column.

        Returns:
            List of column description rows
        """
        self.logger.info("Fetching table column overview")
        query = (
            self.table(constants.TABLE_COLUMNS_VIEW)
            .order("table_name")
            .order("column_name")
        )
        return query.execute()
