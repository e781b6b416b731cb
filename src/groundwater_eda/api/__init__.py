"""
API layer for the Supabase/PostgREST backend.

Provides the HTTP client and fluent table queries.
"""

import logging
from typing import Optional

from .client import APIClient
from .query import TableQuery
from .tables import TablesAPI


class RestAPI(APIClient, TablesAPI):
    """
    Unified API client for the tabular backend.

    Combines session handling with table queries.
    """

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        schema: str = "public",
        timeout: int = 30,
        max_retries: int = 0,
        verify_ssl: bool = True,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize unified API client.

        Args:
            base_url: Project URL
            anon_key: Public API key
            schema: Database schema exposed by the endpoint
            timeout: Request timeout in seconds
            max_retries: Maximum number of retry attempts
            verify_ssl: Whether to verify SSL certificates
            logger: Logger instance
        """
        super().__init__(
            base_url=base_url,
            anon_key=anon_key,
            schema=schema,
            timeout=timeout,
            max_retries=max_retries,
            verify_ssl=verify_ssl,
            logger=logger
        )


__all__ = [
    "APIClient",
    "TablesAPI",
    "TableQuery",
    "RestAPI",
]
