"""
Paginated fetching of unbounded result sets.

Pages are requested strictly one after another; page n+1 is only requested
once page n has returned. A page shorter than the page size, or an empty
page, ends the scan. A source holding an exact multiple of the page size
therefore costs one extra request that returns zero rows.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from ..core import constants
from .cancellation import CancellationToken

logger = logging.getLogger(__name__)


def fetch_all(
    query_builder: Callable[[], Any],
    page_size: int = constants.DEFAULT_PAGE_SIZE,
    cancel_token: Optional[CancellationToken] = None
) -> List[Dict[str, Any]]:
    """
    Retrieve every row of a query, one bounded page at a time.

    Args:
        query_builder: Returns a fresh query supporting ``range(start, end)``
                       (inclusive) and ``execute()``
        page_size: Rows requested per page
        cancel_token: Checked after each page

    Returns:
        All rows in source order

    Raises:
        ValueError: If page_size is not positive
        LoadCancelled: If the token was cancelled between pages
        requests.exceptions.RequestException: If any page request fails
    """
    if page_size < 1:
        raise ValueError(f"page_size must be positive, got {page_size}")

    result: List[Dict[str, Any]] = []
    page = 0
    while True:
        start = page * page_size
        rows = query_builder().range(start, start + page_size - 1).execute() or []
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()

        if not rows:
            break
        result.extend(rows)
        if len(rows) < page_size:
            break
        page += 1

    logger.debug(f"Fetched {len(result)} rows in {page + 1} pages")
    return result
