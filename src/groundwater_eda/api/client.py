"""
Base API client for the Supabase/PostgREST REST endpoint.

Handles HTTP requests, session management, and error handling.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import requests  # type: ignore
from requests.adapters import HTTPAdapter  # type: ignore
from urllib3.util.retry import Retry  # type: ignore

Params = Union[Dict[str, Any], Sequence[Tuple[str, Any]]]


class APIClient:
    """Base client for a PostgREST-compatible tabular backend."""

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
        Initialize API client.

        Args:
            base_url: Project URL (the REST root is <base_url>/rest/v1)
            anon_key: Public API key sent as apikey and bearer token
            schema: Database schema exposed by the endpoint
            timeout: Request timeout in seconds
            max_retries: Retry attempts on transient HTTP errors (0 fails fast)
            verify_ssl: Whether to verify SSL certificates
            logger: Logger instance
        """
        base_url = base_url.rstrip("/")
        if not base_url.endswith("/rest/v1"):
            base_url = f"{base_url}/rest/v1"
        self.base_url = base_url
        self.anon_key = anon_key
        self.schema = schema
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)
        self.verify_ssl = verify_ssl

        if not verify_ssl:
            import urllib3
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

        # Setup session; retries are opt-in, the default fails fast
        self.session = requests.Session()
        retry_strategy: Union[int, Retry] = 0
        if max_retries > 0:
            retry_strategy = Retry(
                total=max_retries,
                backoff_factor=1,
                status_forcelist=[429, 500, 502, 503, 504],
                allowed_methods=["GET"]
            )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

        self._update_headers()

    def _update_headers(self) -> None:
        """Set authentication and content headers on the session."""
        self.session.headers.update({
            "apikey": self.anon_key,
            "Authorization": f"Bearer {self.anon_key}",
            "Accept": "application/json",
            "Accept-Profile": self.schema,
        })

    def _make_request(
        self,
        method: str,
        endpoint: str,
        **kwargs
    ) -> requests.Response:
        """
        Make HTTP request to API.

        Args:
            method: HTTP method
            endpoint: API endpoint (without base URL)
            **kwargs: Additional arguments for requests

        Returns:
            Response object

        Raises:
            requests.exceptions.RequestException: On request failure
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        kwargs.setdefault("verify", self.verify_ssl)

        self.logger.debug(f"{method} {url} {kwargs.get('params')}")

        try:
            response = self.session.request(
                method=method,
                url=url,
                timeout=self.timeout,
                **kwargs
            )
            response.raise_for_status()
            return response

        except requests.exceptions.RequestException as e:
            self.logger.error(f"API request failed: {method} {url} - {e}")
            raise

    def get(self, endpoint: str, params: Optional[Params] = None) -> Any:
        """
        Make GET request.

        Args:
            endpoint: API endpoint
            params: Query parameters (a list of pairs allows repeated keys)

        Returns:
            Decoded JSON response
        """
        response = self._make_request("GET", endpoint, params=params)
        return response.json()

    def get_rows(self, table: str, params: Optional[Params] = None) -> List[Dict[str, Any]]:
        """
        Fetch rows of a table or view.

        Args:
            table: Table or view name
            params: PostgREST query parameters

        Returns:
            List of row dictionaries
        """
        result = self.get(table, params=params)
        if isinstance(result, list):
            return result
        self.logger.warning(f"Unexpected response for {table}: {type(result)}")
        return []

    def close(self) -> None:
        """Close the session."""
        self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
