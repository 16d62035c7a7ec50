"""Base fetcher interface, error taxonomy and shared HTTP client management.

Gas price sources inherit from BaseFetcher. A shared httpx.AsyncClient is
used across all fetchers so that both chains reuse the same connection pool.

Every failure a source can produce during a refresh cycle is a subclass of
FetcherError, so the refresher can treat them uniformly:

.. code-block:: text

    FetcherError
    ├── FetcherConfigError        source is not configured (e.g. no URL)
    ├── OracleNetworkError        transport failure or timeout
    │   └── FetcherHTTPError      non-2xx response
    ├── OracleParseError          malformed oracle payload
    ├── OracleDataMissingError    oracle did not answer for the speed type
    └── ChainQueryError           bridge contract call failed
"""

import logging
from typing import ClassVar

import httpx

logger = logging.getLogger(__name__)


class FetcherError(Exception):
    """Base exception for fetcher errors."""

    pass


class FetcherConfigError(FetcherError):
    """Raised when fetcher configuration is invalid (e.g., missing oracle URL)."""

    pass


class OracleNetworkError(FetcherError):
    """Raised when the oracle cannot be reached."""

    pass


class FetcherHTTPError(OracleNetworkError):
    """Raised when the oracle answers with a non-2xx status.

    :ivar status_code: HTTP status code from the failed request.
    """

    def __init__(self, status_code: int, message: str):
        """Initialize the HTTP error.

        :param status_code: HTTP status code.
        :param message: Error message from response.
        """
        self.status_code = status_code
        super().__init__(f"HTTP {status_code}: {message}")


class OracleParseError(FetcherError):
    """Raised when the oracle response body cannot be interpreted."""

    pass


class OracleDataMissingError(FetcherError):
    """Raised when the oracle response lacks the configured speed type.

    :ivar speed_type: The speed type that was requested.
    """

    def __init__(self, speed_type: str | None):
        self.speed_type = speed_type
        super().__init__(
            f"Response from Oracle didn't include gas price for {speed_type} type."
        )


class ChainQueryError(FetcherError):
    """Raised when the on-chain gas price query fails."""

    pass


class BaseFetcher:
    """Base class for gas price fetchers.

    :cvar DEFAULT_TIMEOUT: Default HTTP request timeout in seconds.
    :ivar timeout: Request timeout in seconds.
    """

    # Class-level shared HTTP client
    _shared_client: ClassVar[httpx.AsyncClient | None] = None

    # Default timeout for HTTP requests (seconds)
    DEFAULT_TIMEOUT = 10.0

    def __init__(self, timeout: float | None = None):
        """Initialize the fetcher.

        :param timeout: Request timeout in seconds (default: 10).
        """
        self.timeout = timeout or self.DEFAULT_TIMEOUT

    @classmethod
    def get_shared_client(cls) -> httpx.AsyncClient:
        """Get or create the shared HTTP client.

        The client is shared across all fetcher instances to reuse connections.

        :returns: Shared httpx.AsyncClient instance.
        """
        if BaseFetcher._shared_client is None or BaseFetcher._shared_client.is_closed:
            BaseFetcher._shared_client = httpx.AsyncClient(
                timeout=httpx.Timeout(30.0, connect=10.0),
                limits=httpx.Limits(max_connections=10, max_keepalive_connections=4),
                follow_redirects=True,
            )
        return BaseFetcher._shared_client

    @classmethod
    async def close_shared_client(cls) -> None:
        """Close the shared HTTP client."""
        client = BaseFetcher._shared_client
        if client is not None and not client.is_closed:
            await client.aclose()
        BaseFetcher._shared_client = None

    async def _get(self, url: str) -> httpx.Response:
        """Make an HTTP GET request using the shared client.

        :param url: Request URL.
        :returns: httpx.Response object.
        :raises FetcherHTTPError: On non-2xx response.
        :raises OracleNetworkError: On network/timeout errors.
        """
        client = self.get_shared_client()
        try:
            response = await client.get(url, timeout=self.timeout)
        except httpx.TimeoutException as e:
            raise OracleNetworkError(f"Request timeout: {e}") from e
        except httpx.RequestError as e:
            raise OracleNetworkError(f"Request failed: {e}") from e

        if not response.is_success:
            logger.debug(
                "HTTP GET %s failed with status %s: %s",
                url,
                response.status_code,
                response.text[:200],
            )
            raise FetcherHTTPError(response.status_code, response.text[:200])
        return response
