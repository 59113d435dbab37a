"""Base HTTP client with retry logic, timeouts, and error handling.

All external API clients should build on this class to get consistent
behavior for retries, timeouts, and error handling.
"""

import logging
import threading
from typing import Any, Self

import httpx
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

logger = logging.getLogger(__name__)

# Transport failures worth another attempt; HTTP status errors are never retried
RETRYABLE_EXCEPTIONS = (httpx.TimeoutException, httpx.ConnectError)


class HTTPClientError(Exception):
    """Base exception for HTTP client errors."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class HTTPClient:
    """Base HTTP client with retry logic, timeouts, and error handling.

    Retries happen only on timeouts and connection failures. The wait before
    retry ``n`` is ``retry_interval * backoff_factor ** (n - 1)`` plus up to
    ``retry_interval * interval_randomness`` of random jitter.

    Example usage:
        client = HTTPClient(base_url="https://api.coingecko.com", timeout=10.0)
        data = client.get_json("/api/v3/ping")
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = 30.0,
        max_retries: int = 3,
        headers: dict[str, str] | None = None,
        retry_interval: float = 0.1,
        backoff_factor: float = 2.0,
        interval_randomness: float = 0.5,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self.max_retries = max_retries
        self.default_headers = headers or {}
        self.retry_interval = retry_interval
        self.backoff_factor = backoff_factor
        self.interval_randomness = interval_randomness
        self._transport = transport
        self._client: httpx.Client | None = None
        self._client_lock = threading.Lock()

    @property
    def client(self) -> httpx.Client:
        """Lazy initialization of HTTP client."""
        if self._client is None:
            with self._client_lock:
                if self._client is None:
                    self._client = httpx.Client(
                        base_url=self.base_url or "",
                        timeout=self.timeout,
                        headers=self.default_headers,
                        transport=self._transport,
                    )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        with self._client_lock:
            if self._client is not None:
                self._client.close()
                self._client = None

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _retrying(self) -> Retrying:
        """Build the retry policy for a single request."""
        return Retrying(
            stop=stop_after_attempt(self.max_retries + 1),
            wait=wait_exponential(multiplier=self.retry_interval, exp_base=self.backoff_factor)
            + wait_random(0, self.retry_interval * self.interval_randomness),
            retry=retry_if_exception_type(RETRYABLE_EXCEPTIONS),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

    def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        return self.client.request(method=method, url=url, **kwargs)

    def _request(
        self,
        method: str,
        url: str,
        params: dict | None = None,
        json: dict | None = None,
        data: dict | None = None,
        headers: dict | None = None,
    ) -> httpx.Response:
        """Make HTTP request with retry logic.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            url: URL path (will be joined with base_url if set)
            params: Query parameters
            json: JSON body (for POST/PUT)
            data: Form data (for POST/PUT)
            headers: Additional headers to merge with defaults

        Returns:
            httpx.Response object

        Raises:
            HTTPClientError: On HTTP errors, timeouts, or connection failures
        """
        merged_headers = {**self.default_headers, **(headers or {})}

        try:
            response = self._retrying()(
                self._send,
                method,
                url,
                params=params,
                json=json,
                data=data,
                headers=merged_headers,
            )
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as e:
            logger.warning(
                f"HTTP {e.response.status_code} for {method} {url}: {e.response.text[:200]}"
            )
            raise HTTPClientError(
                message=f"HTTP {e.response.status_code}: {e.response.reason_phrase}",
                status_code=e.response.status_code,
                response_body=e.response.text,
            ) from e
        except httpx.TimeoutException as e:
            logger.warning(f"Timeout for {method} {url}")
            raise HTTPClientError(f"Request timed out: {url}") from e
        except httpx.ConnectError as e:
            logger.warning(f"Connection error for {method} {url}: {e}")
            raise HTTPClientError(f"Connection failed: {url}") from e

    def get(
        self,
        url: str,
        params: dict | None = None,
        headers: dict | None = None,
    ) -> httpx.Response:
        """HTTP GET request."""
        return self._request("GET", url, params=params, headers=headers)

    def post(
        self,
        url: str,
        json: dict | None = None,
        data: dict | None = None,
        headers: dict | None = None,
    ) -> httpx.Response:
        """HTTP POST request."""
        return self._request("POST", url, json=json, data=data, headers=headers)

    def get_json(self, url: str, params: dict | None = None) -> Any:
        """HTTP GET returning parsed JSON."""
        response = self.get(url, params=params)
        return response.json()

    def post_json(self, url: str, json: dict | None = None) -> Any:
        """HTTP POST returning parsed JSON."""
        response = self.post(url, json=json)
        return response.json()
