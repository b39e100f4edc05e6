"""
Base HTTP client for the upstream weather sources.

Open-Meteo (forecast, air quality) and NWS (active alerts) share the same
request path: one pooled httpx client per source, a concurrency bound,
retry with exponential backoff for transient failures, and HTTP status
classification into the APIError hierarchy.
"""
import asyncio
import logging
import random
from abc import ABC
from typing import Any, Dict, Optional

import httpx

from weather_alerts.core.api_errors import (
    APIError,
    FatalError,
    RateLimitError,
    RetryableError,
    classify_http_error,
)

logger = logging.getLogger(__name__)


class BaseAPIClient(ABC):
    """
    Base class for the weather source clients.

    Subclasses set SOURCE_NAME and BASE_URL, expose fetch_* methods built on
    get(), and may override _build_headers() and _error_detail() for
    source-specific headers and error bodies.
    """

    # Override in subclass
    SOURCE_NAME: str = "unknown"
    BASE_URL: str = ""

    DEFAULT_MAX_CONCURRENCY: int = 4
    DEFAULT_TIMEOUT: float = 20.0
    DEFAULT_CONNECT_TIMEOUT: float = 10.0
    DEFAULT_MAX_RETRIES: int = 2
    DEFAULT_BACKOFF_FACTOR: float = 2.0
    DEFAULT_MAX_BACKOFF: float = 30.0
    DEFAULT_JITTER_FACTOR: float = 0.25

    def __init__(
        self,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        max_retries: int = DEFAULT_MAX_RETRIES,
        backoff_factor: float = DEFAULT_BACKOFF_FACTOR,
        timeout: float = DEFAULT_TIMEOUT,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
    ):
        """
        Args:
            max_concurrency: In-flight requests allowed against this source
            max_retries: Total attempts per request (1 disables retry)
            backoff_factor: Exponential backoff multiplier
            timeout: Read/write timeout per attempt, in seconds
            connect_timeout: Connect timeout, capped at `timeout`
        """
        self.max_concurrency = max_concurrency
        self.max_retries = max(1, max_retries)
        self.backoff_factor = backoff_factor
        self.timeout = timeout
        self.connect_timeout = min(connect_timeout, timeout)

        self.semaphore = asyncio.Semaphore(max_concurrency)
        self._client: Optional[httpx.AsyncClient] = None

        logger.info(
            f"Initialized {self.SOURCE_NAME} client: "
            f"max_concurrency={max_concurrency}, "
            f"max_retries={self.max_retries}, timeout={timeout}s"
        )

    async def _get_client(self) -> httpx.AsyncClient:
        """Create the pooled client on first use."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout, connect=self.connect_timeout),
                follow_redirects=True,
                limits=httpx.Limits(
                    max_connections=self.max_concurrency * 2,
                    max_keepalive_connections=self.max_concurrency,
                ),
            )
        return self._client

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.debug(f"{self.SOURCE_NAME} client closed")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def _backoff_delay(self, attempt: int, base_delay: float = 1.0) -> float:
        """Exponential delay for a 0-indexed attempt, capped and jittered by ±25%."""
        delay = min(base_delay * (self.backoff_factor ** attempt), self.DEFAULT_MAX_BACKOFF)
        jitter = delay * self.DEFAULT_JITTER_FACTOR * (2 * random.random() - 1)
        return max(0.1, delay + jitter)

    async def _backoff(self, attempt: int) -> None:
        delay = self._backoff_delay(attempt)
        logger.debug(f"[{self.SOURCE_NAME}] Backing off {delay:.2f}s (attempt {attempt + 1})")
        await asyncio.sleep(delay)

    def _build_headers(self) -> Dict[str, str]:
        """Request headers. Override to add source-specific headers."""
        return {
            "Accept": "application/json",
            "User-Agent": f"jobsite-weather-alerts/{self.SOURCE_NAME}-client",
        }

    def _error_detail(self, response: httpx.Response) -> str:
        """
        Human-readable reason from an error response.

        Override when the source wraps its errors in a JSON body.
        """
        return response.text[:500]

    def _retry_after(self, response: httpx.Response, error: RateLimitError) -> float:
        header = response.headers.get("Retry-After", "")
        wait = int(header) if header.isdigit() else error.retry_after
        return min(wait, self.DEFAULT_MAX_BACKOFF)

    async def get(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        resource_id: str = "unknown",
    ) -> Dict[str, Any]:
        """
        GET a JSON document, retrying transient failures.

        Args:
            url: Absolute URL, or a path joined onto BASE_URL
            params: Query parameters
            resource_id: Label for log lines

        Returns:
            Parsed JSON body

        Raises:
            RetryableError: Server errors or network failures on the last attempt
            RateLimitError: Still throttled on the last attempt
            FatalError: Client errors (4xx) or a body that is not JSON
        """
        if not url.startswith("http"):
            url = f"{self.BASE_URL.rstrip('/')}/{url.lstrip('/')}"
        headers = self._build_headers()
        last_attempt = self.max_retries - 1

        async with self.semaphore:
            client = await self._get_client()

            for attempt in range(self.max_retries):
                logger.debug(
                    f"[{self.SOURCE_NAME}] GET {resource_id} "
                    f"(attempt {attempt + 1}/{self.max_retries})"
                )
                try:
                    response = await client.get(url, params=params, headers=headers)
                except httpx.RequestError as e:
                    if attempt == last_attempt:
                        raise RetryableError(
                            message=f"Request failed: {e!r}", source=self.SOURCE_NAME
                        ) from e
                    logger.warning(f"[{self.SOURCE_NAME}] Request error on {resource_id}: {e!r}")
                    await self._backoff(attempt)
                    continue

                if response.is_success:
                    try:
                        return response.json()
                    except ValueError as e:
                        raise FatalError(
                            message=f"Invalid JSON response: {e}", source=self.SOURCE_NAME
                        ) from e

                error = classify_http_error(
                    response.status_code, self._error_detail(response), self.SOURCE_NAME
                )
                if not error.retryable or attempt == last_attempt:
                    raise error

                if isinstance(error, RateLimitError):
                    wait = self._retry_after(response, error)
                    logger.warning(f"[{self.SOURCE_NAME}] Rate limited. Waiting {wait}s")
                    await asyncio.sleep(wait)
                else:
                    logger.warning(f"[{self.SOURCE_NAME}] Retryable HTTP error: {error}")
                    await self._backoff(attempt)

        raise APIError(
            message=f"Failed to fetch {resource_id} after {self.max_retries} attempts",
            source=self.SOURCE_NAME,
        )
