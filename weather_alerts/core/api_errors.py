"""
Error types for the alert engine.

Upstream HTTP failures (Open-Meteo, NWS, Resend) are APIError subclasses
carrying the source name, the HTTP status and a `retryable` flag that the
HTTP client's retry loop reads. Store and startup failures are plain
exceptions because nothing retries them.
"""

from typing import Optional, Dict, Any


class APIError(Exception):
    """
    Base exception for upstream API failures.

    Attributes:
        message: Human-readable error description
        source: Source name ('open_meteo', 'nws', 'resend')
        status_code: HTTP status code, None for network failures
        response_data: Parsed error body, when the source sent one
        retryable: Whether the HTTP client should try again
    """

    retryable_default: bool = False

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        status_code: Optional[int] = None,
        response_data: Optional[Dict[str, Any]] = None,
        retryable: Optional[bool] = None,
    ):
        super().__init__(message)
        self.message = message
        self.source = source
        self.status_code = status_code
        self.response_data = response_data
        self.retryable = self.retryable_default if retryable is None else retryable

    def __str__(self) -> str:
        text = f"[{self.source}] {self.message}" if self.source else self.message
        if self.status_code:
            text = f"{text} (HTTP {self.status_code})"
        return text


class RetryableError(APIError):
    """Server errors (5xx), timeouts and dropped connections."""

    retryable_default = True


class RateLimitError(RetryableError):
    """
    HTTP 429. `retry_after` is the fallback wait in seconds when the
    response carries no Retry-After header.
    """

    def __init__(self, message: str, source: Optional[str] = None, retry_after: Optional[int] = None):
        super().__init__(message=message, source=source, status_code=429)
        self.retry_after = retry_after or 30


class FatalError(APIError):
    """Permanent failures: rejected credentials, bad parameters, unparseable bodies."""


class NotFoundError(FatalError):
    """HTTP 404. NWS answers 404 for points outside its coverage."""


class TransientFetchError(RetryableError):
    """
    Conditions could not be fetched for a site.

    Raised by the conditions provider when the primary weather source is
    unreachable or answers with a non-success status. Isolated per site by
    the fan-out: counted and logged, never aborts the run.
    """


class DispatchError(APIError):
    """
    The notification provider rejected the message or was unreachable.

    Only raised inside the dispatcher, which converts it into a failed
    DispatchResult. Delivery is attempted once; there is no retry queue.
    """


class PersistenceError(Exception):
    """A read or write against the alert store failed."""

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        message = f"Alert store operation '{operation}' failed"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.operation = operation
        self.cause = cause


class StartupFatalError(Exception):
    """The persistence layer is unavailable at boot; the service must not start."""


_STATUS_ERRORS = {
    400: (FatalError, "Bad request"),
    401: (FatalError, "Access denied"),
    403: (FatalError, "Access denied"),
    404: (NotFoundError, "Not found"),
}


def classify_http_error(
    status_code: int, response_text: str = "", source: Optional[str] = None
) -> APIError:
    """
    Map a non-success HTTP status to an APIError subclass.

    Args:
        status_code: HTTP status code
        response_text: Error detail from the response body (truncated to 200 chars)
        source: Source name

    Returns:
        RateLimitError for 429, RetryableError for 5xx, FatalError (or
        NotFoundError) for known 4xx, plain non-retryable APIError otherwise
    """
    detail = response_text[:200]
    if status_code == 429:
        return RateLimitError(message=f"Rate limited: {detail}", source=source)
    if 500 <= status_code < 600:
        return RetryableError(
            message=f"Server error: {detail}", source=source, status_code=status_code
        )
    if status_code in _STATUS_ERRORS:
        error_type, label = _STATUS_ERRORS[status_code]
        return error_type(message=f"{label}: {detail}", source=source, status_code=status_code)
    return APIError(
        message=f"HTTP error {status_code}: {detail}",
        source=source,
        status_code=status_code,
    )
