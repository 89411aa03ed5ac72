"""HTTP client helpers for fetching remote boundary files."""

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from grazeplan.core.config import settings

# =============================================================================
# Retry Configuration
# =============================================================================

MAX_RETRIES = 3
MIN_WAIT_SECONDS = 1
MAX_WAIT_SECONDS = 10


# =============================================================================
# Exceptions
# =============================================================================


class RetryableError(Exception):
    """Transient error that should be retried (timeouts, connection errors, 5xx)."""

    pass


class ExternalAPIError(Exception):
    """Non-retryable error from an external HTTP service."""

    pass


# =============================================================================
# Client Functions
# =============================================================================


async def http_get(url: str, params: dict | None = None, timeout: float | None = None) -> httpx.Response:
    """Make a single GET request without retry.

    For most use cases, prefer `http_get_with_retry()` which handles transient errors.

    Args:
        url: Absolute URL to fetch
        params: Optional query parameters
        timeout: Request timeout in seconds (default: settings.http_timeout)

    Returns:
        The successful httpx.Response

    Raises:
        httpx.HTTPStatusError: If the server answers with a 4xx/5xx status
    """
    if timeout is None:
        timeout = settings.http_timeout

    async with httpx.AsyncClient(follow_redirects=True) as client:
        response = await client.get(url, params=params, timeout=timeout)
        response.raise_for_status()
        return response


@retry(
    retry=retry_if_exception_type(RetryableError),
    stop=stop_after_attempt(MAX_RETRIES),
    wait=wait_exponential_jitter(initial=MIN_WAIT_SECONDS, max=MAX_WAIT_SECONDS, jitter=2),
    reraise=True,
)
async def http_get_with_retry(url: str, params: dict | None = None, timeout: float | None = None) -> httpx.Response:
    """GET a URL with automatic retry on transient errors.

    Retries on:
    - Timeouts
    - Connection errors
    - HTTP 5xx errors

    After MAX_RETRIES failures the last RetryableError is re-raised.

    Raises:
        RetryableError: If every attempt hit a transient error
        ExternalAPIError: On a client error (4xx)
    """
    try:
        return await http_get(url, params=params, timeout=timeout)
    except httpx.TimeoutException as e:
        raise RetryableError(f"Request timed out: {e}") from e
    except httpx.ConnectError as e:
        raise RetryableError(f"Connection failed: {e}") from e
    except httpx.HTTPStatusError as e:
        body = e.response.text
        if e.response.status_code >= 500:
            # Server error - retry with backoff
            raise RetryableError(f"HTTP {e.response.status_code}: {body}") from e
        # Client error (4xx) - don't retry
        raise ExternalAPIError(f"HTTP {e.response.status_code}: {body}") from e
