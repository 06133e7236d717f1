import asyncio
import httpx
import logging
from typing import Optional, Dict, Any

# Default timeout configuration (in seconds)
DEFAULT_TIMEOUT = 30.0
DEFAULT_CONNECT_TIMEOUT = 10.0
DEFAULT_RETRIES = 3
# Backoff before retry n is n * RETRY_DELAY seconds
RETRY_DELAY = 2.0

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """Raised when a URL could not be fetched within the allowed attempts."""

    def __init__(self, url: str, attempts: int, max_retries: int, reason: str):
        self.url = url
        self.attempts = attempts
        super().__init__(f"Failed to fetch {url} (attempt {attempts}/{max_retries}): {reason}")


async def fetch_url(
    url: str,
    timeout: Optional[float] = None,
    connect_timeout: Optional[float] = None,
    headers: Optional[Dict[str, str]] = None,
):
    """
    Fetches the content of a URL with a GET request and configurable timeouts.

    Args:
        url: The URL to fetch
        timeout: Total request timeout in seconds (default: 30s)
        connect_timeout: Connection timeout in seconds (default: 10s)
        headers: Optional dictionary of HTTP headers

    Returns:
        httpx.Response object
    """
    logger.debug(f"HTTP GET {url} (timeout: {timeout or DEFAULT_TIMEOUT}s)")

    timeout_config = httpx.Timeout(
        timeout=timeout or DEFAULT_TIMEOUT,
        connect=min(connect_timeout or DEFAULT_CONNECT_TIMEOUT, timeout or DEFAULT_TIMEOUT)
    )

    try:
        async with httpx.AsyncClient(timeout=timeout_config, follow_redirects=True) as client:
            response = await client.get(url, headers=headers)
            logger.debug(f"HTTP {response.status_code} {url} ({len(response.content)} bytes)")
            # Status is checked by the caller
            return response
    except httpx.TimeoutException as e:
        logger.debug(f"HTTP timeout for {url}: {e}")
        raise
    except httpx.RequestError as e:
        logger.debug(f"HTTP request error for {url}: {e}")
        raise


def _decode_object(response: httpx.Response) -> Dict[str, Any]:
    if not response.is_success:
        raise ValueError(f"HTTP {response.status_code}: {response.reason_phrase}")
    data = response.json()
    if not isinstance(data, dict):
        raise ValueError("Invalid JSON response: not an object")
    return data


async def fetch_json(
    url: str,
    max_retries: int = DEFAULT_RETRIES,
    timeout: Optional[float] = None,
    headers: Optional[Dict[str, str]] = None,
    retry_delay: float = RETRY_DELAY,
) -> Dict[str, Any]:
    """
    Fetches a URL and decodes its body as a JSON object, retrying on failure.

    Every failure (transport error, non-2xx status, undecodable body, body
    that is not an object) is retried alike after ``attempt * retry_delay``
    seconds. The last failure is raised as FetchError.

    Args:
        url: The URL to fetch
        max_retries: Maximum number of attempts
        timeout: Per-attempt timeout in seconds
        headers: Optional dictionary of HTTP headers
        retry_delay: Backoff unit in seconds

    Returns:
        The decoded JSON object
    """
    logger.info(f"Fetching: {url}")
    max_retries = max(1, max_retries)

    for attempt in range(1, max_retries + 1):
        try:
            response = await fetch_url(url, timeout=timeout, headers=headers)
            return _decode_object(response)
        except (httpx.HTTPError, ValueError) as e:
            reason = str(e) or type(e).__name__
            if attempt == max_retries:
                error = FetchError(url, attempt, max_retries, reason)
                logger.error(str(error))
                raise error from e
            delay = attempt * retry_delay
            logger.warning(
                f"Failed to fetch {url} (attempt {attempt}/{max_retries}): {reason} - Retrying in {delay:g} seconds..."
            )
            await asyncio.sleep(delay)
