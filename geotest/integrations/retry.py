"""
Shared retry behavior for collaborator HTTP clients.

Retries timeouts, transport errors and retryable status codes with
exponential backoff, then raises ExternalAPIError.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict

import httpx

from ..utils.errors import ExternalAPIError

logger = logging.getLogger(__name__)


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""

    max_retries: int = 3
    initial_delay: float = 1.0
    max_delay: float = 10.0
    exponential_base: float = 2.0
    retryable_status_codes: tuple = (429, 500, 502, 503, 504)


def _error_body(response: httpx.Response) -> Dict[str, Any]:
    if not response.content:
        return {}
    try:
        data = response.json()
    except ValueError:
        return {"raw": response.text}
    return data if isinstance(data, dict) else {"raw": data}


async def request_with_retry(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    retry_config: RetryConfig,
    service: str,
    **kwargs,
) -> Dict[str, Any]:
    """
    Make request with retry logic.

    Args:
        client: httpx client to send through
        method: HTTP method
        url: Path or absolute URL
        retry_config: Backoff settings
        service: Name used in log and error messages
        **kwargs: Passed to ``client.request``

    Returns:
        Decoded JSON body

    Raises:
        ExternalAPIError: on non-retryable status or after the last retry
    """
    config = retry_config
    last_exception = None

    for attempt in range(config.max_retries + 1):
        try:
            response = await client.request(method, url, **kwargs)

            if response.status_code >= 400:
                error_data = _error_body(response)

                if response.status_code in config.retryable_status_codes:
                    last_exception = ExternalAPIError(
                        f"{service} API error: {response.status_code}",
                        status_code=response.status_code,
                        response=error_data,
                    )
                else:
                    raise ExternalAPIError(
                        f"{service} API error: {response.status_code}",
                        status_code=response.status_code,
                        response=error_data,
                    )
            else:
                try:
                    return response.json()
                except ValueError as e:
                    raise ExternalAPIError(f"{service} returned invalid JSON: {e}") from e

        except httpx.TimeoutException as e:
            last_exception = ExternalAPIError(f"{service} request timed out: {e}")
        except httpx.RequestError as e:
            last_exception = ExternalAPIError(f"{service} request failed: {e}")

        if attempt < config.max_retries:
            delay = min(
                config.initial_delay * (config.exponential_base**attempt),
                config.max_delay,
            )
            logger.warning(
                f"{service} request failed, retrying in {delay:.1f}s "
                f"(attempt {attempt + 1}/{config.max_retries + 1})"
            )
            await asyncio.sleep(delay)

    raise last_exception
