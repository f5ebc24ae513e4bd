"""Endpoint reachability check for configured environments.

Used by ``cce env check`` to confirm that an environment's base URL
answers before Claude is pointed at it.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime

import httpx

from cce.utils.logging import log_message

DEFAULT_TIMEOUT = 10.0
USER_AGENT = "cce-network-check"


@dataclass(frozen=True)
class NetworkValidationResult:
    """Outcome of one endpoint check.

    Attributes:
        success: True when the endpoint answered with a non-5xx status
        status_code: HTTP status, 0 when no response was received
        response_time: Seconds until the response arrived
        error: Failure description, empty on success
        ssl_valid: True when an HTTPS response was received
        timestamp: When the check ran
    """

    success: bool
    status_code: int = 0
    response_time: float = 0.0
    error: str = ""
    ssl_valid: bool = False
    timestamp: datetime = field(default_factory=datetime.now)


def validate_endpoint(
    url: str,
    timeout: float = DEFAULT_TIMEOUT,
    http_client: httpx.Client | None = None,
) -> NetworkValidationResult:
    """Send a GET to url and report whether it is reachable.

    Any HTTP response below 500 counts as reachable since the API may
    reject an unauthenticated request. Transport failures are returned in
    the result, never raised.

    Args:
        url: Endpoint to check
        timeout: Request timeout in seconds
        http_client: Optional injected HTTP client for testing
    """
    client = http_client or httpx.Client(
        timeout=httpx.Timeout(timeout),
        headers={"User-Agent": USER_AGENT},
    )
    start = time.monotonic()

    try:
        response = client.get(url)
    except httpx.TimeoutException as e:
        log_message(f"Endpoint check timed out for {url}: {e}")
        return NetworkValidationResult(
            success=False,
            response_time=time.monotonic() - start,
            error=f"request timed out after {timeout:g}s",
        )
    except httpx.HTTPError as e:
        log_message(f"Endpoint check failed for {url}: {e}")
        return NetworkValidationResult(
            success=False,
            response_time=time.monotonic() - start,
            error=f"connection failed: {e}",
        )
    finally:
        if http_client is None:
            client.close()

    elapsed = time.monotonic() - start
    ssl_valid = response.url.scheme == "https"
    log_message(f"Endpoint check {url}: HTTP {response.status_code} in {elapsed:.3f}s")

    if response.status_code >= 500:
        return NetworkValidationResult(
            success=False,
            status_code=response.status_code,
            response_time=elapsed,
            error=f"server error: HTTP {response.status_code}",
            ssl_valid=ssl_valid,
        )

    return NetworkValidationResult(
        success=True,
        status_code=response.status_code,
        response_time=elapsed,
        ssl_valid=ssl_valid,
    )


__all__ = [
    "DEFAULT_TIMEOUT",
    "NetworkValidationResult",
    "validate_endpoint",
]
