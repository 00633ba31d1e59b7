"""Retry policy for idempotent HTTP reads using tenacity."""

from dataclasses import dataclass

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    retry_if_result,
    stop_after_attempt,
    wait_exponential,
)

# Gateway errors in front of the row store; the request never reached it or timed out
RETRYABLE_STATUS_CODES = frozenset({502, 503, 504})


@dataclass
class RequestRetryConfig:
    """Configuration for HTTP request retries with exponential backoff."""

    max_attempts: int = 3
    min_wait: float = 0.5
    max_wait: float = 5.0
    multiplier: float = 1.0


def _is_retryable_response(response: httpx.Response) -> bool:
    return response.status_code in RETRYABLE_STATUS_CODES


def _last_response(retry_state: RetryCallState) -> httpx.Response:
    # Out of attempts on a gateway error: hand the response back for normal status handling
    assert retry_state.outcome is not None
    response: httpx.Response = retry_state.outcome.result()
    return response


def get_read_retrying(config: RequestRetryConfig | None = None) -> AsyncRetrying:
    """AsyncRetrying for reads: retries transport errors and gateway error responses.

    Never use it for mutations. A write whose response was lost may already
    be applied, and an increment sent twice would skip a number.

    Usage:
        response = await get_read_retrying()(client.get, url)
    """
    cfg = config or RequestRetryConfig()
    return AsyncRetrying(
        retry=retry_if_exception_type(httpx.TransportError) | retry_if_result(_is_retryable_response),
        stop=stop_after_attempt(cfg.max_attempts),
        wait=wait_exponential(
            multiplier=cfg.multiplier,
            min=cfg.min_wait,
            max=cfg.max_wait,
        ),
        retry_error_callback=_last_response,
    )
