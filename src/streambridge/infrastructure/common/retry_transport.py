"""httpx transport with retry on transient upstream statuses."""

from __future__ import annotations

import asyncio
import random

import httpx
import structlog

log = structlog.get_logger(__name__)

_DEFAULT_RETRYABLE = frozenset({429, 502, 503, 504})


def _parse_retry_after(headers: httpx.Headers) -> float | None:
    """Parse ``Retry-After`` header value (seconds only).

    Returns the delay in seconds, or ``None`` if the header is missing,
    negative or unparseable. HTTP-date format is ignored.
    """
    raw = headers.get("retry-after")
    if raw is None:
        return None
    try:
        value = float(raw)
    except (ValueError, TypeError):
        return None
    return value if value >= 0 else None


class RetryTransport(httpx.AsyncBaseTransport):
    """Wraps an httpx transport and retries transient error statuses.

    On retryable status codes (429, 502, 503, 504 by default) waits using
    exponential backoff with jitter and retries up to *max_retries* times.
    ``Retry-After`` is honoured when present. Transport exceptions
    (timeouts, connection errors) are not retried here; they propagate to
    the caller unchanged.
    """

    def __init__(
        self,
        wrapped: httpx.AsyncBaseTransport,
        *,
        max_retries: int = 2,
        backoff_base: float = 0.5,
        max_backoff: float = 10.0,
        retryable_status_codes: frozenset[int] = _DEFAULT_RETRYABLE,
    ) -> None:
        self._wrapped = wrapped
        self._max_retries = max_retries
        self._backoff_base = backoff_base
        self._max_backoff = max_backoff
        self._retryable = retryable_status_codes

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        attempt = 0
        while True:
            response = await self._wrapped.handle_async_request(request)
            if response.status_code not in self._retryable:
                return response
            if attempt >= self._max_retries:
                return response

            await response.aread()
            await response.aclose()

            delay = self._compute_delay(response, attempt)
            attempt += 1
            log.info(
                "http_retry",
                url=str(request.url.copy_remove_param("api_key")),
                status=response.status_code,
                attempt=attempt,
                delay=round(delay, 2),
            )
            await asyncio.sleep(delay)

    def _compute_delay(self, response: httpx.Response, attempt: int) -> float:
        """Compute retry delay from Retry-After or exponential backoff."""
        retry_after = _parse_retry_after(response.headers)
        if retry_after is not None:
            return min(retry_after, self._max_backoff)

        delay = self._backoff_base * (2**attempt)
        jitter = random.uniform(0, self._backoff_base)  # noqa: S311
        return min(delay + jitter, self._max_backoff)

    async def aclose(self) -> None:
        await self._wrapped.aclose()
