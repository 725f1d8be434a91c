"""Bounded retry for provider HTTP calls.

Every provider client funnels its requests through ``send_with_retry`` so the
backoff policy lives in one place:

* transport errors (timeouts, refused connections) and 5xx responses retry
  with ``min(base_delay * 2**attempt, max_delay)``
* 429 responses use the longer rate-limit branch and honor ``Retry-After``
* any other 4xx fails immediately

When attempts run out the matching ``ProviderError`` is raised. The router
treats that as an adapter failure and moves on to the next source.
"""

import asyncio
from dataclasses import dataclass
from typing import Any

import httpx
from loguru import logger

from src.parsers.exceptions import (
    ProviderHTTPError,
    ProviderPayloadError,
    ProviderRateLimitError,
    ProviderTimeoutError,
)
from src.parsers.rate_limiter import RateLimiter


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    base_delay: float = 1.0
    max_delay: float = 4.0
    rate_limit_delay: float = 5.0
    rate_limit_max_delay: float = 30.0

    def backoff(self, attempt: int) -> float:
        return min(self.base_delay * (2**attempt), self.max_delay)

    def rate_limit_backoff(self, attempt: int, retry_after: str | None = None) -> float:
        delay = min(self.rate_limit_delay * (2**attempt), self.rate_limit_max_delay)
        if retry_after:
            try:
                delay = max(delay, min(float(retry_after), self.rate_limit_max_delay))
            except ValueError:
                pass
        return delay

    @classmethod
    def from_settings(cls, settings) -> "RetryPolicy":
        return cls(
            max_attempts=settings.provider_max_attempts,
            base_delay=settings.retry_base_delay_sec,
            max_delay=settings.retry_max_delay_sec,
            rate_limit_delay=settings.rate_limit_delay_sec,
            rate_limit_max_delay=settings.rate_limit_max_delay_sec,
        )


NO_WAIT = RetryPolicy(base_delay=0.0, max_delay=0.0, rate_limit_delay=0.0, rate_limit_max_delay=0.0)


async def send_with_retry(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    source: str,
    rate_limiter: RateLimiter | None = None,
    policy: RetryPolicy = RetryPolicy(),
    **kwargs: Any,
) -> Any:
    """Send a request and return the decoded JSON body."""
    tag = source.upper()
    last_attempt = policy.max_attempts - 1

    for attempt in range(policy.max_attempts):
        if rate_limiter is not None:
            await rate_limiter.acquire()
        try:
            response = await client.request(method, url, **kwargs)
        except httpx.TransportError as e:
            if attempt < last_attempt:
                delay = policy.backoff(attempt)
                logger.debug(f"[{tag}] {type(e).__name__}, retrying in {delay}s")
                await asyncio.sleep(delay)
                continue
            raise ProviderTimeoutError(source, f"{type(e).__name__}: {e}") from e

        status = response.status_code
        if status == 429:
            if attempt < last_attempt:
                delay = policy.rate_limit_backoff(attempt, response.headers.get("Retry-After"))
                logger.debug(f"[{tag}] 429 rate limited, retrying in {delay}s")
                await asyncio.sleep(delay)
                continue
            raise ProviderRateLimitError(source, "rate limited after retries")

        if status >= 500:
            if attempt < last_attempt:
                delay = policy.backoff(attempt)
                logger.debug(f"[{tag}] HTTP {status}, retrying in {delay}s")
                await asyncio.sleep(delay)
                continue
            raise ProviderHTTPError(source, status)

        if status >= 400:
            raise ProviderHTTPError(source, status, url)

        try:
            return response.json()
        except ValueError as e:
            raise ProviderPayloadError(source, f"invalid JSON: {e}") from e

    raise ProviderTimeoutError(source, "no attempts made")
