"""Birdeye Data Services API client.

Paid, compute-unit metered source: every call counts against the daily quota,
so the router only reaches it after the free sources have failed.
"""

from typing import Any

import httpx
from loguru import logger
from pydantic import ValidationError

from src.parsers.birdeye.models import (
    BirdeyeHolder,
    BirdeyeMarketToken,
    BirdeyeTokenOverview,
    BirdeyeTokenSecurity,
)
from src.parsers.exceptions import ProviderPayloadError
from src.parsers.rate_limiter import RateLimiter
from src.parsers.retry import RetryPolicy, send_with_retry

BASE_URL = "https://public-api.birdeye.so"
SOURCE = "birdeye"


class BirdeyeClient:
    """Async client for Birdeye Data Services API."""

    def __init__(
        self,
        api_key: str,
        rate_limiter: RateLimiter | None = None,
        max_rps: float = 10.0,
        retry_policy: RetryPolicy | None = None,
        timeout: float = 15.0,
    ) -> None:
        self._rate_limiter = rate_limiter or RateLimiter(max_rps)
        self._retry = retry_policy or RetryPolicy()
        self._client = httpx.AsyncClient(
            base_url=BASE_URL,
            timeout=timeout,
            headers={
                "X-API-KEY": api_key,
                "Accept": "application/json",
                "x-chain": "solana",
            },
        )

    async def _get_data(self, path: str, **params: Any) -> Any:
        """GET and unwrap Birdeye's ``{"success": ..., "data": ...}`` envelope."""
        body = await send_with_retry(
            self._client,
            "GET",
            path,
            source=SOURCE,
            rate_limiter=self._rate_limiter,
            policy=self._retry,
            params=params,
        )
        if not isinstance(body, dict):
            raise ProviderPayloadError(SOURCE, f"unexpected body for {path}")
        if body.get("success") is False:
            logger.debug(f"[BIRDEYE] {path} returned success=false: {body.get('message')}")
            return None
        return body.get("data")

    async def get_token_overview(self, address: str) -> BirdeyeTokenOverview | None:
        data = await self._get_data("/defi/token_overview", address=address)
        if not data:
            return None
        return BirdeyeTokenOverview.model_validate(data)

    async def get_token_security(self, address: str) -> BirdeyeTokenSecurity | None:
        data = await self._get_data("/defi/token_security", address=address)
        if not data:
            return None
        return BirdeyeTokenSecurity.model_validate(data)

    async def get_token_holders(self, address: str, limit: int = 100) -> list[BirdeyeHolder]:
        data = await self._get_data("/defi/v3/token/holder", address=address, offset=0, limit=limit)
        return [BirdeyeHolder.model_validate(h) for h in _items(data, "items")]

    async def get_volume_movers(self, limit: int = 20) -> list[BirdeyeMarketToken]:
        """Tokens sorted by 24h volume change, largest first."""
        data = await self._get_data(
            "/defi/tokenlist", sort_by="v24hChangePercent", sort_type="desc", offset=0, limit=limit
        )
        return _market_tokens(_items(data, "tokens"))

    async def get_trending(self, limit: int = 20) -> list[BirdeyeMarketToken]:
        data = await self._get_data("/defi/token_trending", sort_by="rank", sort_type="asc", offset=0, limit=limit)
        return _market_tokens(_items(data, "tokens"))

    async def get_new_listings(self, limit: int = 20) -> list[BirdeyeMarketToken]:
        data = await self._get_data("/defi/v2/tokens/new_listing", limit=limit, meme_platform_enabled="true")
        return _market_tokens(_items(data, "items"))

    async def close(self) -> None:
        await self._client.aclose()


def _items(data: Any, key: str) -> list:
    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get(key), list):
        return data[key]
    return []


def _market_tokens(rows: list) -> list[BirdeyeMarketToken]:
    tokens = []
    for row in rows:
        try:
            tokens.append(BirdeyeMarketToken.model_validate(row))
        except ValidationError:
            logger.debug("[BIRDEYE] Skipping malformed market row")
    return [t for t in tokens if t.address]
