"""Raydium API v3 client: pool lookups for Solana tokens."""

import httpx

from src.parsers.exceptions import ProviderPayloadError
from src.parsers.raydium.models import RaydiumPoolInfo
from src.parsers.rate_limiter import RateLimiter
from src.parsers.retry import RetryPolicy, send_with_retry

BASE_URL = "https://api-v3.raydium.io"
SOURCE = "raydium"


class RaydiumClient:
    """Async HTTP client for Raydium API v3 (free, no key)."""

    def __init__(
        self,
        max_rps: float = 5.0,
        retry_policy: RetryPolicy | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._rate_limiter = RateLimiter(max_rps)
        self._retry = retry_policy or RetryPolicy()
        self._client = httpx.AsyncClient(base_url=BASE_URL, timeout=timeout)

    async def close(self) -> None:
        await self._client.aclose()

    async def get_pool_info(self, mint: str) -> RaydiumPoolInfo | None:
        """Fetch the deepest standard pool for a token."""
        data = await send_with_retry(
            self._client,
            "GET",
            "/pools/info/mint",
            source=SOURCE,
            rate_limiter=self._rate_limiter,
            policy=self._retry,
            params={
                "mint1": mint,
                "poolType": "standard",
                "poolSortField": "liquidity",
                "sortType": "desc",
                "pageSize": "1",
                "page": "1",
            },
        )
        if not isinstance(data, dict):
            raise ProviderPayloadError(SOURCE, "expected object body")
        return _parse_pool(data)


def _to_float(val) -> float | None:
    if val is None or val == "":
        return None
    try:
        return float(val)
    except (ValueError, TypeError):
        return None


def _parse_pool(data: dict) -> RaydiumPoolInfo | None:
    inner = data.get("data") or {}
    pools = inner.get("data", []) if isinstance(inner, dict) else []
    if not pools:
        return None

    pool = pools[0]
    mint_a = pool.get("mintA") if isinstance(pool.get("mintA"), dict) else {}
    mint_b = pool.get("mintB") if isinstance(pool.get("mintB"), dict) else {}
    day = pool.get("day") if isinstance(pool.get("day"), dict) else {}
    open_time = _to_float(pool.get("openTime"))

    return RaydiumPoolInfo(
        pool_id=pool.get("id", ""),
        base_mint=mint_a.get("address", ""),
        base_symbol=mint_a.get("symbol"),
        base_name=mint_a.get("name"),
        quote_mint=mint_b.get("address", ""),
        price=_to_float(pool.get("price")),
        tvl=_to_float(pool.get("tvl")),
        volume_24h=_to_float(day.get("volume")),
        price_change_24h=_to_float(day.get("priceChangePercent")),
        open_time=int(open_time) if open_time else None,
        burn_percent=_to_float(pool.get("burnPercent")),
    )
