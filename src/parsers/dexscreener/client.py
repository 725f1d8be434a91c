import httpx
from loguru import logger
from pydantic import ValidationError

from src.parsers.dexscreener.models import DexScreenerPair, DexScreenerTokenProfile
from src.parsers.exceptions import ProviderPayloadError
from src.parsers.rate_limiter import RateLimiter
from src.parsers.retry import RetryPolicy, send_with_retry

BASE_URL = "https://api.dexscreener.com"
SOURCE = "dexscreener"
CHAIN = "solana"
BATCH_SIZE = 30


class DexScreenerClient:
    """Async REST client for DexScreener public API (no auth required)."""

    def __init__(
        self,
        rate_limiter: RateLimiter | None = None,
        max_rps: float = 4.0,
        retry_policy: RetryPolicy | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=BASE_URL,
            timeout=timeout,
            headers={"Accept": "application/json"},
        )
        self._rate_limiter = rate_limiter or RateLimiter(max_rps)
        self._retry = retry_policy or RetryPolicy()

    async def _get(self, path: str) -> object:
        return await send_with_retry(
            self._client,
            "GET",
            path,
            source=SOURCE,
            rate_limiter=self._rate_limiter,
            policy=self._retry,
        )

    async def get_token_pairs(self, token_address: str) -> list[DexScreenerPair]:
        """All Solana pairs for a token."""
        data = await self._get(f"/token-pairs/v1/{CHAIN}/{token_address}")
        if isinstance(data, dict):
            data = data.get("pairs") or []
        return _parse_pairs(data)

    async def get_tokens_batch(self, addresses: list[str]) -> list[DexScreenerPair]:
        """Pairs for up to 30 tokens in one request."""
        if not addresses:
            return []
        joined = ",".join(addresses[:BATCH_SIZE])
        data = await self._get(f"/tokens/v1/{CHAIN}/{joined}")
        return _parse_pairs(data)

    async def get_top_boosts(self) -> list[DexScreenerTokenProfile]:
        """Tokens with the most active boosts, used as the trending feed."""
        return _parse_profiles(await self._get("/token-boosts/top/v1"))

    async def get_latest_profiles(self) -> list[DexScreenerTokenProfile]:
        """Most recently created token profiles, used as the new-pairs feed."""
        return _parse_profiles(await self._get("/token-profiles/latest/v1"))

    async def close(self) -> None:
        await self._client.aclose()


def _parse_pairs(data: object) -> list[DexScreenerPair]:
    if not isinstance(data, list):
        raise ProviderPayloadError(SOURCE, f"expected pair list, got {type(data).__name__}")
    pairs = []
    for raw in data:
        try:
            pairs.append(DexScreenerPair.model_validate(raw))
        except ValidationError as e:
            logger.debug(f"[DEXSCREENER] Skipping malformed pair: {e.error_count()} errors")
    return pairs


def _parse_profiles(data: object) -> list[DexScreenerTokenProfile]:
    if not isinstance(data, list):
        raise ProviderPayloadError(SOURCE, f"expected profile list, got {type(data).__name__}")
    profiles = [DexScreenerTokenProfile.model_validate(p) for p in data if isinstance(p, dict)]
    return [p for p in profiles if p.chainId == CHAIN and p.tokenAddress]
