"""Jupiter Tokens API client (token registry lookups).

Keyless requests go to the lite gateway; with an API key the authenticated
gateway is used instead.
"""

import httpx

from src.parsers.exceptions import ProviderPayloadError
from src.parsers.jupiter.models import JupiterToken
from src.parsers.rate_limiter import RateLimiter
from src.parsers.retry import RetryPolicy, send_with_retry

LITE_URL = "https://lite-api.jup.ag/tokens/v2"
AUTH_URL = "https://api.jup.ag/tokens/v2"
SOURCE = "jupiter"


class JupiterClient:
    """Async HTTP client for the Jupiter token registry (free tier: 1 RPS)."""

    def __init__(
        self,
        api_key: str = "",
        max_rps: float = 1.0,
        retry_policy: RetryPolicy | None = None,
        timeout: float = 10.0,
    ) -> None:
        headers: dict[str, str] = {"Accept": "application/json"}
        if api_key:
            headers["x-api-key"] = api_key
        self._base_url = AUTH_URL if api_key else LITE_URL
        self._client = httpx.AsyncClient(timeout=timeout, headers=headers)
        self._rate_limiter = RateLimiter(max_rps)
        self._retry = retry_policy or RetryPolicy()

    async def close(self) -> None:
        await self._client.aclose()

    async def search_token(self, mint: str) -> JupiterToken | None:
        """Look up a mint; returns None when the registry does not know it."""
        data = await send_with_retry(
            self._client,
            "GET",
            f"{self._base_url}/search",
            source=SOURCE,
            rate_limiter=self._rate_limiter,
            policy=self._retry,
            params={"query": mint},
        )
        if not isinstance(data, list):
            raise ProviderPayloadError(SOURCE, "expected token list")
        for raw in data:
            if isinstance(raw, dict) and raw.get("id") == mint:
                return JupiterToken.model_validate(raw)
        return None
