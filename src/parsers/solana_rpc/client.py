"""Solana JSON-RPC client for token supply and largest-holder lookups."""

from decimal import Decimal
from typing import Any

import httpx
from loguru import logger

from src.parsers.exceptions import ProviderPayloadError
from src.parsers.rate_limiter import RateLimiter
from src.parsers.retry import RetryPolicy, send_with_retry
from src.parsers.solana_rpc.models import TokenAccountBalance, TokenSupply


class SolanaRpcClient:
    """Async JSON-RPC client (public endpoint by default)."""

    source = "solana_rpc"

    def __init__(
        self,
        rpc_url: str,
        max_rps: float = 4.0,
        retry_policy: RetryPolicy | None = None,
        timeout: float = 15.0,
    ) -> None:
        self._rpc_url = rpc_url
        self._rate_limiter = RateLimiter(max_rps)
        self._retry = retry_policy or RetryPolicy()
        self._client = httpx.AsyncClient(timeout=timeout)
        self._request_id = 0

    async def close(self) -> None:
        await self._client.aclose()

    async def _rpc(self, method: str, params: Any) -> Any:
        self._request_id += 1
        body = await send_with_retry(
            self._client,
            "POST",
            self._rpc_url,
            source=self.source,
            rate_limiter=self._rate_limiter,
            policy=self._retry,
            json={"jsonrpc": "2.0", "id": self._request_id, "method": method, "params": params},
        )
        if not isinstance(body, dict):
            raise ProviderPayloadError(self.source, f"{method}: unexpected body")
        if body.get("error"):
            logger.debug(f"[{self.source.upper()}] {method} RPC error: {body['error']}")
            raise ProviderPayloadError(self.source, f"{method}: {body['error']}")
        return body.get("result")

    async def get_token_supply(self, mint: str) -> TokenSupply | None:
        result = await self._rpc("getTokenSupply", [mint])
        value = (result or {}).get("value")
        if not value:
            return None
        return TokenSupply(amount=_ui_amount(value), decimals=value.get("decimals", 0))

    async def get_token_largest_accounts(self, mint: str) -> list[TokenAccountBalance]:
        """Top 20 token accounts by balance."""
        result = await self._rpc("getTokenLargestAccounts", [mint])
        value = (result or {}).get("value") or []
        return [
            TokenAccountBalance(address=acc["address"], amount=_ui_amount(acc))
            for acc in value
            if isinstance(acc, dict) and acc.get("address")
        ]


def _ui_amount(value: dict) -> Decimal:
    ui = value.get("uiAmountString")
    if ui is not None:
        return Decimal(str(ui))
    raw = Decimal(str(value.get("amount") or 0))
    return raw / (Decimal(10) ** int(value.get("decimals") or 0))
