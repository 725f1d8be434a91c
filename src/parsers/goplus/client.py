"""GoPlus Security API client: free contract-flag analysis for Solana tokens."""

import httpx

from src.parsers.goplus.models import GoPlusReport
from src.parsers.rate_limiter import RateLimiter
from src.parsers.retry import RetryPolicy, send_with_retry

BASE_URL = "https://api.gopluslabs.io/api/v1/solana/token_security"
SOURCE = "goplus"


class GoPlusClient:
    """Async HTTP client for GoPlus Security API (free, no key)."""

    def __init__(
        self,
        max_rps: float = 0.5,
        retry_policy: RetryPolicy | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._rate_limiter = RateLimiter(max_rps)
        self._retry = retry_policy or RetryPolicy()
        self._client = httpx.AsyncClient(timeout=timeout)

    async def close(self) -> None:
        await self._client.aclose()

    async def get_token_security(self, mint: str) -> GoPlusReport | None:
        """Fetch the security report for a Solana token."""
        data = await send_with_retry(
            self._client,
            "GET",
            BASE_URL,
            source=SOURCE,
            rate_limiter=self._rate_limiter,
            policy=self._retry,
            params={"contract_addresses": mint},
        )
        return _parse_report(data, mint) if isinstance(data, dict) else None


def _parse_bool(val) -> bool | None:
    """Parse GoPlus '0'/'1' strings, including the ``{"status": "1"}`` form."""
    if isinstance(val, dict):
        val = val.get("status")
    if val is None or val == "":
        return None
    return str(val) == "1"


def _parse_tax(val: str | None) -> float | None:
    """Parse GoPlus tax string (0.0-1.0) to a 0-100 percentage."""
    if val is None or val == "":
        return None
    try:
        return float(val) * 100
    except (ValueError, TypeError):
        return None


def _parse_transfer_fee(val) -> float | None:
    """Token-2022 transfer fee; GoPlus nests basis points under ``current_fee_rate``."""
    if not isinstance(val, dict):
        return _parse_tax(val)
    if not val:
        return 0.0
    rate = val.get("current_fee_rate") or {}
    bps = rate.get("fee_rate") if isinstance(rate, dict) else None
    try:
        return float(bps) / 100 if bps is not None else None
    except (ValueError, TypeError):
        return None


def _parse_report(data: dict, mint: str) -> GoPlusReport | None:
    result = data.get("result") or {}
    token_data = result.get(mint) or result.get(mint.lower())
    if not token_data:
        return None

    holder_count = token_data.get("holder_count")
    return GoPlusReport(
        is_honeypot=_parse_bool(token_data.get("is_honeypot")),
        is_mintable=_parse_bool(token_data.get("is_mintable", token_data.get("mintable"))),
        is_freezable=_parse_bool(token_data.get("freezable")),
        owner_can_change_balance=_parse_bool(
            token_data.get("owner_change_balance", token_data.get("balance_mutable_authority"))
        ),
        non_transferable=_parse_bool(token_data.get("non_transferable")),
        cannot_buy=_parse_bool(token_data.get("cannot_buy")),
        cannot_sell_all=_parse_bool(token_data.get("cannot_sell_all")),
        is_blacklisted=_parse_bool(token_data.get("is_blacklisted")),
        buy_tax=_parse_tax(token_data.get("buy_tax")),
        sell_tax=_parse_tax(token_data.get("sell_tax")),
        transfer_fee_pct=_parse_transfer_fee(token_data.get("transfer_fee")),
        transfer_pausable=_parse_bool(token_data.get("transfer_pausable")),
        trading_cooldown=_parse_bool(token_data.get("trading_cooldown")),
        is_anti_whale=_parse_bool(token_data.get("is_anti_whale")),
        holder_count=int(holder_count) if str(holder_count or "").isdigit() else None,
    )
