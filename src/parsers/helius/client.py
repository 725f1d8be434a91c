"""Helius client: DAS token queries on top of the Helius JSON-RPC endpoint."""

from decimal import Decimal

from src.parsers.exceptions import ProviderPayloadError
from src.parsers.retry import RetryPolicy
from src.parsers.solana_rpc.client import SolanaRpcClient
from src.parsers.solana_rpc.models import DasAsset, TokenAccountBalance, TokenSupply

DAS_PAGE_LIMIT = 1000


class HeliusClient(SolanaRpcClient):
    """Helius RPC with the Digital Asset Standard methods (quota-limited)."""

    source = "helius"

    def __init__(
        self,
        api_key: str,
        rpc_url: str = "",
        max_rps: float = 10.0,
        retry_policy: RetryPolicy | None = None,
        timeout: float = 15.0,
    ) -> None:
        super().__init__(
            rpc_url or f"https://mainnet.helius-rpc.com/?api-key={api_key}",
            max_rps=max_rps,
            retry_policy=retry_policy,
            timeout=timeout,
        )

    async def get_asset(self, asset_id: str) -> DasAsset | None:
        """Token name, symbol and decimals via DAS getAsset."""
        result = await self._rpc("getAsset", {"id": asset_id})
        if not isinstance(result, dict):
            return None
        metadata = (result.get("content") or {}).get("metadata") or {}
        token_info = result.get("token_info") or {}
        creators = result.get("creators") or []
        return DasAsset(
            id=result.get("id", asset_id),
            name=metadata.get("name"),
            symbol=metadata.get("symbol") or token_info.get("symbol"),
            decimals=token_info.get("decimals"),
            verified=any(c.get("verified") for c in creators if isinstance(c, dict)),
        )

    async def get_token_accounts(
        self, mint: str
    ) -> tuple[list[TokenAccountBalance], int | None, TokenSupply | None]:
        """First page of holder accounts, the holder count and the supply.

        DAS reports ``total`` per page, so the holder count is only known when the
        page is not full. A full page returns ``None`` for it.
        """
        result = await self._rpc("getTokenAccounts", {"mint": mint, "limit": DAS_PAGE_LIMIT, "page": 1})
        if not isinstance(result, dict):
            raise ProviderPayloadError(self.source, "getTokenAccounts: unexpected result")

        rows = [acc for acc in result.get("token_accounts") or [] if isinstance(acc, dict)]
        supply = await self.get_token_supply(mint)
        scale = Decimal(10) ** (supply.decimals if supply else 0)
        accounts = [
            TokenAccountBalance(
                address=acc.get("address", ""),
                owner=acc.get("owner"),
                amount=Decimal(str(acc.get("amount") or 0)) / scale,
            )
            for acc in rows
        ]
        if len(rows) >= DAS_PAGE_LIMIT:
            return accounts, None, supply
        holder_count = len({acc.holder for acc in accounts if acc.amount > 0})
        return accounts, holder_count, supply
