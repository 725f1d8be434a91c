"""Provider adapters: one uniform ``fetch(capability, subject_id)`` per source.

Each adapter wraps one provider client, calls the endpoint that backs the
requested capability and returns a canonical payload. Anything that goes
wrong surfaces as a ``ProviderError`` for the router to absorb.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Protocol

from src.parsers.birdeye.client import BirdeyeClient
from src.parsers.dexscreener.client import DexScreenerClient
from src.parsers.dexscreener.models import DexScreenerPair
from src.parsers.exceptions import ProviderEmptyError, UnsupportedCapabilityError
from src.parsers.goplus.client import GoPlusClient
from src.parsers.helius.client import HeliusClient
from src.parsers.jupiter.client import JupiterClient
from src.parsers.raydium.client import RaydiumClient
from src.parsers.solana_rpc.client import SolanaRpcClient
from src.routing import normalize
from src.routing.capabilities import QUOTA_LIMITED_SOURCES, Capability
from src.routing.payloads import Payload, PoolData

VOLUME_SPIKE_MIN_CHANGE_PCT = 50.0
VOLUME_SPIKE_MIN_VOLUME_USD = 1_000_000.0


class SourceAdapter(Protocol):
    name: str
    quota_limited: bool
    capabilities: frozenset[Capability]

    def request_cost(self, capability: Capability) -> int: ...

    async def fetch(self, capability: Capability, subject_id: str) -> Payload: ...

    async def close(self) -> None: ...


Handler = Callable[[str], Awaitable[Payload | None]]


class ClientAdapter:
    """Dispatches a capability to the handler registered for it."""

    name = ""
    # Capabilities whose handler sends more than one request
    request_costs: dict[Capability, int] = {}

    def __init__(self, client) -> None:
        self._client = client
        self._handlers: dict[Capability, Handler] = self._build_handlers()
        self.capabilities = frozenset(self._handlers)
        self.quota_limited = self.name in QUOTA_LIMITED_SOURCES

    def _build_handlers(self) -> dict[Capability, Handler]:
        raise NotImplementedError

    def request_cost(self, capability: Capability) -> int:
        return self.request_costs.get(capability, 1)

    async def fetch(self, capability: Capability, subject_id: str) -> Payload:
        handler = self._handlers.get(capability)
        if handler is None:
            raise UnsupportedCapabilityError(self.name, f"does not serve {capability}")
        payload = await handler(subject_id)
        if payload is None or payload == []:
            raise ProviderEmptyError(self.name, f"no {capability} for {subject_id}")
        return payload

    async def close(self) -> None:
        await self._client.close()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class DexScreenerAdapter(ClientAdapter):
    name = "dexscreener"
    request_costs = {Capability.TRENDING: 2, Capability.NEW_PAIRS: 2, Capability.VOLUME_SPIKES: 2}
    _client: DexScreenerClient

    def __init__(self, client: DexScreenerClient, scan_limit: int = 30) -> None:
        self._scan_limit = scan_limit
        super().__init__(client)

    def _build_handlers(self) -> dict[Capability, Handler]:
        return {
            Capability.TOKEN_METADATA: self._metadata,
            Capability.POOL_DATA: self._pool,
            Capability.VOLUME_SPIKES: self._volume_spikes,
            Capability.TRENDING: self._trending,
            Capability.NEW_PAIRS: self._new_pairs,
        }

    async def _deepest(self, address: str) -> DexScreenerPair | None:
        return normalize.deepest_pair(await self._client.get_token_pairs(address))

    async def _metadata(self, address: str):
        pair = await self._deepest(address)
        return normalize.metadata_from_dexscreener(pair) if pair else None

    async def _pool(self, address: str):
        pair = await self._deepest(address)
        return normalize.pool_from_dexscreener(pair) if pair else None

    async def _pools_for(self, addresses: list[str]) -> list[PoolData]:
        """Deepest pool per token, keeping the feed order."""
        pairs = await self._client.get_tokens_batch(addresses[: self._scan_limit])
        best: dict[str, DexScreenerPair] = {}
        for pair in pairs:
            if not pair.baseToken:
                continue
            current = best.get(pair.baseToken.address)
            if current is None or pair.liquidity_usd > current.liquidity_usd:
                best[pair.baseToken.address] = pair
        return [normalize.pool_from_dexscreener(best[a]) for a in addresses if a in best]

    async def _trending(self, _subject: str):
        profiles = await self._client.get_top_boosts()
        return await self._pools_for(list(dict.fromkeys(p.tokenAddress for p in profiles)))

    async def _new_pairs(self, _subject: str):
        profiles = await self._client.get_latest_profiles()
        return await self._pools_for(list(dict.fromkeys(p.tokenAddress for p in profiles)))

    async def _volume_spikes(self, subject: str):
        pools = await self._trending(subject)
        return [
            p
            for p in pools
            if abs(p.price_change_h24 or 0) > VOLUME_SPIKE_MIN_CHANGE_PCT
            or (p.volume_h24 or 0) > VOLUME_SPIKE_MIN_VOLUME_USD
        ]


class JupiterAdapter(ClientAdapter):
    name = "jupiter"
    _client: JupiterClient

    def _build_handlers(self) -> dict[Capability, Handler]:
        return {Capability.TOKEN_METADATA: self._metadata}

    async def _metadata(self, address: str):
        token = await self._client.search_token(address)
        return normalize.metadata_from_jupiter(token) if token else None


class RaydiumAdapter(ClientAdapter):
    name = "raydium"
    _client: RaydiumClient

    def _build_handlers(self) -> dict[Capability, Handler]:
        return {Capability.POOL_DATA: self._pool}

    async def _pool(self, address: str):
        pool = await self._client.get_pool_info(address)
        return normalize.pool_from_raydium(pool, address) if pool else None


class GoPlusAdapter(ClientAdapter):
    name = "goplus"
    _client: GoPlusClient

    def _build_handlers(self) -> dict[Capability, Handler]:
        return {Capability.SECURITY: self._security}

    async def _security(self, address: str):
        report = await self._client.get_token_security(address)
        return normalize.security_from_goplus(report, address) if report else None


class SolanaRpcAdapter(ClientAdapter):
    name = "solana_rpc"
    request_costs = {Capability.HOLDER_DATA: 2}
    _client: SolanaRpcClient

    def _build_handlers(self) -> dict[Capability, Handler]:
        return {Capability.HOLDER_DATA: self._holders}

    async def _holders(self, address: str):
        accounts, supply = await asyncio.gather(
            self._client.get_token_largest_accounts(address),
            self._client.get_token_supply(address),
        )
        if not accounts:
            return None
        # Largest-accounts RPC cannot count holders; total stays unknown
        return normalize.holders_from_accounts(accounts, address, supply=supply)


class HeliusAdapter(ClientAdapter):
    name = "helius"
    request_costs = {Capability.HOLDER_DATA: 2}
    _client: HeliusClient

    def _build_handlers(self) -> dict[Capability, Handler]:
        return {
            Capability.TOKEN_METADATA: self._metadata,
            Capability.HOLDER_DATA: self._holders,
        }

    async def _metadata(self, address: str):
        asset = await self._client.get_asset(address)
        return normalize.metadata_from_das(asset) if asset else None

    async def _holders(self, address: str):
        accounts, total, supply = await self._client.get_token_accounts(address)
        if not accounts:
            return None
        return normalize.holders_from_accounts(accounts, address, supply=supply, total_holders=total)


class BirdeyeAdapter(ClientAdapter):
    name = "birdeye"
    _client: BirdeyeClient

    def __init__(self, client: BirdeyeClient, scan_limit: int = 20) -> None:
        self._scan_limit = scan_limit
        super().__init__(client)

    def _build_handlers(self) -> dict[Capability, Handler]:
        return {
            Capability.TOKEN_METADATA: self._metadata,
            Capability.POOL_DATA: self._pool,
            Capability.HOLDER_DATA: self._holders,
            Capability.SECURITY: self._security,
            Capability.VOLUME_SPIKES: self._volume_spikes,
            Capability.TRENDING: self._trending,
            Capability.NEW_PAIRS: self._new_pairs,
        }

    async def _metadata(self, address: str):
        overview = await self._client.get_token_overview(address)
        return normalize.metadata_from_birdeye(overview) if overview else None

    async def _pool(self, address: str):
        overview = await self._client.get_token_overview(address)
        return normalize.pool_from_birdeye(overview, address) if overview else None

    async def _holders(self, address: str):
        rows = await self._client.get_token_holders(address)
        return normalize.holders_from_birdeye(rows, address) if rows else None

    async def _security(self, address: str):
        security = await self._client.get_token_security(address)
        return normalize.security_from_birdeye(security, address) if security else None

    async def _volume_spikes(self, _subject: str):
        tokens = await self._client.get_volume_movers(self._scan_limit)
        return [normalize.pool_from_birdeye_market(t) for t in tokens]

    async def _trending(self, _subject: str):
        tokens = await self._client.get_trending(self._scan_limit)
        return [normalize.pool_from_birdeye_market(t) for t in tokens]

    async def _new_pairs(self, _subject: str):
        tokens = await self._client.get_new_listings(self._scan_limit)
        return [normalize.pool_from_birdeye_market(t) for t in tokens]
