"""Canonical payloads every provider response is normalized into.

Calculators only ever see these shapes, whichever source produced them.
"""

from dataclasses import dataclass, field
from datetime import datetime

from src.routing.capabilities import Capability


@dataclass(frozen=True)
class TokenMetadata:
    address: str
    name: str | None = None
    symbol: str | None = None
    decimals: int | None = None
    verified: bool = False


@dataclass(frozen=True)
class PoolData:
    address: str  # token (base) address
    pair_address: str = ""
    dex: str = ""
    base_symbol: str | None = None
    base_name: str | None = None
    price_usd: float | None = None
    liquidity_usd: float | None = None
    market_cap: float | None = None
    volume_m5: float | None = None
    volume_h1: float | None = None
    volume_h6: float | None = None
    volume_h24: float | None = None
    price_change_m5: float | None = None
    price_change_h1: float | None = None
    price_change_h6: float | None = None
    price_change_h24: float | None = None
    buys_h1: int | None = None
    sells_h1: int | None = None
    buys_h24: int | None = None
    sells_h24: int | None = None
    pair_created_at: datetime | None = None

    def age_hours(self, now: datetime) -> float | None:
        if self.pair_created_at is None:
            return None
        return max(0.0, (now - self.pair_created_at).total_seconds() / 3600)

    @property
    def txns_h24(self) -> int | None:
        if self.buys_h24 is None and self.sells_h24 is None:
            return None
        return (self.buys_h24 or 0) + (self.sells_h24 or 0)

    @property
    def volume_liquidity_ratio(self) -> float | None:
        if not self.liquidity_usd or self.volume_h24 is None:
            return None
        return self.volume_h24 / self.liquidity_usd


@dataclass(frozen=True)
class HolderBalance:
    owner: str
    balance: float


@dataclass(frozen=True)
class HolderData:
    address: str
    holders: tuple[HolderBalance, ...] = ()  # largest first
    total_holders: int | None = None
    supply: float | None = None

    @property
    def effective_supply(self) -> float:
        if self.supply:
            return self.supply
        return sum(h.balance for h in self.holders)

    def share_pct(self, balance: float) -> float:
        supply = self.effective_supply
        return balance / supply * 100 if supply > 0 else 0.0


@dataclass(frozen=True)
class SecurityData:
    """Contract-level restriction flags. None means the source did not say."""

    address: str
    is_honeypot: bool | None = None
    buy_tax: float | None = None  # percent
    sell_tax: float | None = None
    transfer_fee_pct: float | None = None
    trading_disabled: bool | None = None
    selling_disabled: bool | None = None
    transfer_pausable: bool | None = None
    trading_cooldown: bool | None = None
    anti_whale: bool | None = None
    blacklist_enabled: bool | None = None
    mintable: bool | None = None
    balance_mutable: bool | None = None
    blacklisted_addresses: tuple[str, ...] = field(default=())

    def has_any_field(self) -> bool:
        return any(
            value is not None
            for name, value in vars(self).items()
            if name not in ("address", "blacklisted_addresses")
        )


Payload = TokenMetadata | PoolData | HolderData | SecurityData | list[PoolData]

_LIST_CAPABILITIES = (Capability.VOLUME_SPIKES, Capability.TRENDING, Capability.NEW_PAIRS)


def payload_is_usable(capability: Capability, payload: object) -> bool:
    """True when ``payload`` has the canonical type for ``capability`` and is non-empty."""
    if payload is None:
        return False
    if capability in _LIST_CAPABILITIES:
        return isinstance(payload, list) and bool(payload) and all(isinstance(p, PoolData) for p in payload)
    if capability == Capability.TOKEN_METADATA:
        return isinstance(payload, TokenMetadata) and bool(payload.name or payload.symbol)
    if capability == Capability.POOL_DATA:
        return isinstance(payload, PoolData) and payload.liquidity_usd is not None
    if capability == Capability.HOLDER_DATA:
        return isinstance(payload, HolderData) and bool(payload.holders)
    if capability == Capability.SECURITY:
        return isinstance(payload, SecurityData) and payload.has_any_field()
    return False
