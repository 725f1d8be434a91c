"""Data models for Raydium API v3 responses."""

from dataclasses import dataclass


@dataclass
class RaydiumPoolInfo:
    """Highest-liquidity standard pool of a mint."""

    pool_id: str = ""
    base_mint: str = ""
    base_symbol: str | None = None
    base_name: str | None = None
    quote_mint: str = ""
    price: float | None = None
    tvl: float | None = None
    volume_24h: float | None = None
    price_change_24h: float | None = None  # percent, day window
    open_time: int | None = None  # unix seconds
    burn_percent: float | None = None  # 0-100, share of LP tokens burned
