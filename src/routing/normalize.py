"""Per-provider normalization into the canonical payloads."""

from datetime import UTC, datetime
from decimal import Decimal

from src.parsers.birdeye.models import (
    BirdeyeHolder,
    BirdeyeMarketToken,
    BirdeyeTokenOverview,
    BirdeyeTokenSecurity,
)
from src.parsers.dexscreener.models import DexScreenerPair
from src.parsers.goplus.models import GoPlusReport
from src.parsers.jupiter.models import JupiterToken
from src.parsers.raydium.models import RaydiumPoolInfo
from src.parsers.solana_rpc.models import DasAsset, TokenAccountBalance, TokenSupply
from src.routing.payloads import HolderBalance, HolderData, PoolData, SecurityData, TokenMetadata


def _f(value: Decimal | float | str | None) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _from_unix(value: float | int | None, *, millis: bool = False) -> datetime | None:
    if not value:
        return None
    seconds = value / 1000 if millis else value
    return datetime.fromtimestamp(seconds, tz=UTC)


def _from_iso(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


# --- DexScreener -----------------------------------------------------------


def pool_from_dexscreener(pair: DexScreenerPair) -> PoolData:
    volume = pair.volume
    change = pair.priceChange
    txns = pair.txns
    base = pair.baseToken
    return PoolData(
        address=base.address if base else "",
        pair_address=pair.pairAddress,
        dex=pair.dexId,
        base_symbol=base.symbol if base else None,
        base_name=base.name if base else None,
        price_usd=_f(pair.priceUsd),
        liquidity_usd=_f(pair.liquidity.usd) if pair.liquidity else None,
        market_cap=_f(pair.marketCap if pair.marketCap is not None else pair.fdv),
        volume_m5=_f(volume.m5) if volume else None,
        volume_h1=_f(volume.h1) if volume else None,
        volume_h6=_f(volume.h6) if volume else None,
        volume_h24=_f(volume.h24) if volume else None,
        price_change_m5=_f(change.m5) if change else None,
        price_change_h1=_f(change.h1) if change else None,
        price_change_h6=_f(change.h6) if change else None,
        price_change_h24=_f(change.h24) if change else None,
        buys_h1=txns.h1.buys if txns and txns.h1 else None,
        sells_h1=txns.h1.sells if txns and txns.h1 else None,
        buys_h24=txns.h24.buys if txns and txns.h24 else None,
        sells_h24=txns.h24.sells if txns and txns.h24 else None,
        pair_created_at=_from_unix(pair.pairCreatedAt, millis=True),
    )


def deepest_pair(pairs: list[DexScreenerPair]) -> DexScreenerPair | None:
    if not pairs:
        return None
    return max(pairs, key=lambda p: p.liquidity_usd)


def metadata_from_dexscreener(pair: DexScreenerPair) -> TokenMetadata:
    base = pair.baseToken
    return TokenMetadata(
        address=base.address if base else "",
        name=base.name if base else None,
        symbol=base.symbol if base else None,
    )


# --- Jupiter / Helius DAS --------------------------------------------------


def metadata_from_jupiter(token: JupiterToken) -> TokenMetadata:
    return TokenMetadata(
        address=token.id,
        name=token.name,
        symbol=token.symbol,
        decimals=token.decimals,
        verified=token.verified,
    )


def metadata_from_das(asset: DasAsset) -> TokenMetadata:
    return TokenMetadata(
        address=asset.id,
        name=asset.name,
        symbol=asset.symbol,
        decimals=asset.decimals,
        verified=asset.verified,
    )


# --- Raydium ---------------------------------------------------------------


def pool_from_raydium(pool: RaydiumPoolInfo, mint: str) -> PoolData:
    return PoolData(
        address=mint,
        pair_address=pool.pool_id,
        dex="raydium",
        base_symbol=pool.base_symbol,
        base_name=pool.base_name,
        price_usd=pool.price,
        liquidity_usd=pool.tvl,
        volume_h24=pool.volume_24h,
        price_change_h24=pool.price_change_24h,
        pair_created_at=_from_unix(pool.open_time),
    )


# --- Birdeye ---------------------------------------------------------------


def metadata_from_birdeye(overview: BirdeyeTokenOverview) -> TokenMetadata:
    return TokenMetadata(
        address=overview.address,
        name=overview.name,
        symbol=overview.symbol,
        decimals=overview.decimals,
    )


def pool_from_birdeye(overview: BirdeyeTokenOverview, mint: str) -> PoolData:
    return PoolData(
        address=overview.address or mint,
        dex="birdeye",
        base_symbol=overview.symbol,
        base_name=overview.name,
        price_usd=_f(overview.price),
        liquidity_usd=_f(overview.liquidity),
        market_cap=_f(overview.marketCap),
        volume_m5=_f(overview.v5mUSD),
        volume_h1=_f(overview.v1hUSD),
        volume_h6=_f(overview.v6hUSD),
        volume_h24=_f(overview.v24hUSD),
        price_change_m5=_f(overview.priceChange5mPercent),
        price_change_h1=_f(overview.priceChange1hPercent),
        price_change_h6=_f(overview.priceChange6hPercent),
        price_change_h24=_f(overview.priceChange24hPercent),
        buys_h1=overview.buy1h,
        sells_h1=overview.sell1h,
        buys_h24=overview.buy24h,
        sells_h24=overview.sell24h,
    )


def pool_from_birdeye_market(token: BirdeyeMarketToken) -> PoolData:
    return PoolData(
        address=token.address,
        dex="birdeye",
        base_symbol=token.symbol,
        base_name=token.name,
        price_usd=_f(token.price),
        liquidity_usd=_f(token.liquidity),
        market_cap=_f(token.mc),
        volume_h24=_f(token.volume_24h),
        price_change_h24=_f(token.price24hChangePercent),
        pair_created_at=_from_iso(token.liquidityAddedAt),
    )


def security_from_birdeye(security: BirdeyeTokenSecurity, mint: str) -> SecurityData:
    return SecurityData(
        address=mint,
        transfer_fee_pct=security.transfer_fee_pct,
        selling_disabled=security.nonTransferable,
        blacklist_enabled=security.is_freezable,
        mintable=security.is_mintable,
    )


def holders_from_birdeye(rows: list[BirdeyeHolder], mint: str) -> HolderData:
    holders = tuple(
        HolderBalance(owner=row.owner, balance=float(row.ui_amount or 0))
        for row in rows
        if row.owner
    )
    return HolderData(address=mint, holders=_largest_first(holders))


# --- GoPlus ----------------------------------------------------------------


def security_from_goplus(report: GoPlusReport, mint: str) -> SecurityData:
    return SecurityData(
        address=mint,
        is_honeypot=report.is_honeypot,
        buy_tax=report.buy_tax,
        sell_tax=report.sell_tax,
        transfer_fee_pct=report.transfer_fee_pct,
        trading_disabled=report.cannot_buy,
        selling_disabled=_any_true(report.cannot_sell_all, report.non_transferable),
        transfer_pausable=report.transfer_pausable,
        trading_cooldown=report.trading_cooldown,
        anti_whale=report.is_anti_whale,
        blacklist_enabled=_any_true(report.is_blacklisted, report.is_freezable),
        mintable=report.is_mintable,
        balance_mutable=report.owner_can_change_balance,
    )


def _any_true(*flags: bool | None) -> bool | None:
    known = [f for f in flags if f is not None]
    return any(known) if known else None


# --- Solana RPC / Helius ---------------------------------------------------


def holders_from_accounts(
    accounts: list[TokenAccountBalance],
    mint: str,
    *,
    supply: TokenSupply | None = None,
    total_holders: int | None = None,
) -> HolderData:
    merged: dict[str, float] = {}
    for account in accounts:
        merged[account.holder] = merged.get(account.holder, 0.0) + float(account.amount)
    holders = tuple(HolderBalance(owner=owner, balance=balance) for owner, balance in merged.items())
    return HolderData(
        address=mint,
        holders=_largest_first(holders),
        total_holders=total_holders,
        supply=_f(supply.amount) if supply else None,
    )


def _largest_first(holders: tuple[HolderBalance, ...]) -> tuple[HolderBalance, ...]:
    return tuple(sorted(holders, key=lambda h: h.balance, reverse=True))
