"""Pool-level market risk: liquidity depth, price volatility, rug heuristics.

All three read a normalized ``PoolData``. A missing pool scores 100 with a
"data unavailable" factor instead of raising.
"""

from datetime import UTC, datetime

from src.risk.models import FactorCollector, RiskCategory, SubScore, format_usd, missing_input
from src.routing.payloads import PoolData


def liquidity_risk(pool: PoolData | None) -> SubScore:
    if pool is None or pool.liquidity_usd is None:
        return missing_input("liquidity", RiskCategory.MARKET, "Pool liquidity")

    liquidity = pool.liquidity_usd
    f = FactorCollector(RiskCategory.MARKET)

    if liquidity <= 0:
        f.add("liquidity_empty", 100, "Pool reports no liquidity")
    elif liquidity < 1_000:
        f.add("liquidity_below_1k", 60, f"Critically low liquidity ({format_usd(liquidity)})")
    elif liquidity < 5_000:
        f.add("liquidity_below_5k", 45, f"Very low liquidity ({format_usd(liquidity)})")
    elif liquidity < 25_000:
        f.add("liquidity_below_25k", 30, f"Low liquidity ({format_usd(liquidity)})")
    elif liquidity < 100_000:
        f.add("liquidity_below_100k", 15, f"Moderate liquidity ({format_usd(liquidity)})")
    elif liquidity < 500_000:
        f.add("liquidity_below_500k", 5, f"Fair liquidity ({format_usd(liquidity)})")

    ratio = pool.volume_liquidity_ratio
    if ratio is not None:
        if ratio > 20:
            f.add("volume_liquidity_extreme", 30, f"24h volume is {ratio:.0f}x liquidity (suspicious turnover)")
        elif ratio > 10:
            f.add("volume_liquidity_high", 20, f"24h volume is {ratio:.1f}x liquidity")
        elif ratio > 5:
            f.add("volume_liquidity_elevated", 10, f"24h volume is {ratio:.1f}x liquidity")
        elif 0 < ratio < 0.01:
            f.add("dead_pool", 15, "Almost no trading against the pool (dead pool pattern)")

    return SubScore(
        name="liquidity",
        category=RiskCategory.MARKET,
        score=f.points,
        factors=tuple(f.items),
        details={"liquidity_usd": liquidity, "volume_liquidity_ratio": ratio},
    )


def volatility_risk(pool: PoolData | None) -> SubScore:
    changes = (
        (pool.price_change_h1, pool.price_change_h6, pool.price_change_h24) if pool is not None else ()
    )
    if pool is None or all(c is None for c in changes):
        return missing_input("volatility", RiskCategory.MARKET, "Price change history")

    h1, h6, h24 = (abs(c) if c is not None else None for c in changes)
    f = FactorCollector(RiskCategory.MARKET)

    if h1 is not None:
        if h1 > 20:
            f.add("volatile_1h_extreme", 30, f"Price moved {h1:.0f}% in the last hour")
        elif h1 > 10:
            f.add("volatile_1h_high", 20, f"Price moved {h1:.0f}% in the last hour")
        elif h1 > 5:
            f.add("volatile_1h", 10, f"Price moved {h1:.1f}% in the last hour")

    if h6 is not None:
        if h6 > 50:
            f.add("volatile_6h_extreme", 20, f"Price moved {h6:.0f}% over 6 hours")
        elif h6 > 25:
            f.add("volatile_6h_high", 10, f"Price moved {h6:.0f}% over 6 hours")

    if h24 is not None:
        if h24 > 100:
            f.add("volatile_24h_extreme", 40, f"Price moved {h24:.0f}% in 24 hours")
        elif h24 > 50:
            f.add("volatile_24h_high", 25, f"Price moved {h24:.0f}% in 24 hours")
        elif h24 > 25:
            f.add("volatile_24h", 15, f"Price moved {h24:.0f}% in 24 hours")

    largest_move = max(c for c in (h1, h6, h24) if c is not None)
    txns = pool.txns_h24
    if txns is not None and largest_move > 10:
        if txns < 5:
            f.add("movement_without_trades", 25, f"{largest_move:.0f}% move on only {txns} trades in 24h")
        elif txns < 20:
            f.add("thin_trading", 15, f"{largest_move:.0f}% move on just {txns} trades in 24h")

    return SubScore(
        name="volatility",
        category=RiskCategory.MARKET,
        score=f.points,
        factors=tuple(f.items),
        details={"max_price_change_pct": largest_move, "txns_24h": txns},
    )


def age_band(age_hours: float | None) -> str:
    if age_hours is None:
        return "unknown"
    if age_hours < 1:
        return "brand_new"
    if age_hours < 24:
        return "very_new"
    if age_hours < 72:
        return "new"
    if age_hours < 168:
        return "recent"
    return "established"


def rug_heuristic_risk(pool: PoolData | None, now: datetime | None = None) -> SubScore:
    """Composite rug signal from liquidity, turnover, pair age, dumps and order flow."""
    if pool is None:
        return missing_input("rug_heuristic", RiskCategory.SECURITY, "Pool data")

    now = now or datetime.now(UTC)
    f = FactorCollector(RiskCategory.SECURITY)
    liquidity = pool.liquidity_usd

    if liquidity is None or liquidity < 10_000:
        f.add("rug_low_liquidity", 30, "Liquidity under $10K is easy to pull")
    elif liquidity < 50_000:
        f.add("rug_thin_liquidity", 15, "Liquidity under $50K")

    ratio = pool.volume_liquidity_ratio
    if ratio is not None and ratio > 10:
        f.add("rug_abnormal_turnover", 25, f"Volume is {ratio:.0f}x liquidity (possible wash trading)")

    age_hours = pool.age_hours(now)
    band = age_band(age_hours)
    if band == "unknown":
        f.add("pair_age_unknown", 20, "Pair creation time unknown")
    elif band == "brand_new":
        f.add("pair_brand_new", 25, "Pair created less than an hour ago")
    elif band == "very_new":
        f.add("pair_very_new", 20, f"Pair is only {age_hours:.0f} hours old")
    elif band == "new":
        f.add("pair_new", 10, f"Pair is {age_hours / 24:.1f} days old")
    elif band == "recent":
        f.add("pair_recent", 5, f"Pair is {age_hours / 24:.1f} days old")

    h24 = pool.price_change_h24
    if h24 is not None:
        if h24 < -50:
            f.add("price_collapse", 25, f"Price down {abs(h24):.0f}% in 24 hours")
        elif h24 < -30:
            f.add("price_drop", 10, f"Price down {abs(h24):.0f}% in 24 hours")

    buys, sells = pool.buys_h24, pool.sells_h24
    if buys is not None and sells is not None and buys + sells >= 10:
        if buys == 0 or sells == 0:
            f.add("one_sided_flow", 15, f"One-sided order flow ({buys} buys / {sells} sells)")
        elif buys / sells > 3:
            f.add("buy_imbalance", 10, f"Buys outnumber sells {buys / sells:.1f}:1 (possible bot buying)")
        elif sells / buys > 3:
            f.add("sell_imbalance", 15, f"Sells outnumber buys {sells / buys:.1f}:1")

    return SubScore(
        name="rug_heuristic",
        category=RiskCategory.SECURITY,
        score=f.points,
        factors=tuple(f.items),
        details={"age_hours": age_hours, "age_band": band},
    )
