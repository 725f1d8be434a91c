"""Volume-spike pattern risk.

Spike intensity compares last-hour volume with the 24h hourly average. Price
volatility, turnover against liquidity and a handful of manipulation tells
then decide between organic growth and a pump.
"""

from src.risk.models import FactorCollector, RiskCategory, SubScore, format_usd, missing_input
from src.routing.payloads import PoolData


def volume_change_pct(pool: PoolData) -> float | None:
    if pool.volume_h1 is None or not pool.volume_h24:
        return None
    hourly_avg = pool.volume_h24 / 24
    return (pool.volume_h1 - hourly_avg) / hourly_avg * 100


def spike_intensity(change_pct: float) -> int:
    if change_pct > 1000:
        return 100
    if change_pct > 500:
        return 90
    if change_pct > 200:
        return 80
    if change_pct > 100:
        return 70
    if change_pct > 50:
        return 60
    if change_pct > 20:
        return 40
    if change_pct > 10:
        return 20
    return 0


def spike_level(intensity: int) -> str:
    if intensity >= 90:
        return "MASSIVE"
    if intensity >= 70:
        return "LARGE"
    if intensity >= 50:
        return "MEDIUM"
    if intensity >= 20:
        return "SMALL"
    return "NONE"


def price_direction(change_h24: float | None) -> str:
    if change_h24 is None:
        return "UNKNOWN"
    if change_h24 > 20:
        return "PUMP"
    if change_h24 < -20:
        return "DUMP"
    return "STABLE"


def _turnover_risk(ratio: float | None) -> int:
    if ratio is None:
        return 100
    if ratio > 20:
        return 90
    if ratio > 10:
        return 70
    if ratio > 5:
        return 40
    return 10


def volume_spike_risk(pool: PoolData | None) -> SubScore:
    if pool is None or pool.volume_h24 is None:
        return missing_input("volume_spike", RiskCategory.MARKET, "Volume history")

    change = volume_change_pct(pool)
    if change is None:
        # No hourly split available: fall back on 24h turnover alone
        intensity = 50 if (pool.volume_h24 or 0) > 1_000_000 else 0
    else:
        intensity = spike_intensity(change)

    volatility = min(100.0, abs(pool.price_change_h24 or 0) + abs(pool.price_change_h1 or 0))
    direction = price_direction(pool.price_change_h24)
    ratio = pool.volume_liquidity_ratio
    turnover = _turnover_risk(ratio)
    consistency = max(0.0, 100 - abs(change or 0) / 10)

    f = FactorCollector(RiskCategory.MARKET)
    level = spike_level(intensity)
    if level != "NONE":
        if change is None:
            reason = f"{format_usd(pool.volume_h24)} traded in 24h with no hourly breakdown"
        else:
            reason = f"{level.capitalize()} volume spike: last hour {change:+.0f}% vs the 24h hourly average"
        f.add("spike_intensity", intensity, reason)
    if ratio is None:
        f.add("spike_turnover_unknown", turnover, "Volume cannot be compared with liquidity")
    elif 5 < ratio <= 10:
        f.add("spike_high_turnover", turnover, f"Volume is {ratio:.1f}x liquidity")
    if 20 < volatility <= 70:
        f.add("spike_price_swing", volatility, f"Combined price swing of {volatility:.0f}%")

    manipulation = 0
    if intensity > 80 and direction == "PUMP":
        manipulation += 30
        f.add("spike_with_pump", 30, "Volume spike coincides with a sharp price pump")
    if volatility > 70:
        manipulation += 25
        f.add("spike_volatility", 25, f"Combined price swing of {volatility:.0f}%")
    if ratio is not None and ratio > 10:
        manipulation += 20
        f.add("spike_wash_trading", 20, f"Volume is {ratio:.0f}x liquidity (possible wash trading)")
    if consistency < 30:
        manipulation += 15
        f.add("spike_inconsistent", 15, "Volume arrived in an abrupt burst")

    if manipulation > 70:
        pattern = "MANIPULATION"
    elif intensity > 60 and direction == "PUMP":
        pattern = "PUMP_AND_DUMP"
    elif intensity > 40 and direction == "STABLE":
        pattern = "ORGANIC_GROWTH"
    else:
        pattern = "NORMAL"

    score = 0.3 * intensity + 0.25 * volatility + 0.25 * turnover + 0.2 * min(100, manipulation)
    return SubScore(
        name="volume_spike",
        category=RiskCategory.MARKET,
        score=score,
        factors=tuple(f.items),
        details={
            "volume_change_pct": round(change, 1) if change is not None else None,
            "spike_intensity": intensity,
            "spike_level": level,
            "price_direction": direction,
            "pattern": pattern,
            "manipulation_risk": min(100, manipulation),
        },
    )
