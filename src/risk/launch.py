"""Launch quality for freshly listed tokens."""

from datetime import UTC, datetime

from src.risk.models import FactorCollector, RiskCategory, SubScore, format_usd, missing_input
from src.routing.payloads import PoolData

TOP_BAND = 90


def _liquidity_quality(liquidity: float | None) -> int:
    if liquidity is None:
        return 0
    if liquidity > 100_000:
        return 90
    if liquidity > 50_000:
        return 70
    if liquidity > 10_000:
        return 50
    return 20


def _price_stability(change_h24: float | None) -> int:
    if change_h24 is None:
        return 0
    move = abs(change_h24)
    if move < 10:
        return 90
    if move < 30:
        return 70
    if move < 50:
        return 50
    return 20


def _trading_activity(volume_h24: float | None) -> int:
    if volume_h24 is None:
        return 0
    if volume_h24 > 1_000_000:
        return 90
    if volume_h24 > 100_000:
        return 70
    if volume_h24 > 10_000:
        return 50
    return 20


def launch_label(quality: float) -> str:
    if quality >= 80:
        return "EXCELLENT"
    if quality >= 60:
        return "GOOD"
    if quality >= 40:
        return "SUSPICIOUS"
    return "POOR"


def _explain(f: FactorCollector, components: dict[str, int], pool: PoolData) -> None:
    """One factor per component that scored below its top band."""
    liquidity = components["liquidity"]
    if liquidity <= 20:
        f.add("launch_thin_liquidity", 100 - liquidity, "Launched with thin or unknown liquidity")
    elif liquidity < TOP_BAND:
        f.add(
            "launch_modest_liquidity",
            100 - liquidity,
            f"Liquidity {format_usd(pool.liquidity_usd)}, below $100K",
        )

    stability = components["price_stability"]
    if stability <= 20:
        f.add("launch_unstable_price", 100 - stability, "Price unstable or unknown since launch")
    elif stability < TOP_BAND:
        f.add("launch_price_swing", 100 - stability, f"Price moved {abs(pool.price_change_h24):.0f}% in 24h")

    activity = components["trading_activity"]
    if activity <= 20:
        f.add("launch_low_activity", 100 - activity, "Little or unknown trading since launch")
    elif activity < TOP_BAND:
        f.add(
            "launch_moderate_activity",
            100 - activity,
            f"24h volume {format_usd(pool.volume_h24)}, below $1M",
        )


def launch_quality_risk(pool: PoolData | None, now: datetime | None = None) -> SubScore:
    if pool is None:
        return missing_input("launch_quality", RiskCategory.TECHNICAL, "Launch data")

    now = now or datetime.now(UTC)
    components = {
        "liquidity": _liquidity_quality(pool.liquidity_usd),
        "price_stability": _price_stability(pool.price_change_h24),
        "trading_activity": _trading_activity(pool.volume_h24),
    }
    quality = sum(components.values()) / len(components)

    f = FactorCollector(RiskCategory.TECHNICAL)
    _explain(f, components, pool)

    return SubScore(
        name="launch_quality",
        category=RiskCategory.TECHNICAL,
        score=100 - quality,
        factors=tuple(f.items),
        details={
            "quality": round(quality, 1),
            "label": launch_label(quality),
            "components": components,
            "age_hours": pool.age_hours(now),
        },
    )
