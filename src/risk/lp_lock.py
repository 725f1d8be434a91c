"""LP-lock risk estimate.

None of the configured providers attests lock status, so this is inferred from
pool depth, age and turnover. The result is always marked ``estimated`` and
must not be presented as a verified lock.
"""

from datetime import UTC, datetime

from src.risk.models import FactorCollector, RiskCategory, SubScore, format_usd, missing_input
from src.routing.payloads import PoolData

LIKELY_LOCKED_MIN_LIQUIDITY = 1_000.0
LIKELY_LOCKED_MAX_SCORE = 50


def lp_lock_risk(pool: PoolData | None, now: datetime | None = None) -> SubScore:
    if pool is None:
        return missing_input("lp_lock", RiskCategory.SECURITY, "Pool data")

    now = now or datetime.now(UTC)
    f = FactorCollector(RiskCategory.SECURITY)
    f.add("lp_lock_unverified", 20, "LP lock status is estimated from market data, not verified on-chain")

    liquidity = pool.liquidity_usd
    if liquidity is None or liquidity < 1_000:
        f.add("lp_negligible", 40, "Liquidity too small to be worth locking")
    elif liquidity < 10_000:
        f.add("lp_small", 30, f"Small pool ({format_usd(liquidity)}) rarely carries a lock")
    elif liquidity < 50_000:
        f.add("lp_modest", 15, f"Modest pool ({format_usd(liquidity)})")

    age_hours = pool.age_hours(now)
    if age_hours is None:
        f.add("lp_age_unknown", 15, "Pool age unknown")
    elif age_hours < 24:
        f.add("lp_fresh_pool", 20, "Pool is less than a day old")
    elif age_hours < 168:
        f.add("lp_young_pool", 10, "Pool is less than a week old")

    ratio = pool.volume_liquidity_ratio
    if ratio is not None and ratio > 10:
        f.add("lp_churn", 15, f"Turnover of {ratio:.0f}x liquidity suggests the LP is being cycled")

    score = min(100.0, f.points)
    likely_locked = (liquidity or 0) > LIKELY_LOCKED_MIN_LIQUIDITY and score < LIKELY_LOCKED_MAX_SCORE
    return f.result(
        "lp_lock",
        details={"estimated": True, "likely_locked": likely_locked, "age_hours": age_hours},
    )
